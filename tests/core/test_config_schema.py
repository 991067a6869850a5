"""Tests for daysay.core.config_schema and Config.validated()."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from daysay.core.config import Config, reset_config
from daysay.core.config_schema import DaySayConfig
from daysay.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _reset_singleton():
    reset_config()
    yield
    reset_config()


@pytest.mark.smoke
class TestConfigSchema:
    def test_valid_config_roundtrip(self):
        data = {
            "paths": {"data_dir": "/tmp/test-data", "journal_dir": "/tmp/test-journal"},
            "journal": {"lexicon_file": "/tmp/lexicon.yaml", "debug": "true"},
            "sharing": {"attribution": "sent from my phone"},
            "logging": {"level": "info"},
        }
        cfg = DaySayConfig.model_validate(data)
        assert cfg.paths.data_dir == Path("/tmp/test-data")
        assert cfg.paths.journal_dir == Path("/tmp/test-journal")
        assert cfg.journal.lexicon_file == Path("/tmp/lexicon.yaml")
        assert cfg.journal.debug is True
        assert cfg.sharing.attribution == "sent from my phone"
        assert cfg.logging.level == "INFO"

    def test_defaults_populate(self):
        cfg = DaySayConfig()
        assert cfg.paths.data_dir is not None
        assert cfg.journal.lexicon_file is None
        assert cfg.journal.storage_keys.version == "daysay_journal_version"
        assert cfg.sharing.share_title == "DaySay Journal Entry"

    def test_path_expansion(self):
        cfg = DaySayConfig.model_validate({"paths": {"data_dir": "~/.daysay-data", "log_dir": ""}})
        assert "~" not in str(cfg.paths.data_dir)
        assert cfg.paths.log_dir is None

    def test_blank_lexicon_file_is_none(self):
        cfg = DaySayConfig.model_validate({"journal": {"lexicon_file": "  "}})
        assert cfg.journal.lexicon_file is None

    def test_empty_storage_key_rejected(self):
        with pytest.raises(ValidationError):
            DaySayConfig.model_validate({"journal": {"storage_keys": {"entries": " "}}})

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            DaySayConfig.model_validate({"logging": {"level": "LOUD"}})

    def test_extra_sections_allowed(self):
        cfg = DaySayConfig.model_validate({"custom": {"anything": 1}})
        assert cfg.model_extra["custom"] == {"anything": 1}


class TestConfigValidated:
    def test_validated_from_defaults(self, tmp_dir):
        cfg = Config(data_dir=tmp_dir).validated()
        assert isinstance(cfg, DaySayConfig)
        assert cfg.paths.data_dir == Path(tmp_dir)

    def test_validated_env_strings_coerced(self, tmp_dir, monkeypatch):
        monkeypatch.setenv("DAYSAY_JOURNAL__DEBUG", "false")
        cfg = Config(data_dir=tmp_dir).validated()
        assert cfg.journal.debug is False

    def test_validated_raises_configuration_error(self, tmp_dir):
        config = Config(data_dir=tmp_dir)
        config.set("logging.level", "nope")
        with pytest.raises(ConfigurationError):
            config.validated()
