"""DaySay — voice journaling core.

Command/mood/tag extraction from transcribed speech, and a persisted
store of dated journal entries.
"""

__version__ = "0.1.0"
