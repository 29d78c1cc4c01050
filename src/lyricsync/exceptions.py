"""Custom exceptions for lyricsync."""

class LyricSyncError(Exception):
    """Base exception for lyricsync."""
    pass

class ParseError(LyricSyncError):
    """The lyric text could not be turned into a Document."""
    pass

class DocumentError(LyricSyncError):
    """Structurally invalid document data."""
    pass

class ConfigError(LyricSyncError):
    """Invalid configuration value."""
    pass

class ValidationError(LyricSyncError):
    """Invalid input parameters."""
    pass
