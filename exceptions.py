# exceptions.py
"""Errors that abort a simulator run."""

class CacheSimError(Exception):
    """Base class for simulator errors."""

class InstructionError(CacheSimError):
    """A malformed instruction line."""

    def __init__(self, line_no, line, message):
        self.line_no = line_no
        self.line = line
        super().__init__(f"line {line_no}: {message} ({line!r})")

class ConfigurationError(CacheSimError):
    """Config file missing, unreadable or holding invalid values."""
