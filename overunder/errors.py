"""Exception hierarchy shared across the package."""


class OverUnderError(Exception):
    """Base class for all package errors."""
    pass


class StorageError(OverUnderError):
    """Persistence store could not be written"""
    pass


class ChannelError(OverUnderError):
    """Model channel failed to produce a response"""
    pass


class ReportParseError(OverUnderError):
    """Report fence payload is not a valid report"""
    pass
