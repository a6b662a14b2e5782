"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class BgmBuilderError(Exception):
    """Base exception for all application-specific errors."""


class ArchiveStructureError(BgmBuilderError):
    """Raised when an expected archive folder, image, or node cannot be found."""


class MapIdError(ArchiveStructureError):
    """Raised when a map asset name is not a valid numeric identifier."""


class FeedError(BgmBuilderError):
    """Raised when one of the remote data feeds cannot be fetched or decoded."""


class ConfigurationError(BgmBuilderError):
    """Raised for issues related to configuration loading or validation."""
