"""Exceptions for tzreader library."""


class ZoneinfoError(Exception):
    """Base exception for all tzreader errors."""


class ZoneinfoParseError(ZoneinfoError, ValueError):
    """Exception raised when TZif content cannot be decoded.

    The public `parse_zoneinfo` entry point never lets this escape and
    instead returns None. It is raised by `read_tzif` for callers that want
    to know why the content was rejected.
    """


class ZoneinfoTruncatedError(ZoneinfoParseError):
    """Exception raised when a declared section runs past the end of the content.

    The header counts describe how many bytes follow, and a file that was
    cut short (or crafted with inflated counts) is rejected before any
    out of range read happens.
    """


class ZoneNotFoundError(ZoneinfoError):
    """Exception raised when a zone cannot be loaded through the cache."""


class ZoneinfoDirectoryError(ZoneinfoError):
    """Exception raised when no zoneinfo directory is available."""
