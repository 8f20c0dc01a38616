"""Exceptions raised by taxparcels."""


class TaxParcelsError(Exception):
    """Base class for every error the tool reports to the operator."""
    pass


class ConfigError(TaxParcelsError, ValueError):
    """Exception raised for an unusable input selection or config file."""
    pass


class ParcelIOError(TaxParcelsError, OSError):
    """Exception raised when a file cannot be opened, read, created or written."""
    pass


class ParseError(TaxParcelsError):
    """Exception raised when an input document cannot be decoded."""
    pass


class SerializeError(TaxParcelsError):
    """Exception raised when a filtered document cannot be encoded."""
    pass
