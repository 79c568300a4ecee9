# azure_unused_storage_tool/exceptions.py
"""Error types raised by the scanner."""


class UnusedStorageError(Exception):
    """Base class for all errors raised by this tool."""


class AuthError(UnusedStorageError):
    """No valid Azure credential/session could be obtained."""


class ScopeNotFoundError(UnusedStorageError):
    """The subscription or resource group could not be resolved."""


class TransientEnumerationError(UnusedStorageError):
    """A listing call failed in a way that may succeed on retry."""


class ExportWriteError(UnusedStorageError):
    """The CSV report could not be written."""
