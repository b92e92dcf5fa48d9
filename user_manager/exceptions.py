"""
Project-wide custom exception hierarchy.
All modules raise subclasses of UserManagerError — never bare Exception.
"""

__all__ = [
    "UserManagerError",
    "StoreError",
    "TransferError",
    "ImportFormatError",
    "ImportParseError",
]


class UserManagerError(Exception):
    """Root exception for all user-manager errors."""


# ── Store ─────────────────────────────────────────────────────────────────────

class StoreError(UserManagerError):
    """Raised on storage I/O errors or a corrupt persisted blob."""


# ── Import / export ───────────────────────────────────────────────────────────

class TransferError(UserManagerError):
    """Base class for import/export errors."""


class ImportFormatError(TransferError):
    """Raised when an imported payload parses but is not a list of user objects."""


class ImportParseError(TransferError):
    """Raised when an imported payload cannot be read or is not valid JSON."""
