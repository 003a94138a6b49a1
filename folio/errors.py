"""Exception classes for the index engine and its input boundaries.

Only the boundary classes are ever raised out of a public call:
InvalidWeightError at basket entry, InvalidBarError for malformed bars.
DataUnavailableError and InsufficientOverlapError are raised internally
and converted to omissions by the caller that owns the loop.
"""


class FolioError(Exception):
    """Base exception for index engine operations."""


class DataUnavailableError(FolioError):
    """Raised when the market data provider cannot supply bars for a ticker."""


class InsufficientOverlapError(FolioError):
    """Raised when a correlation candidate has too few paired returns."""


class InvalidWeightError(FolioError, ValueError):
    """Raised when a basket weight is negative or not a finite number."""


class InvalidBarError(FolioError, ValueError):
    """Raised when a daily bar or bar sequence is malformed or out of order."""
