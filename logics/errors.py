class FileLoadError(ValueError):
    """Raised when an input file cannot be turned into a usable table."""


class ColumnSelectionError(ValueError):
    """Raised when processing is triggered without a valid column selection."""


class NoMatchesError(ValueError):
    """Raised when a full matching pass finds no transaction for any account."""
