"""Domain level errors shared by the model and the storage adapters."""


class IllegalValueError(ValueError):
    """Raised when data does not satisfy a domain constraint."""
    pass


class InvalidFormatError(IllegalValueError):
    """Raised when a value object is constructed from an invalid value."""
    pass


class DuplicateIdError(IllegalValueError):
    """Raised when two records claim the same identity."""
    pass
