"""Exceptions raised by Trainwell."""


class TrainwellError(Exception):
    """Base class for Trainwell errors."""
    pass


class InvalidInputError(TrainwellError, ValueError):
    """Raised when an operation receives a malformed input shape."""
    pass


class RepositoryError(TrainwellError):
    """Raised when a storage backend fails to read or write."""
    pass
