# src/habithub/errors.py


class HabitHubError(Exception):
    """Base class for every domain error."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(HabitHubError):
    """Malformed or missing request data."""

    status_code = 400


class NotFound(HabitHubError):
    status_code = 404


class InvalidOperation(HabitHubError):
    """Well-formed request that breaks a domain rule."""

    status_code = 400


class StorageFailure(HabitHubError):
    status_code = 500


class DuplicateKey(HabitHubError):
    """Raised by a store when an insert hits a uniqueness constraint."""

    status_code = 409
