from __future__ import annotations


class RegionsError(Exception):
    """Base error for province/city operations.

    ``field`` names the input field the error belongs to so form layers can
    attach it as a field-level message.
    """

    field: str | None = None

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if field is not None:
            self.field = field


class DuplicateNameError(RegionsError):
    field = "name"


class ForeignKeyError(RegionsError):
    field = "province"


class NotFoundError(RegionsError):
    pass


class InvalidNameError(RegionsError):
    field = "name"
