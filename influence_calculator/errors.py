"""Exceptions raised by the influence calculator."""


class DataError(Exception):
    """Base exception for the static data layer."""


class DataLoadError(DataError):
    """Raised when a data file is missing, unreachable or not valid JSON."""


class DataValidationError(DataError):
    """Raised when data content fails structural validation."""


class CalculatorError(ValueError):
    """Base class for rejected user input.

    ``title`` is a short heading suitable for a notification; the exception
    message is the longer description.
    """

    title = "Invalid Input"

    def __init__(self, message: str, title: str | None = None) -> None:
        super().__init__(message)
        if title is not None:
            self.title = title

    @property
    def description(self) -> str:
        return str(self)


class LevelOutOfBounds(CalculatorError):
    title = "Invalid Level Range"


class InvalidLevelRange(CalculatorError):
    title = "Invalid Range"


class UnknownCompanion(CalculatorError):
    title = "No Companion Selected"


class CompanionNotFound(UnknownCompanion):
    title = "Companion Not Found"


class HarvestError(Exception):
    """Raised when the companion index page cannot be scraped."""
