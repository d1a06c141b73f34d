"""Exception types raised by the cafe simulation core."""


class CafeSimError(Exception):
    """Base class for every error the core raises."""


class PreconditionViolation(CafeSimError, ValueError):
    """Configuration that the engines cannot work with, caught at setup time."""


class QuizFinishedError(CafeSimError):
    """The quiz session has completed and can no longer be driven."""


class StageError(CafeSimError):
    """A session operation was called outside the stage that allows it."""

    def __init__(self, operation: str, stage) -> None:
        super().__init__(f"{operation} is not allowed during {stage.value}")
        self.operation = operation
        self.stage = stage


class UnknownIngredientError(CafeSimError, KeyError):
    """The ingredient id is not stocked in the pantry."""
