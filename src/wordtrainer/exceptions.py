"""Errors raised by the trainer core."""


class WordTrainerError(Exception):
    """Base class for trainer errors."""


class MalformedWordError(WordTrainerError, ValueError):
    """A word side is empty after trimming."""


class InvalidDateError(WordTrainerError, ValueError):
    """A stored review date cannot be parsed."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid review date: {value!r}")


class InvalidStateError(WordTrainerError, RuntimeError):
    """A session operation was called in a state that does not allow it.

    This signals a host programming error, e.g. answering a finished
    session or going back with an empty history.
    """
