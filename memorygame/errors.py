"""Error taxonomy shared by the leaderboard service and the game engine."""


class MemoryGameError(Exception):
    """Base class for errors raised by the memorygame package."""


class ValidationError(MemoryGameError):
    """Client supplied an invalid value; `field` names the first bad input."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class StoreError(MemoryGameError):
    """The score store could not be read or written."""
