"""Error taxonomy for termban."""


class TermbanError(Exception):
    """Base class for all termban errors."""


class InvalidInput(TermbanError, ValueError):
    """A task title was empty or whitespace only."""


class IndexOutOfRange(TermbanError, IndexError):
    """A column or task index does not exist on the board."""


class PersistenceError(TermbanError):
    """The snapshot file could not be read or written."""
