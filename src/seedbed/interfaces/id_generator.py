"""Source of the unique suffixes in generated database names."""

import abc

# pylint: disable=too-few-public-methods


class IdGenerator(abc.ABC):
    """Produce identifiers for naming per-run logical databases.

    Identifiers must be unique, non-decreasing in generation order and use
    only characters valid in a database name (letters, digits, ``_``, ``-``).
    """

    @abc.abstractmethod
    def new_id(self) -> str:
        """Return the next identifier."""
