"""Sentinel types for the partial-record field store."""

from typing import Final, override


class Unset:
    """Sentinel class for unset field paths.

    Returned by the field store for a path that has never been assigned,
    so it can be told apart from a path explicitly set to absent.
    """

    def __bool__(self) -> bool:
        return False

    @override
    def __repr__(self) -> str:
        return "UNSET"


class Absent:
    """Sentinel class for fields explicitly set to no value.

    Only optional field paths may hold this marker. Reading such a path
    yields None, and the backing value is not consulted.
    """

    def __bool__(self) -> bool:
        return False

    @override
    def __repr__(self) -> str:
        return "ABSENT"


UNSET: Final[Unset] = Unset()
ABSENT: Final[Absent] = Absent()
