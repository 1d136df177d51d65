"""Domain enumerations for the worker housing service.

Enums represent fixed sets of domain values (room gender, worker status, ...).
Values are the strings stored in documents.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class RoomGender(_ValuesMixin, str, Enum):
    """Which dormitory a room belongs to."""

    MEN = "men"
    WOMEN = "women"


class WorkerGender(_ValuesMixin, str, Enum):
    """Worker gender; selects the rooms a worker may be housed in."""

    MAN = "man"
    WOMAN = "woman"

    @property
    def room_gender(self) -> RoomGender:
        """Room gender matching this worker gender."""
        return RoomGender.MEN if self is WorkerGender.MAN else RoomGender.WOMEN


class WorkerStatus(_ValuesMixin, str, Enum):
    """Worker lifecycle status. Only active workers count in statistics."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class ExitReason(_ValuesMixin, str, Enum):
    """Reason recorded when a worker leaves."""

    END_OF_CONTRACT = "end_of_contract"
    RESIGNATION = "resignation"
    DISMISSAL = "dismissal"
    TRANSFER = "transfer"
    ILLNESS = "illness"
    RETIREMENT = "retirement"
    OTHER = "other"


class OccupancyStatus(_ValuesMixin, str, Enum):
    """Room fill level derived from occupancy over capacity."""

    FREE = "free"
    PARTIAL = "partial"
    FULL = "full"


class EntryDateFilter(_ValuesMixin, str, Enum):
    """Dashboard filter on worker entry dates."""

    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"
