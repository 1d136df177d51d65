"""Domain value objects."""

from app.domain.value_objects.core import RoomPlan, RoomSpec

__all__ = [
    "RoomPlan",
    "RoomSpec",
]
