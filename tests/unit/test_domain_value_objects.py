"""Tests for RoomPlan and RoomSpec."""

import pytest

from app.domain.enums import RoomGender
from app.domain.exceptions import ValidationException
from app.domain.value_objects import RoomPlan, RoomSpec


def test_default_plan_generates_twenty_rooms() -> None:
    plan = RoomPlan()
    specs = plan.room_specs()
    assert plan.total_rooms == 20
    assert plan.total_capacity == 80
    assert len(specs) == 20
    assert specs[0] == RoomSpec("101", RoomGender.MEN, 4)
    assert specs[9].number == "110"
    assert specs[10] == RoomSpec("201", RoomGender.WOMEN, 4)
    assert specs[-1].number == "210"


def test_plan_totals_use_per_gender_capacity() -> None:
    plan = RoomPlan(men_count=3, men_capacity=2, women_count=2, women_capacity=6)
    assert plan.total_rooms == 5
    assert plan.total_capacity == 3 * 2 + 2 * 6
    assert sum(spec.capacity for spec in plan.room_specs()) == plan.total_capacity


def test_plan_without_auto_creation_is_empty() -> None:
    plan = RoomPlan(auto_create_rooms=False, men_count=-5, men_capacity=0)
    assert plan.room_specs() == []
    assert plan.total_rooms == 0
    assert plan.total_capacity == 0


def test_plan_with_zero_rooms_of_one_gender() -> None:
    plan = RoomPlan(men_count=0, men_capacity=0, women_count=2)
    assert [spec.number for spec in plan.room_specs()] == ["201", "202"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"men_count": -1},
        {"women_capacity": 0},
        {"men_start": -1},
    ],
)
def test_plan_rejects_invalid_values(kwargs) -> None:
    with pytest.raises(ValidationException):
        RoomPlan(**kwargs)


def test_plan_rejects_overlapping_numbers() -> None:
    with pytest.raises(ValidationException) as exc_info:
        RoomPlan(men_start=101, men_count=150, women_start=201)
    assert exc_info.value.details["field"] == "women_start"
