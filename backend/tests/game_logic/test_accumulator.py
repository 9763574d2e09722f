"""Tests for bounded hot dog production."""

from decimal import Decimal

import pytest

from hotdog_backend.game_logic import Accumulator, AccumulatorState, ConfigurationError
from hotdog_backend.shared import UpgradeKind


def test_advance_produces_rate_times_elapsed() -> None:
    accumulator = Accumulator.create(capacity=100, rate=1.0, efficiency=1.0)

    state = accumulator.advance(50)

    assert state.current_quantity == Decimal(50)
    assert state.active is True


def test_full_stand_stays_full_and_inactive() -> None:
    accumulator = Accumulator.create(capacity=100, rate=1.0, current_quantity=100)
    assert accumulator.state.active is False

    state = accumulator.advance(10)

    assert state.current_quantity == Decimal(100)
    assert state.active is False


def test_overshoot_is_clamped_to_capacity() -> None:
    accumulator = Accumulator.create(capacity=10, rate=3)

    state = accumulator.advance(5)

    assert state.current_quantity == Decimal(10)
    assert state.is_full
    assert state.active is False


def test_zero_capacity_never_produces() -> None:
    accumulator = Accumulator.create(capacity=0, rate=5)

    state = accumulator.advance(100)

    assert state.current_quantity == 0
    assert state.active is False


def test_efficiency_scales_production() -> None:
    accumulator = Accumulator(
        AccumulatorState(capacity=100, rate=Decimal(2)), efficiency=0.5
    )

    assert accumulator.advance(10).current_quantity == Decimal(10)


@pytest.mark.parametrize("elapsed", [0, -3])
def test_non_positive_elapsed_is_a_no_op(elapsed: float) -> None:
    accumulator = Accumulator.create(capacity=100, rate=1, current_quantity=7)
    before = accumulator.state

    assert accumulator.advance(elapsed) == before


def test_fractional_ticks_do_not_drift() -> None:
    accumulator = Accumulator.create(capacity=100, rate=1)

    for _ in range(10):
        accumulator.advance(0.1)

    assert accumulator.state.current_quantity == Decimal(1)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"capacity": -1, "rate": 1},
        {"capacity": 10, "rate": -0.5},
        {"capacity": 10, "rate": 1, "current_quantity": 11},
        {"capacity": 10, "rate": 1, "efficiency": -1},
    ],
)
def test_create_rejects_invalid_parameters(kwargs: dict[str, object]) -> None:
    with pytest.raises(ConfigurationError):
        Accumulator.create(**kwargs)


def test_state_rejects_quantity_above_capacity() -> None:
    with pytest.raises(ConfigurationError, match="stand state"):
        AccumulatorState(current_quantity=Decimal(5), capacity=1)


def test_capacity_upgrade_resumes_full_stand() -> None:
    accumulator = Accumulator.create(capacity=10, rate=1, current_quantity=10)

    state = accumulator.apply_upgrade(UpgradeKind.CAPACITY, 5)

    assert state.capacity == 15
    assert state.active is True
    assert accumulator.advance(2).current_quantity == Decimal(12)


def test_rate_upgrade_raises_rate() -> None:
    accumulator = Accumulator.create(capacity=100, rate=1)

    state = accumulator.apply_upgrade(UpgradeKind.RATE, Decimal("0.5"))

    assert state.rate == Decimal("1.5")
    assert accumulator.advance(2).current_quantity == Decimal(3)
