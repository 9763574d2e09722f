"""Tests for the economy configuration layer."""

from decimal import Decimal

import pytest

from hotdog_backend.game_logic import (
    ConfigurationError,
    StandOverrides,
    build_stand_configuration,
    get_default_production_configuration,
)
from hotdog_backend.shared import Money, UpgradeKind


def test_defaults_describe_a_playable_stand() -> None:
    config = get_default_production_configuration()

    assert config.currency == "USD"
    assert config.initial_capacity == 100
    assert config.cost_scaling_factor == Decimal("1.5")
    assert config.base_cost(UpgradeKind.RATE).amount == Decimal("10.00")
    assert config.base_cost(UpgradeKind.CAPACITY).amount == Decimal("25.00")
    assert config.increment(UpgradeKind.RATE) == Decimal("0.5")
    assert config.increment(UpgradeKind.CAPACITY) == Decimal(50)


def test_environment_overrides_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOTDOG_ECONOMY_INITIAL_CAPACITY", "250")
    monkeypatch.setenv("HOTDOG_ECONOMY_CONVERSION_RATE", "3.25")
    get_default_production_configuration.cache_clear()

    config = get_default_production_configuration()

    assert config.initial_capacity == 250
    assert config.conversion_rate == Decimal("3.25")


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("HOTDOG_ECONOMY_COST_SCALING_FACTOR", "1.0"),
        ("HOTDOG_ECONOMY_INITIAL_CAPACITY", "-5"),
        ("HOTDOG_ECONOMY_RATE_UPGRADE_BASE_COST", "0"),
        ("HOTDOG_ECONOMY_AUTO_COLLECT_INTERVAL_SECONDS", "0"),
    ],
)
def test_invalid_environment_raises_configuration_error(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)
    get_default_production_configuration.cache_clear()

    with pytest.raises(ConfigurationError):
        get_default_production_configuration()


def test_stand_overrides_replace_selected_values() -> None:
    defaults = get_default_production_configuration()
    overrides = StandOverrides(
        initial_rate=Decimal(3),
        starting_balance=Money(amount=Decimal(50)),
        auto_collect_enabled=True,
    )

    config = build_stand_configuration(overrides)

    assert config.initial_rate == Decimal(3)
    assert config.starting_balance.amount == Decimal("50.00")
    assert config.auto_collect_enabled is True
    assert config.initial_capacity == defaults.initial_capacity
    assert build_stand_configuration() is defaults


def test_overrides_in_foreign_currency_are_rejected() -> None:
    overrides = StandOverrides(starting_balance=Money(amount=Decimal(5), currency="EUR"))

    with pytest.raises(ConfigurationError):
        build_stand_configuration(overrides)
