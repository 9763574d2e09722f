"""Economic configuration objects for hot dog stands."""

from __future__ import annotations

from decimal import Decimal
from functools import cache

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from hotdog_backend.game_logic.errors import configuration_guard
from hotdog_backend.shared.value_objects import Money, UpgradeKind


class ProductionDefaults(BaseSettings):
    """Load default economic parameters from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HOTDOG_ECONOMY_",
        extra="ignore",
    )

    currency: str = Field(default="USD", min_length=3, max_length=3)
    starting_balance: Decimal = Field(default=Decimal(0), ge=0)
    initial_capacity: int = Field(default=100, ge=0)
    initial_rate: Decimal = Field(default=Decimal("1.0"), ge=0)
    efficiency: Decimal = Field(default=Decimal("1.0"), ge=0)
    conversion_rate: Decimal = Field(default=Decimal("2.0"), ge=0)
    rate_upgrade_base_cost: Decimal = Field(default=Decimal(10), gt=0)
    rate_upgrade_increment: Decimal = Field(default=Decimal("0.5"), ge=0)
    capacity_upgrade_base_cost: Decimal = Field(default=Decimal(25), gt=0)
    capacity_upgrade_increment: int = Field(default=50, ge=0)
    cost_scaling_factor: Decimal = Field(default=Decimal("1.5"), gt=1)
    auto_collect_enabled: bool = False
    auto_collect_interval_seconds: float = Field(default=5.0, gt=0)
    offline_progress_limit_seconds: float = Field(default=8 * 60 * 60, ge=0)

    def to_config(self) -> ProductionConfiguration:
        """Convert defaults into an immutable configuration object."""
        return ProductionConfiguration(
            starting_balance=Money(amount=self.starting_balance, currency=self.currency),
            initial_capacity=self.initial_capacity,
            initial_rate=self.initial_rate,
            efficiency=self.efficiency,
            conversion_rate=self.conversion_rate,
            rate_upgrade_base_cost=Money(
                amount=self.rate_upgrade_base_cost, currency=self.currency
            ),
            rate_upgrade_increment=self.rate_upgrade_increment,
            capacity_upgrade_base_cost=Money(
                amount=self.capacity_upgrade_base_cost, currency=self.currency
            ),
            capacity_upgrade_increment=self.capacity_upgrade_increment,
            cost_scaling_factor=self.cost_scaling_factor,
            auto_collect_enabled=self.auto_collect_enabled,
            auto_collect_interval_seconds=self.auto_collect_interval_seconds,
            offline_progress_limit_seconds=self.offline_progress_limit_seconds,
        )


class ProductionConfiguration(BaseModel):
    """Immutable representation of the economic parameters for a stand."""

    model_config = ConfigDict(frozen=True)

    starting_balance: Money
    initial_capacity: int = Field(ge=0)
    initial_rate: Decimal = Field(ge=0)
    efficiency: Decimal = Field(ge=0)
    conversion_rate: Decimal = Field(ge=0)
    rate_upgrade_base_cost: Money
    rate_upgrade_increment: Decimal = Field(ge=0)
    capacity_upgrade_base_cost: Money
    capacity_upgrade_increment: int = Field(ge=0)
    cost_scaling_factor: Decimal = Field(gt=1)
    auto_collect_enabled: bool = False
    auto_collect_interval_seconds: float = Field(gt=0)
    offline_progress_limit_seconds: float = Field(ge=0)

    @model_validator(mode="after")
    def _validate_costs(self) -> ProductionConfiguration:
        """Ensure every price is positive and expressed in the same currency."""
        for cost in (self.rate_upgrade_base_cost, self.capacity_upgrade_base_cost):
            if cost.amount <= 0:
                msg = "Upgrade base costs must be positive."
                raise ValueError(msg)
            if cost.currency != self.starting_balance.currency:
                msg = "Upgrade costs must use the starting balance currency."
                raise ValueError(msg)
        if self.starting_balance.amount < 0:
            msg = "Starting balance must be non-negative."
            raise ValueError(msg)
        return self

    @property
    def currency(self) -> str:
        """Currency code shared by every amount in this configuration."""
        return self.starting_balance.currency

    def base_cost(self, kind: UpgradeKind) -> Money:
        """Return the price of the first purchase on the *kind* track."""
        if kind is UpgradeKind.RATE:
            return self.rate_upgrade_base_cost
        return self.capacity_upgrade_base_cost

    def increment(self, kind: UpgradeKind) -> Decimal:
        """Return the amount one purchase adds to the *kind* parameter."""
        if kind is UpgradeKind.RATE:
            return self.rate_upgrade_increment
        return Decimal(self.capacity_upgrade_increment)

    def for_stand(
        self, overrides: StandOverrides | None = None
    ) -> ProductionConfiguration:
        """Create a stand-specific configuration by applying overrides if provided."""
        if overrides is None:
            return self
        return overrides.apply(self)


class StandOverrides(BaseModel):
    """Optional stand-specific overrides for economic settings."""

    model_config = ConfigDict(frozen=True)

    starting_balance: Money | None = None
    initial_capacity: int | None = Field(default=None, ge=0)
    initial_rate: Decimal | None = Field(default=None, ge=0)
    efficiency: Decimal | None = Field(default=None, ge=0)
    conversion_rate: Decimal | None = Field(default=None, ge=0)
    cost_scaling_factor: Decimal | None = Field(default=None, gt=1)
    auto_collect_enabled: bool | None = None
    auto_collect_interval_seconds: float | None = Field(default=None, gt=0)

    def apply(self, config: ProductionConfiguration) -> ProductionConfiguration:
        """Return a copy of *config* with overrides applied."""
        updates = self.model_dump(exclude_none=True)
        if self.starting_balance is not None:
            updates["starting_balance"] = self.starting_balance
        merged = {**config.model_dump(), **updates}
        with configuration_guard():
            return ProductionConfiguration.model_validate(merged)


@cache
def get_default_production_configuration() -> ProductionConfiguration:
    """Return the cached default economic configuration."""
    with configuration_guard():
        return ProductionDefaults().to_config()


def build_stand_configuration(
    overrides: StandOverrides | None = None,
) -> ProductionConfiguration:
    """Construct a configuration for a stand, applying optional overrides."""
    defaults = get_default_production_configuration()
    if overrides is None:
        return defaults
    return overrides.apply(defaults)


__all__ = [
    "ProductionConfiguration",
    "ProductionDefaults",
    "StandOverrides",
    "build_stand_configuration",
    "get_default_production_configuration",
]
