"""
FUTURY - Resource Ledger
Tracks resource stocks, production rates, and multipliers.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional
import logging

from ..config import EconomyConfig, ECONOMY, Resource, RESOURCE_NAMES

logger = logging.getLogger(__name__)


@dataclass
class ResourceStock:
    """
    One resource: current amount, base rate, and multiplier.

    `amount` keeps full precision; rounding is only applied to reported
    values so that many small advances match one large advance.
    """

    name: str
    amount: float = 0.0
    base_rate: float = 0.0     # Per simulation year
    multiplier: float = 1.0

    # Derived from completed buildings, replaced (never accumulated)
    bonus_rate: float = 0.0
    bonus_multiplier: float = 0.0

    @property
    def is_population(self) -> bool:
        return self.name == Resource.POPULATION.value

    @property
    def effective_rate(self) -> float:
        """Production per simulation year including multipliers and bonuses."""
        return (self.base_rate + self.bonus_rate) * (self.multiplier + self.bonus_multiplier)

    def advance(self, elapsed_years: float):
        rate = self.effective_rate
        if self.is_population:
            self.amount *= (1 + rate * elapsed_years)
        else:
            self.amount += rate * elapsed_years
        self.amount = max(0.0, self.amount)

    def __repr__(self) -> str:
        return f"ResourceStock({self.name}: {self.amount:.2f} @ {self.effective_rate:.2f}/yr)"


class ResourceLedger:
    """
    The session's single mutable resource store.

    Mutated by the orchestrator's tick and by spend calls triggered by user
    actions. Emits no events; callers decide when to notify.
    """

    def __init__(self, config: EconomyConfig = ECONOMY):
        self.config = config
        self.stocks: Dict[str, ResourceStock] = {
            name: ResourceStock(name=name, base_rate=config.base_production.get(name, 0.0))
            for name in RESOURCE_NAMES
        }

    def initialize(self, starting_stocks: Optional[Mapping[str, float]] = None,
                   starting_multipliers: Optional[Mapping[str, float]] = None):
        """Set starting amounts and multipliers. Unset fields use configured defaults."""
        starting_stocks = starting_stocks or {}
        starting_multipliers = starting_multipliers or {}

        for name, stock in self.stocks.items():
            amount = starting_stocks.get(name)
            if amount is None:
                amount = self.config.starting_stocks.get(name, 0.0)
            stock.amount = max(0.0, float(amount))

            multiplier = starting_multipliers.get(name)
            stock.multiplier = 1.0 if multiplier is None else float(multiplier)

            stock.base_rate = self.config.base_production.get(name, 0.0)
            stock.bonus_rate = 0.0
            stock.bonus_multiplier = 0.0

        logger.info(f"Resources initialized: {self.get_all()}")

    def _stock(self, resource: str) -> ResourceStock:
        stock = self.stocks.get(resource)
        if stock is None:
            raise KeyError(f"Unknown resource: {resource}")
        return stock

    # =========================================================================
    # ACCRUAL
    # =========================================================================

    def advance(self, elapsed_years: float):
        """Accrue production over elapsed simulation years."""
        if elapsed_years < 0:
            raise ValueError(f"Cannot advance by negative time: {elapsed_years}")
        if elapsed_years == 0:
            return

        for stock in self.stocks.values():
            stock.advance(elapsed_years)

    # =========================================================================
    # AFFORDABILITY / SPENDING
    # =========================================================================

    @staticmethod
    def _check_costs(costs: Mapping[str, float]):
        for resource, cost in costs.items():
            if cost < 0:
                raise ValueError(f"Negative cost for {resource}: {cost}")

    def can_afford(self, costs: Mapping[str, float]) -> bool:
        """True iff every named resource covers its cost."""
        self._check_costs(costs)
        return not self.missing(costs)

    def missing(self, costs: Mapping[str, float]) -> Dict[str, float]:
        """Shortfall per resource for the given costs."""
        shortfall = {}
        for resource, cost in costs.items():
            stock = self.stocks.get(resource)
            if stock is None:
                logger.debug(f"Ignoring cost for untracked resource '{resource}'")
                continue
            if stock.amount < cost:
                shortfall[resource] = cost - stock.amount
        return shortfall

    def spend(self, costs: Mapping[str, float]) -> bool:
        """
        Debit each named resource, clamping at zero.

        Never raises on shortfall; callers are expected to check
        `can_afford` first.

        Returns:
            True if every debit was exact (no clamping).
        """
        self._check_costs(costs)
        exact = True

        for resource, cost in costs.items():
            stock = self.stocks.get(resource)
            if stock is None:
                logger.debug(f"Ignoring cost for untracked resource '{resource}'")
                continue
            if stock.amount < cost:
                exact = False
                logger.debug(f"{resource}: Shortfall {cost - stock.amount:.2f} clamped at 0")
            stock.amount = max(0.0, stock.amount - cost)

        return exact

    def add(self, resource: str, amount: float):
        """Credit (or debit, if negative) a resource, clamping at zero."""
        stock = self._stock(resource)
        stock.amount = max(0.0, stock.amount + amount)

    def grant(self, rewards: Mapping[str, float]):
        """Credit a reward map, ignoring untracked resources."""
        for resource, amount in rewards.items():
            if resource in self.stocks:
                self.add(resource, amount)

    # =========================================================================
    # MULTIPLIERS / BONUSES
    # =========================================================================

    def apply_multiplier_delta(self, resource: str, delta: float):
        stock = self._stock(resource)
        stock.multiplier += delta
        logger.debug(f"{resource}: multiplier {stock.multiplier:.3f} (delta {delta:+.3f})")

    def set_multiplier(self, resource: str, value: float):
        self._stock(resource).multiplier = value

    def set_base_rate(self, resource: str, rate: float):
        self._stock(resource).base_rate = rate

    def set_building_bonuses(self, rate_bonuses: Mapping[str, float],
                             multiplier_bonuses: Mapping[str, float]):
        """Replace building-derived bonuses. Safe to call every tick."""
        for name, stock in self.stocks.items():
            stock.bonus_rate = rate_bonuses.get(name, 0.0)
            stock.bonus_multiplier = multiplier_bonuses.get(name, 0.0)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def _rounded(self, stock: ResourceStock) -> float:
        precision = self.config.precision_for(stock.name)
        value = round(stock.amount, precision)
        return float(value)

    def get(self, resource: str) -> float:
        """Rounded display value (0 for untracked resources)."""
        stock = self.stocks.get(resource)
        if stock is None:
            return 0.0
        return self._rounded(stock)

    def exact(self, resource: str) -> float:
        return self._stock(resource).amount

    def get_all(self) -> Dict[str, float]:
        return {name: self._rounded(stock) for name, stock in self.stocks.items()}

    def production(self, resource: str) -> float:
        return self._stock(resource).effective_rate

    def multiplier(self, resource: str) -> float:
        stock = self._stock(resource)
        return stock.multiplier + stock.bonus_multiplier

    def status(self, resource: str) -> str:
        """Rough stock level relative to production: low/medium/high."""
        value = self.get(resource)
        rate = self.production(resource)
        if value < rate * 10:
            return "low"
        if value < rate * 100:
            return "medium"
        return "high"

    def format_amount(self, resource: str) -> str:
        value = self.get(resource)
        if resource == Resource.POPULATION.value:
            if value >= 1_000_000_000:
                return f"{value / 1_000_000_000:.2f}B"
            if value >= 1_000_000:
                return f"{value / 1_000_000:.2f}M"
            return f"{round(value):,}"

        if value >= 1_000_000:
            return f"{value / 1_000_000:.2f}M"
        if value >= 1000:
            return f"{value / 1000:.1f}K"
        return f"{round(value):,}"

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def get_state(self) -> Dict[str, Dict[str, float]]:
        """Rounded amounts with rates and multipliers, for save files."""
        return {
            name: {
                "amount": self._rounded(stock),
                "base_rate": stock.base_rate,
                "multiplier": stock.multiplier,
            }
            for name, stock in self.stocks.items()
        }

    def set_state(self, state: Mapping[str, Mapping[str, float]]):
        """Restore from `get_state` output. Missing entries keep current values."""
        for name, entry in state.items():
            stock = self.stocks.get(name)
            if stock is None:
                logger.warning(f"Ignoring saved state for unknown resource '{name}'")
                continue
            stock.amount = max(0.0, float(entry.get("amount", stock.amount)))
            stock.base_rate = float(entry.get("base_rate", stock.base_rate))
            stock.multiplier = float(entry.get("multiplier", stock.multiplier))

    def get_status(self) -> Dict:
        return {
            name: {
                "amount": self._rounded(stock),
                "production": stock.effective_rate,
                "multiplier": stock.multiplier + stock.bonus_multiplier,
                "status": self.status(name),
            }
            for name, stock in self.stocks.items()
        }
