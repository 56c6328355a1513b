"""
cashier.py — Sale orchestration

    from till import create_inventory, list_current_units, pay

    inventory = create_inventory()
    outcome = pay(inventory, 11, [5, 2, 2, 1, 1])
    if outcome.success:
        inventory = outcome.inventory

Every check short-circuits to a Failure carrying the ORIGINAL inventory:

1. every tendered unit is a legal denomination  -> INVALID DENOMINATION
2. sum(tendered) >= price                        -> PAID LESS THAN PRICE
3. tendered units are added to a scratch inventory (they may be handed back)
4. change is made from the scratch inventory     -> NOT ENOUGH CHANGE

Refusals are values, not exceptions. Only caller contract violations (a price
that is not a non-negative amount in whole cents) raise.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Tuple, Union

from .core import (
    AmountLike,
    Denomination,
    ErrorKind,
    Inventory,
    PaidLessThanPriceError,
    TillError,
    cents_to_amount,
    to_cents,
)
from .change import make_change


# ==============================================================================
# OUTCOMES
# ==============================================================================

@dataclass(frozen=True)
class Success:
    """Sale accepted. inventory is the new canonical stock."""
    inventory: Inventory
    change: Tuple[Decimal, ...]

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "inventory": self.inventory.to_dict(),
            "change": [str(c) for c in self.change],
        }


@dataclass(frozen=True)
class Failure:
    """Sale refused. inventory is the one passed in, untouched."""
    inventory: Inventory
    reason: ErrorKind
    detail: str = ""

    @property
    def success(self) -> bool:
        return False

    @property
    def error(self) -> str:
        return self.reason.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "inventory": self.inventory.to_dict(),
            "error": self.reason.value,
            "detail": self.detail,
        }


TransactionOutcome = Union[Success, Failure]


# ==============================================================================
# PUBLIC API
# ==============================================================================

def create_inventory(seed_units: Iterable[AmountLike] = ()) -> Inventory:
    """Empty till, or one pre-seeded with physical units."""
    return Inventory.from_units(seed_units)


def list_current_units(inventory: Inventory) -> List[Decimal]:
    """
    All bills and coins currently held, largest first.

    Example: [Decimal('100'), Decimal('50'), Decimal('5'), Decimal('0.01')]
    """
    return [unit.amount for unit in inventory.flatten_descending()]


def _price_cents(price: AmountLike) -> int:
    cents = to_cents(price)
    if cents < 0:
        raise ValueError(f"price must be >= 0, got {price!r}")
    return cents


def pay(
    inventory: Inventory,
    price: AmountLike,
    tendered: Iterable[AmountLike],
) -> TransactionOutcome:
    """
    Take payment for one sale and hand back change.

    Args:
        inventory: current stock (never mutated)
        price: purchase price
        tendered: bills and coins handed over, one entry per physical unit

    Returns:
        Success(inventory, change) or Failure(inventory, reason)

    Raises:
        TypeError, ValueError: if price is not a non-negative whole-cent amount
    """
    price_cents = _price_cents(price)
    tendered = list(tendered)

    try:
        units = [Denomination.from_value(value) for value in tendered]

        paid_cents = sum(unit.cents for unit in units)
        if paid_cents < price_cents:
            raise PaidLessThanPriceError(
                f"Paid {cents_to_amount(paid_cents)}, price is {cents_to_amount(price_cents)}"
            )

        result = make_change(inventory.merged(units), paid_cents - price_cents)
    except TillError as e:
        return Failure(inventory=inventory, reason=e.kind, detail=str(e))

    return Success(
        inventory=result.inventory,
        change=tuple(unit.amount for unit in result.change),
    )
