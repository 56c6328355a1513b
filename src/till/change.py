"""
change.py — Change-making from limited stock

Two fixed passes, each on its own scratch copy of the inventory:

1. GREEDY
   Walk every physical unit held, largest first, once. Take a unit whenever
   the outstanding amount is still >= its value.

2. DIVISIBILITY FALLBACK
   Only when the greedy pass leaves a remainder. Start again from the
   original inventory; split the amount into a whole part and a cents part
   and, for each part, walk the units of the matching kind (Major / Minor)
   taking a unit whenever it evenly divides what is still outstanding.

This is a deterministic heuristic, NOT a minimum-coin solver. There are
inventories where valid change exists and neither pass finds it
(stock 10, 5, 2, 2, 2, 2 and change 13: 5+2+2+2+2 is never tried).
Swapping in a DP solver would change which units are handed back.

The caller's inventory is never mutated.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .core import (
    DenominationKind,
    Denomination,
    Inventory,
    NotEnoughChangeError,
    MINOR_UNITS_PER_MAJOR,
    cents_to_amount,
)


@dataclass(frozen=True)
class ChangeResult:
    """Units handed back (largest first) and the inventory left behind."""
    inventory: Inventory
    change: Tuple[Denomination, ...]

    @property
    def total_cents(self) -> int:
        return sum(d.cents for d in self.change)


def _descending(units: Iterable[Denomination]) -> Tuple[Denomination, ...]:
    return tuple(sorted(units, key=lambda d: d.cents, reverse=True))


# ==============================================================================
# PHASE 1: GREEDY
# ==============================================================================

def greedy_change(inventory: Inventory, required_cents: int) -> Optional[ChangeResult]:
    """
    Single pass over the physical units on hand, largest first.

    Returns None if the pass does not reach exactly zero.
    """
    scratch = inventory.copy()
    remaining = required_cents
    taken: List[Denomination] = []

    for unit in inventory.flatten_descending():
        if remaining == 0:
            break
        if remaining >= unit.cents:
            taken.append(unit)
            remaining -= unit.cents
            scratch.decrement(unit)

    if remaining != 0:
        return None
    # Units come out of flatten_descending already ordered
    return ChangeResult(inventory=scratch, change=tuple(taken))


# ==============================================================================
# PHASE 2: DIVISIBILITY FALLBACK
# ==============================================================================

def _divisibility_pass(
    scratch: Inventory,
    kind: DenominationKind,
    target_cents: int,
) -> Tuple[List[Denomination], int]:
    """Take units of one kind that evenly divide the outstanding amount."""
    remaining = target_cents
    taken: List[Denomination] = []

    # Snapshot first: scratch is decremented while we walk
    for unit in scratch.flatten_descending():
        if remaining == 0:
            break
        if unit.kind is not kind:
            continue
        if remaining % unit.cents == 0:
            taken.append(unit)
            remaining -= unit.cents
            scratch.decrement(unit)

    return taken, remaining


def divisibility_change(inventory: Inventory, required_cents: int) -> Optional[ChangeResult]:
    """
    Fallback when the greedy pass gets stuck.

    The whole part (floor of the amount) is paid from Major units only, the
    cents part from Minor units only. Returns None if either part is left
    with a remainder.
    """
    scratch = inventory.copy()
    major_cents = (required_cents // MINOR_UNITS_PER_MAJOR) * MINOR_UNITS_PER_MAJOR
    minor_cents = required_cents - major_cents

    major_taken: List[Denomination] = []
    minor_taken: List[Denomination] = []
    major_left = minor_left = 0

    if major_cents > 0:
        major_taken, major_left = _divisibility_pass(
            scratch, DenominationKind.MAJOR, major_cents
        )
    if minor_cents > 0:
        minor_taken, minor_left = _divisibility_pass(
            scratch, DenominationKind.MINOR, minor_cents
        )

    if major_left != 0 or minor_left != 0:
        return None
    return ChangeResult(inventory=scratch, change=_descending(major_taken + minor_taken))


# ==============================================================================
# ENGINE
# ==============================================================================

def make_change(inventory: Inventory, required_cents: int) -> ChangeResult:
    """
    Produce change for required_cents out of inventory.

    Args:
        inventory: stock to draw from (never mutated)
        required_cents: amount to hand back, >= 0

    Returns:
        ChangeResult with the post-transaction inventory and the units given

    Raises:
        ValueError: if required_cents is negative
        NotEnoughChangeError: if neither pass reaches exactly zero
    """
    if required_cents < 0:
        raise ValueError(f"required change must be >= 0, got {required_cents}")

    if required_cents == 0:
        return ChangeResult(inventory=inventory.copy(), change=())

    result = greedy_change(inventory, required_cents)
    if result is None:
        result = divisibility_change(inventory, required_cents)
    if result is None:
        raise NotEnoughChangeError(
            f"Cannot hand back {cents_to_amount(required_cents)} from {inventory!r}"
        )
    return result
