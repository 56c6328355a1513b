"""
core.py — Denomination catalog and cash inventory for a till

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   Every amount is an integer number of cents (minor units).
   No floating point ever enters the arithmetic.

2. CLOSED CATALOG
   Twelve legal denominations, fixed and ordered. Anything else is an
   InvalidDenominationError, never a silently accepted key.

3. BOUNDARY CONVERSION
   int, Decimal, str and float are accepted as input. Floats are converted
   ONCE, through their shortest repr (0.1 -> Decimal("0.1")). From that point
   on, everything is an integer.

4. INVENTORY INVARIANTS
   Every denomination is always present as a key (count may be 0).
   Counts never go below 0.

================================================================================
"""

from __future__ import annotations
from decimal import Decimal, Inexact, InvalidOperation, Rounded, localcontext
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union
import math


AmountLike = Union[int, float, str, Decimal]

# Cents per major unit (dollar, euro, ...)
MINOR_UNITS_PER_MAJOR: int = 100


# ==============================================================================
# ERRORS
# ==============================================================================

class ErrorKind(Enum):
    """
    Terminal reasons a sale can be refused.

    The values are the strings callers of the till have always seen.
    """
    INVALID_DENOMINATION = "INVALID DENOMINATION"
    PAID_LESS_THAN_PRICE = "PAID LESS THAN PRICE"
    NOT_ENOUGH_CHANGE = "NOT ENOUGH CHANGE"


class TillError(Exception):
    """Base class for refused sales. Carries the ErrorKind in .kind."""
    kind: ErrorKind

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)


class InvalidDenominationError(TillError, ValueError):
    kind = ErrorKind.INVALID_DENOMINATION


class PaidLessThanPriceError(TillError, ValueError):
    kind = ErrorKind.PAID_LESS_THAN_PRICE


class NotEnoughChangeError(TillError):
    kind = ErrorKind.NOT_ENOUGH_CHANGE


# ==============================================================================
# AMOUNT CONVERSION
# ==============================================================================

def to_cents(value: AmountLike) -> int:
    """
    Convert a decimal amount to an integer number of cents.

    Raises:
        TypeError: for bool or non-numeric types
        ValueError: for non-finite values, precision finer than one cent, or
            more significant digits than the decimal context holds
    """
    if isinstance(value, bool):
        raise TypeError("bool is not an amount")

    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Amount must be finite, got {value!r}")
        value = Decimal(repr(value))
    elif isinstance(value, (int, str)):
        try:
            value = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"Not a decimal amount: {value!r}") from None
    elif not isinstance(value, Decimal):
        raise TypeError(f"Unsupported amount type: {type(value).__name__}")

    if not value.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")

    # Scaling must be exact; a rounded product could land on a whole cent
    with localcontext() as ctx:
        ctx.traps[Inexact] = True
        ctx.traps[Rounded] = True
        try:
            scaled = value * MINOR_UNITS_PER_MAJOR
        except (Inexact, Rounded):
            raise ValueError(f"Amount {value} exceeds decimal precision") from None
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {value} is finer than one cent")
    return int(scaled)


def cents_to_amount(cents: int) -> Decimal:
    """Inverse of to_cents: 1025 -> Decimal('10.25')."""
    return Decimal(cents) / MINOR_UNITS_PER_MAJOR


# ==============================================================================
# DENOMINATION CATALOG
# ==============================================================================

class DenominationKind(Enum):
    """Major = whole-currency units (bills), Minor = sub-units (coins)."""
    MAJOR = "major"
    MINOR = "minor"


class Denomination(Enum):
    """
    The twelve legal currency units, largest first.

    Value is (cents, kind). Iteration order is the fixed descending order.
    """
    HUNDRED = (10000, DenominationKind.MAJOR)
    FIFTY = (5000, DenominationKind.MAJOR)
    TWENTY = (2000, DenominationKind.MAJOR)
    TEN = (1000, DenominationKind.MAJOR)
    FIVE = (500, DenominationKind.MAJOR)
    TWO = (200, DenominationKind.MAJOR)
    ONE = (100, DenominationKind.MAJOR)
    HALF = (50, DenominationKind.MINOR)
    QUARTER = (25, DenominationKind.MINOR)
    DIME = (10, DenominationKind.MINOR)
    NICKEL = (5, DenominationKind.MINOR)
    PENNY = (1, DenominationKind.MINOR)

    def __init__(self, cents: int, kind: DenominationKind):
        self._cents = cents
        self._kind = kind

    @property
    def cents(self) -> int:
        return self._cents

    @property
    def kind(self) -> DenominationKind:
        return self._kind

    @property
    def is_major(self) -> bool:
        return self._kind is DenominationKind.MAJOR

    @property
    def amount(self) -> Decimal:
        """Face value as an exact Decimal (Decimal('0.1') for a dime)."""
        return cents_to_amount(self._cents)

    @classmethod
    def from_cents(cls, cents: int) -> Denomination:
        try:
            return _BY_CENTS[cents]
        except KeyError:
            raise InvalidDenominationError(
                f"{cents_to_amount(cents)} is not a legal denomination"
            ) from None

    @classmethod
    def from_value(cls, value: Union[AmountLike, Denomination]) -> Denomination:
        """
        Look up the denomination for a raw face value.

        Raises:
            InvalidDenominationError: if value is not one of the twelve units
        """
        if isinstance(value, Denomination):
            return value
        try:
            cents = to_cents(value)
        except (TypeError, ValueError):
            raise InvalidDenominationError(
                f"{value!r} is not a legal denomination"
            ) from None
        return cls.from_cents(cents)

    def __repr__(self) -> str:
        return f"<Denomination {self.amount}>"


_BY_CENTS: Dict[int, Denomination] = {d.cents: d for d in Denomination}
_DESCENDING: Tuple[Denomination, ...] = tuple(
    sorted(Denomination, key=lambda d: d.cents, reverse=True)
)


def is_valid(value: object) -> bool:
    """True if value is one of the twelve legal denominations."""
    try:
        Denomination.from_value(value)  # type: ignore[arg-type]
    except InvalidDenominationError:
        return False
    return True


def classify(value: Union[AmountLike, Denomination]) -> DenominationKind:
    return Denomination.from_value(value).kind


def all_descending() -> Tuple[Denomination, ...]:
    return _DESCENDING


def majors_descending() -> Tuple[Denomination, ...]:
    return tuple(d for d in _DESCENDING if d.is_major)


def minors_descending() -> Tuple[Denomination, ...]:
    return tuple(d for d in _DESCENDING if not d.is_major)


# ==============================================================================
# INVENTORY
# ==============================================================================

class Inventory:
    """
    How many physical units of each denomination the till holds.

    INVARIANTS:
    1. Every Denomination is a key (count may be 0)
    2. No other key ever appears
    3. Counts are never negative

    Inventories are mutable, so each transaction works on its own copy()
    and hands back a fresh one. Equality is by value; not hashable.
    """

    __slots__ = ("_counts",)
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, counts: Optional[Mapping[Denomination, int]] = None):
        self._counts: Dict[Denomination, int] = {d: 0 for d in _DESCENDING}
        for denomination, count in (counts or {}).items():
            if not isinstance(denomination, Denomination):
                raise InvalidDenominationError(
                    f"{denomination!r} is not a Denomination"
                )
            if isinstance(count, bool) or not isinstance(count, int):
                raise TypeError(f"Count must be int, got {type(count).__name__}")
            if count < 0:
                raise ValueError(f"Count for {denomination.amount} is negative: {count}")
            self._counts[denomination] = count

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def empty(cls) -> Inventory:
        return cls()

    @classmethod
    def from_units(cls, units: Iterable[Union[AmountLike, Denomination]]) -> Inventory:
        """
        Build counts from a list of physical units (duplicates are summed).

        Raises:
            InvalidDenominationError: on the first unit outside the catalog
        """
        inventory = cls()
        for unit in units:
            inventory.increment(unit)
        return inventory

    def copy(self) -> Inventory:
        return Inventory(self._counts)

    def merged(self, units: Iterable[Union[AmountLike, Denomination]]) -> Inventory:
        """New inventory holding these units plus extra ones. Self is untouched."""
        merged = self.copy()
        for unit in units:
            merged.increment(unit)
        return merged

    # -------------------------------------------------------------------------
    # Mutation (scratch copies only)
    # -------------------------------------------------------------------------

    def increment(self, unit: Union[AmountLike, Denomination]) -> None:
        self._counts[Denomination.from_value(unit)] += 1

    def decrement(self, unit: Union[AmountLike, Denomination]) -> None:
        denomination = Denomination.from_value(unit)
        if self._counts[denomination] == 0:
            raise ValueError(f"No {denomination.amount} units left to remove")
        self._counts[denomination] -= 1

    # -------------------------------------------------------------------------
    # Read accessors
    # -------------------------------------------------------------------------

    def count_of(self, unit: Union[AmountLike, Denomination]) -> int:
        return self._counts[Denomination.from_value(unit)]

    def total_count(self) -> int:
        return sum(self._counts.values())

    def total_cents(self) -> int:
        return sum(d.cents * n for d, n in self._counts.items())

    def counts(self) -> Dict[Denomination, int]:
        """Snapshot of the counts, largest denomination first."""
        return dict(self._counts)

    def flatten_descending(self) -> List[Denomination]:
        """Every physical unit held, one entry per unit, largest first."""
        units: List[Denomination] = []
        for denomination in _DESCENDING:
            units.extend([denomination] * self._counts[denomination])
        return units

    # -------------------------------------------------------------------------
    # Comparison and output
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Inventory):
            return self._counts == other._counts
        return NotImplemented

    def __repr__(self) -> str:
        held = ", ".join(
            f"{d.amount}x{n}" for d, n in self._counts.items() if n
        )
        return f"Inventory({held})"

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, int]:
        """
        Format: {"100": 0, "50": 1, ..., "0.01": 3}, every denomination present.

        Keys are face values as strings, never floats.
        """
        return {str(d.amount): n for d, n in self._counts.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, int]) -> Inventory:
        return cls({Denomination.from_value(k): v for k, v in data.items()})
