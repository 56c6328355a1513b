"""
ledger.py — Stateful till with an append-only audit trail

The functions in cashier.py are stateless: they take an inventory and hand
back a new one. Till is the single owner that keeps the canonical inventory
between sales and records every attempt in a TillLedger.

    from till import Till

    till = Till(currency="$")
    outcome = till.pay(25, [10, 10, 5])
    till.current_cash()        # [Decimal('10'), Decimal('10'), Decimal('5')]
    till.ledger.verify_chain() # (True, None)

PROPERTIES:
- Append-only: entries cannot be modified or deleted
- Hash-chained: tampering with any entry invalidates the chain
- Refused sales are recorded too, with their error kind

Till is NOT thread-safe. Callers sharing one till must serialize pay().
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple
import hashlib
import hmac
import json
import logging

from .core import AmountLike, ErrorKind, Inventory
from .cashier import (
    TransactionOutcome,
    create_inventory,
    list_current_units,
    pay,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# LEDGER
# ==============================================================================

@dataclass(frozen=True)
class LedgerEntry:
    """Single recorded pay() attempt."""
    sequence: int
    timestamp: datetime
    price: str
    tendered: Tuple[str, ...]
    outcome: TransactionOutcome
    previous_hash: str
    entry_hash: str

    def content(self) -> Dict[str, Any]:
        """Hashed fields (everything but entry_hash)."""
        return {
            "sequence": self.sequence,
            "timestamp": self.timestamp.isoformat(),
            "price": self.price,
            "tendered": list(self.tendered),
            "outcome": self.outcome.to_dict(),
            "previous_hash": self.previous_hash,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.content()
        data["entry_hash"] = self.entry_hash
        return data


class TillLedger:
    """Append-only, hash-chained record of sales."""

    # Maximum entries (memory guard, configurable)
    MAX_ENTRIES: int = 1_000_000

    GENESIS_HASH: str = "0" * 64

    def __init__(self, max_entries: Optional[int] = None):
        self._entries: List[LedgerEntry] = []
        self._max_entries = self.MAX_ENTRIES if max_entries is None else max_entries

    @staticmethod
    def _compute_hash(content: Dict[str, Any]) -> str:
        serialized = json.dumps(content, sort_keys=True, default=str)
        return hashlib.sha256(serialized.encode()).hexdigest()

    def append(
        self,
        price: AmountLike,
        tendered: Iterable[Any],
        outcome: TransactionOutcome,
    ) -> LedgerEntry:
        """
        Record one pay() attempt.

        Raises:
            ValueError: if the ledger is at max capacity
        """
        if len(self._entries) >= self._max_entries:
            raise ValueError(f"Ledger at max capacity ({self._max_entries})")

        sequence = len(self._entries)
        previous_hash = self._entries[-1].entry_hash if self._entries else self.GENESIS_HASH

        draft = LedgerEntry(
            sequence=sequence,
            timestamp=datetime.now(timezone.utc),
            price=str(price),
            tendered=tuple(str(v) for v in tendered),
            # Own copy: callers keep mutable references to the outcome inventory
            outcome=replace(outcome, inventory=outcome.inventory.copy()),
            previous_hash=previous_hash,
            entry_hash="",
        )
        entry = replace(draft, entry_hash=self._compute_hash(draft.content()))

        self._entries.append(entry)
        return entry

    def verify_chain(self) -> Tuple[bool, Optional[int]]:
        """
        Verify the integrity of the whole ledger.

        Returns:
            (True, None) if intact, else (False, sequence_of_first_bad_entry)
        """
        for i, entry in enumerate(self._entries):
            expected_prev = self.GENESIS_HASH if i == 0 else self._entries[i - 1].entry_hash
            if not hmac.compare_digest(entry.previous_hash, expected_prev):
                return (False, i)
            if not hmac.compare_digest(entry.entry_hash, self._compute_hash(entry.content())):
                return (False, i)
        return (True, None)

    def successes(self) -> List[LedgerEntry]:
        return [e for e in self._entries if e.outcome.success]

    def find_by_error(self, kind: ErrorKind) -> List[LedgerEntry]:
        return [
            e for e in self._entries
            if not e.outcome.success and e.outcome.reason is kind
        ]

    def get_all(self) -> List[LedgerEntry]:
        """All entries (read-only copy)."""
        return self._entries.copy()

    def to_json(self) -> str:
        return json.dumps([e.to_dict() for e in self._entries], indent=2, default=str)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TillLedger(entries={len(self._entries)})"


# ==============================================================================
# TILL
# ==============================================================================

class Till:
    """
    Single owner of a till's cash.

    The inventory is replaced only when a sale succeeds.
    currency is a display symbol; all amounts share it.
    """

    def __init__(
        self,
        currency: str = "$",
        seed: Iterable[AmountLike] = (),
        ledger: Optional[TillLedger] = None,
    ):
        self.currency = currency
        self._inventory = create_inventory(seed)
        self._ledger = ledger if ledger is not None else TillLedger()

    @property
    def inventory(self) -> Inventory:
        """Copy of the current stock."""
        return self._inventory.copy()

    @property
    def ledger(self) -> TillLedger:
        return self._ledger

    def current_cash(self) -> List[Decimal]:
        return list_current_units(self._inventory)

    def total(self) -> Decimal:
        return sum(self.current_cash(), Decimal(0))

    def pay(self, price: AmountLike, tendered: Iterable[AmountLike]) -> TransactionOutcome:
        """
        Run one sale against the current stock and record it.

        The sale is recorded before the stock is replaced, so a full ledger
        leaves the till unchanged.

        Raises:
            ValueError: if the ledger is at max capacity
        """
        tendered = list(tendered)
        outcome = pay(self._inventory.copy(), price, tendered)
        self._ledger.append(price, tendered, outcome)

        if outcome.success:
            self._inventory = outcome.inventory.copy()
            logger.debug(
                "Sale of %s%s accepted, change %s",
                self.currency, price, [str(c) for c in outcome.change],
            )
        else:
            logger.info(
                "Sale of %s%s refused: %s (%s)",
                self.currency, price, outcome.error, outcome.detail,
            )

        return outcome

    def __repr__(self) -> str:
        return f"Till(currency={self.currency!r}, total={self.total()})"
