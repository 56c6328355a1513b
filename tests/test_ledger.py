"""
test_ledger.py — Till ownership and the append-only TillLedger

Tests cover:
- Till commits stock only on successful sales
- Every attempt is recorded, refused ones included
- Hash chain integrity and tamper detection
- Capacity guard
- Logging of refused sales
"""

from dataclasses import replace
from decimal import Decimal
import json
import logging

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from till import (
    ErrorKind,
    Inventory,
    Till,
    TillLedger,
    create_inventory,
    pay,
)


# ==============================================================================
# Till
# ==============================================================================

class TestTill:

    def test_new_till_is_empty(self):
        till = Till()
        assert till.currency == "$"
        assert till.current_cash() == []
        assert till.total() == Decimal(0)

    def test_seeded_till(self):
        till = Till(currency="€", seed=[20, 0.5])
        assert till.current_cash() == [Decimal("20"), Decimal("0.5")]
        assert till.total() == Decimal("20.5")

    def test_success_replaces_stock(self):
        till = Till()
        till.pay(11, [5, 2, 2, 1, 1])
        outcome = till.pay(6, [10])

        assert outcome.change == (Decimal(2), Decimal(2))
        assert till.current_cash() == [Decimal(v) for v in (10, 5, 1, 1)]

    def test_failure_keeps_stock(self):
        till = Till(seed=[5])
        outcome = till.pay(1, [2])

        assert outcome.error == "NOT ENOUGH CHANGE"
        assert till.current_cash() == [Decimal(5)]

    def test_inventory_property_is_a_copy(self):
        till = Till(seed=[5])
        till.inventory.decrement(5)
        assert till.current_cash() == [Decimal(5)]

    def test_matches_stateless_api(self):
        till = Till()
        inventory = create_inventory()
        for price, tendered in [(11, [5, 2, 2, 1, 1]), (6, [10]), (8, [20]), (25, [50])]:
            expected = pay(inventory, price, tendered)
            inventory = expected.inventory
            assert till.pay(price, tendered) == expected
        assert till.inventory == Inventory.from_units([50])

    def test_accepts_generators(self):
        till = Till()
        outcome = till.pay(3, (v for v in [2, 1]))
        assert outcome.success
        assert till.ledger.get_all()[0].tendered == ("2", "1")

    def test_full_ledger_leaves_stock_unchanged(self):
        till = Till(seed=[5], ledger=TillLedger(max_entries=1))
        till.pay(5, [5])

        with pytest.raises(ValueError):
            till.pay(10, [10])

        assert till.current_cash() == [Decimal(5), Decimal(5)]
        assert len(till.ledger) == 1

    def test_ledger_entries_do_not_share_stock(self):
        till = Till(seed=[5])
        till.pay(1, [1])

        till.ledger.get_all()[0].outcome.inventory.increment(100)

        assert till.current_cash() == [Decimal(5), Decimal(1)]

    def test_returned_outcome_does_not_share_stock(self):
        till = Till(seed=[5])
        accepted = till.pay(1, [1])
        refused = till.pay(1, [5])
        assert not refused.success

        accepted.inventory.increment(100)
        refused.inventory.increment(50)

        assert till.current_cash() == [Decimal(5), Decimal(1)]
        assert till.ledger.verify_chain() == (True, None)

    def test_refused_sale_is_logged(self, caplog):
        till = Till()
        with caplog.at_level(logging.INFO, logger="till.ledger"):
            till.pay(10, [5])
        assert "PAID LESS THAN PRICE" in caplog.text

    def test_repr(self):
        assert repr(Till(seed=[1])) == "Till(currency='$', total=1)"


# ==============================================================================
# TillLedger
# ==============================================================================

class TestTillLedger:

    def _till_with_history(self):
        till = Till()
        till.pay(11, [5, 2, 2, 1, 1])
        till.pay(10, [11])
        till.pay(6, [10])
        till.pay(10, [5])
        return till

    def test_every_attempt_is_recorded(self):
        till = self._till_with_history()
        entries = till.ledger.get_all()

        assert len(till.ledger) == 4
        assert [e.sequence for e in entries] == [0, 1, 2, 3]
        assert [e.outcome.success for e in entries] == [True, False, True, False]

    def test_find_by_error(self):
        ledger = self._till_with_history().ledger

        invalid = ledger.find_by_error(ErrorKind.INVALID_DENOMINATION)
        assert [e.sequence for e in invalid] == [1]
        assert invalid[0].tendered == ("11",)
        assert ledger.find_by_error(ErrorKind.NOT_ENOUGH_CHANGE) == []

    def test_successes(self):
        ledger = self._till_with_history().ledger
        assert [e.sequence for e in ledger.successes()] == [0, 2]

    def test_chain_links(self):
        entries = self._till_with_history().ledger.get_all()
        assert entries[0].previous_hash == TillLedger.GENESIS_HASH
        for prev, entry in zip(entries, entries[1:]):
            assert entry.previous_hash == prev.entry_hash

    def test_verify_chain_intact(self):
        assert self._till_with_history().ledger.verify_chain() == (True, None)

    def test_verify_chain_detects_tampering(self):
        ledger = self._till_with_history().ledger
        ledger._entries[2] = replace(ledger._entries[2], price="0")
        assert ledger.verify_chain() == (False, 2)

    def test_verify_chain_detects_broken_link(self):
        ledger = self._till_with_history().ledger
        ledger._entries[1] = replace(ledger._entries[1], previous_hash="f" * 64)
        assert ledger.verify_chain() == (False, 1)

    def test_get_all_is_a_copy(self):
        ledger = self._till_with_history().ledger
        ledger.get_all().clear()
        assert len(ledger) == 4

    def test_capacity_guard(self):
        ledger = TillLedger(max_entries=1)
        outcome = pay(create_inventory(), 1, [1])
        ledger.append(1, [1], outcome)
        with pytest.raises(ValueError):
            ledger.append(1, [1], outcome)

    def test_zero_capacity_is_honoured(self):
        ledger = TillLedger(max_entries=0)
        outcome = pay(create_inventory(), 1, [1])
        with pytest.raises(ValueError):
            ledger.append(1, [1], outcome)

    def test_entry_keeps_its_own_inventory(self):
        ledger = TillLedger()
        outcome = pay(create_inventory(), 1, [1])
        entry = ledger.append(1, [1], outcome)

        outcome.inventory.increment(20)

        assert entry.outcome.inventory == Inventory.from_units([1])
        assert ledger.verify_chain() == (True, None)

    def test_to_json(self):
        ledger = self._till_with_history().ledger
        data = json.loads(ledger.to_json())

        assert len(data) == 4
        assert data[1]["outcome"]["error"] == "INVALID DENOMINATION"
        assert data[2]["outcome"]["change"] == ["2", "2"]
        assert data[3]["entry_hash"] == ledger.get_all()[3].entry_hash
