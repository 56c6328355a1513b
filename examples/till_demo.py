#!/usr/bin/env python3
"""
till_demo.py — A day at the till

================================================================================
THE BUG
================================================================================

    >>> 0.1 + 0.2
    0.30000000000000004

Adding and subtracting coins in binary floating point drifts, so a till that
makes change with floats never quite reaches zero and refuses sales it
could serve.

================================================================================
THE FIX
================================================================================

Every amount is an integer number of cents, and a failed sale never touches
the stock:

    from till import Till

    till = Till()
    till.pay(0.55, [0.25, 0.1, 0.1, 0.1])
    till.pay(0.7, [1]).change   # three dimes, exactly

================================================================================
"""

import logging
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from till import Till


def show(till: Till, price, tendered) -> None:
    outcome = till.pay(price, tendered)
    paid = ", ".join(str(v) for v in tendered)
    print(f"  price {till.currency}{price:<6} paid [{paid}]")
    if outcome.success:
        change = ", ".join(str(c) for c in outcome.change) or "-"
        print(f"    OK      change [{change}]")
    else:
        print(f"    REFUSED {outcome.error}")
    print(f"    cash    {[str(c) for c in till.current_cash()]}")


def demonstrate_bills():
    print("=" * 60)
    print("TRADING UP BILLS")
    print("=" * 60)
    till = Till(currency="$")
    for price, tendered in [
        (11, [5, 2, 2, 1, 1]),
        (6, [10]),
        (8, [20]),
        (1, [2]),
        (3, [5]),
        (25, [50]),
    ]:
        show(till, price, tendered)
    print()


def demonstrate_coins():
    print("=" * 60)
    print("SMALL COINS")
    print("=" * 60)
    till = Till(currency="$")
    show(till, 0.55, [0.25, 0.1, 0.1, 0.1])
    show(till, 0.7, [1])
    print()


def demonstrate_refusals():
    print("=" * 60)
    print("REFUSALS")
    print("=" * 60)
    till = Till(currency="$", seed=[10, 5, 2, 2, 2, 2])
    show(till, 10, [11])
    show(till, 10, [5, 2, 2])
    # 5+2+2+2+2 would do: the change heuristic does not find it
    show(till, 7, [20])
    print()

    ok, bad = till.ledger.verify_chain()
    print(f"  ledger entries: {len(till.ledger)}, chain intact: {ok}")
    print()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    demonstrate_bills()
    demonstrate_coins()
    demonstrate_refusals()
