"""
till — Cash till with exact change-making from limited stock

A till holds a finite number of bills and coins. For each sale it validates
the tendered units, works out change from what it actually holds, and either
commits the new stock or leaves it untouched.

================================================================================
QUICK START
================================================================================

Stateless API (the caller keeps the inventory):

    from till import create_inventory, list_current_units, pay

    inventory = create_inventory()
    outcome = pay(inventory, 11, [5, 2, 2, 1, 1])   # exact payment
    inventory = outcome.inventory

    outcome = pay(inventory, 6, [10])
    outcome.success      # True
    outcome.change       # (Decimal('2'), Decimal('2'))

    outcome = pay(outcome.inventory, 10, [11])
    outcome.error        # 'INVALID DENOMINATION'

Stateful till with audit trail:

    from till import Till

    till = Till(currency="$")
    till.pay("0.55", ["0.25", "0.10", "0.10", "0.10"])
    till.pay("0.70", [1]).change   # (Decimal('0.1'), Decimal('0.1'), Decimal('0.1'))
    till.current_cash()            # [Decimal('1'), Decimal('0.25')]

Amounts may be int, Decimal, str or float. Internally everything is cents.

================================================================================
"""

# Catalog and inventory
from .core import (
    Denomination,
    DenominationKind,
    Inventory,
    ErrorKind,
    TillError,
    InvalidDenominationError,
    PaidLessThanPriceError,
    NotEnoughChangeError,
    MINOR_UNITS_PER_MAJOR,
    to_cents,
    cents_to_amount,
    is_valid,
    classify,
    all_descending,
    majors_descending,
    minors_descending,
)

# Change-making engine
from .change import (
    ChangeResult,
    greedy_change,
    divisibility_change,
    make_change,
)

# Sale orchestration
from .cashier import (
    Success,
    Failure,
    TransactionOutcome,
    create_inventory,
    list_current_units,
    pay,
)

# Stateful till
from .ledger import (
    Till,
    TillLedger,
    LedgerEntry,
)

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Core
    "Denomination",
    "DenominationKind",
    "Inventory",
    "ErrorKind",
    "TillError",
    "InvalidDenominationError",
    "PaidLessThanPriceError",
    "NotEnoughChangeError",
    "MINOR_UNITS_PER_MAJOR",
    "to_cents",
    "cents_to_amount",
    "is_valid",
    "classify",
    "all_descending",
    "majors_descending",
    "minors_descending",
    # Engine
    "ChangeResult",
    "greedy_change",
    "divisibility_change",
    "make_change",
    # Cashier
    "Success",
    "Failure",
    "TransactionOutcome",
    "create_inventory",
    "list_current_units",
    "pay",
    # Till
    "Till",
    "TillLedger",
    "LedgerEntry",
]
