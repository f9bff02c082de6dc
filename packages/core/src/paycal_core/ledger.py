"""Bill payment ledger storage and the paid/unpaid toggle.

The engine never persists anything itself. Storage sits behind
LedgerRepository, a structural protocol: any object with matching
``load_ledger``/``save_ledger`` methods is accepted, no inheritance needed.

Example Usage:
    ```python
    class JsonFileLedgerRepository:
        def __init__(self, path):
            self.path = path

        def load_ledger(self) -> BillPaymentLedger:
            return BillPaymentLedger.model_validate_json(self.path.read_text())

        def save_ledger(self, ledger: BillPaymentLedger) -> None:
            self.path.write_text(ledger.model_dump_json())
    ```
"""

from datetime import date
from typing import Optional, Protocol, runtime_checkable

import structlog

from .dates import YearMonth
from .models import BillPaymentLedger

logger = structlog.get_logger()


@runtime_checkable
class LedgerRepository(Protocol):
    """Storage for the bill payment ledger.

    Implementations raise LedgerError when the backing store fails.
    """

    def load_ledger(self) -> BillPaymentLedger:
        """Return the current ledger (an empty one if nothing is stored)."""
        ...

    def save_ledger(self, ledger: BillPaymentLedger) -> None:
        """Replace the stored ledger."""
        ...


class InMemoryLedgerRepository:
    """Ledger repository kept in process memory.

    Stores a deep copy on save and hands out a deep copy on load, so callers
    can't alter the stored state through a returned ledger.
    """

    def __init__(self, ledger: Optional[BillPaymentLedger] = None):
        self._ledger = (ledger or BillPaymentLedger()).model_copy(deep=True)
        self.saves = 0

    def load_ledger(self) -> BillPaymentLedger:
        return self._ledger.model_copy(deep=True)

    def save_ledger(self, ledger: BillPaymentLedger) -> None:
        self._ledger = ledger.model_copy(deep=True)
        self.saves += 1


def toggle_bill_payment(
    ledger: BillPaymentLedger,
    month: YearMonth,
    bill_id: str,
    as_of: date,
) -> BillPaymentLedger:
    """Flip one bill between paid and unpaid.

    Marking a bill paid records ``as_of`` as its paid date; marking it unpaid
    clears the date. Returns a new ledger and leaves ``ledger`` unchanged.
    """
    month = YearMonth.parse(month)
    now_paid = not ledger.is_paid(month.key, bill_id)
    updated = ledger.with_payment(month.key, bill_id, now_paid, as_of if now_paid else None)
    logger.info(
        "bill_payment_toggled",
        month=month.key,
        bill_id=bill_id,
        is_paid=now_paid,
    )
    return updated
