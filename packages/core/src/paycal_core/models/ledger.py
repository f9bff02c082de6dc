"""Bill payment ledger models.

The ledger is the only durable state the engine reads besides the starting
balance. It maps a month key (``"YYYY-MM"``) to the payment records of the
bills generated for that month. Bill ids are deterministic, so a record
keeps matching its bill when occurrences are regenerated from scratch.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class BillPaymentRecord(BaseModel):
    """Payment status of one generated bill."""

    bill_id: str
    is_paid: bool = False
    paid_date: Optional[date] = None


class BillPaymentLedger(BaseModel):
    """Month key -> payment records."""

    months: dict[str, list[BillPaymentRecord]] = Field(default_factory=dict)

    def find(self, month_key: str, bill_id: str) -> Optional[BillPaymentRecord]:
        """Return the record for ``bill_id`` in ``month_key``, if one exists."""
        for record in self.months.get(month_key, []):
            if record.bill_id == bill_id:
                return record
        return None

    def is_paid(self, month_key: str, bill_id: str) -> bool:
        record = self.find(month_key, bill_id)
        return record is not None and record.is_paid

    def with_payment(
        self,
        month_key: str,
        bill_id: str,
        is_paid: bool,
        paid_date: Optional[date] = None,
    ) -> "BillPaymentLedger":
        """Return a new ledger with the status of one bill replaced.

        The receiver is left untouched. Unmarking a bill clears its paid date.
        """
        record = BillPaymentRecord(
            bill_id=bill_id,
            is_paid=is_paid,
            paid_date=paid_date if is_paid else None,
        )
        months = {key: list(records) for key, records in self.months.items()}
        records = [r for r in months.get(month_key, []) if r.bill_id != bill_id]
        records.append(record)
        months[month_key] = records
        return BillPaymentLedger(months=months)

    def paid_bill_ids(self, month_key: str) -> set[str]:
        return {r.bill_id for r in self.months.get(month_key, []) if r.is_paid}
