from __future__ import annotations

import calendar
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel

from shadmanager.constants import (
    BILLING_CYCLE_LABELS,
    SP_TZ,
    STATUS_DELINQUENT,
    STATUS_PAID,
    STATUS_UPCOMING,
)


class BillingCycle(str, Enum):
    MONTHLY = "monthly"
    WEEKLY = "weekly"
    QUARTERLY = "quarterly"

    @property
    def label(self) -> str:
        return BILLING_CYCLE_LABELS[self.value]


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELED = "canceled"


class Student(BaseModel):
    id: str
    full_name: str
    phone: str = ""
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    amount_cents: int = 0
    due_day: int = 10


class Invoice(BaseModel):
    id: str
    student_id: str
    due_date: date
    amount_cents: int  # centavos
    paid_amount_cents: int = 0
    status: InvoiceStatus = InvoiceStatus.PENDING
    paid_at: datetime | None = None

    @property
    def open_amount_cents(self) -> int:
        return max(0, self.amount_cents - self.paid_amount_cents)


def today_sp() -> date:
    return datetime.now(SP_TZ).date()


def status_label(invoice: Invoice | None, today: date | None = None) -> str:
    """Map an invoice to the label shown next to a student."""
    if invoice is None:
        return STATUS_UPCOMING
    if invoice.status == InvoiceStatus.PAID:
        return STATUS_PAID
    today = today or today_sp()
    if invoice.status == InvoiceStatus.OVERDUE or invoice.due_date < today:
        return STATUS_DELINQUENT
    return STATUS_UPCOMING


def days_late(due_date: date, today: date | None = None) -> int:
    today = today or today_sp()
    return max(0, (today - due_date).days)


def current_period_dates(due_day: int, today: date | None = None) -> tuple[date, date, date]:
    """Return (month start, month end, due date) for the month containing ``today``.

    The due day is clamped into the month, so day 31 becomes the last day of
    shorter months.
    """
    today = today or today_sp()
    last_day = calendar.monthrange(today.year, today.month)[1]
    start = today.replace(day=1)
    end = today.replace(day=last_day)
    due = today.replace(day=min(max(due_day, 1), last_day))
    return start, end, due
