"""Credit amortization: annuity installment and repayment schedule preview.

Two deliberately separate models live here:

- :func:`compute_installment` uses the legacy two-way ``repayment_type``
  (monthly / yearly) and the annuity formula.
- :func:`preview_schedule` uses the independent principal and interest
  cadences with straight-line principal and flat interest.

The two numbers are not meant to reconcile against each other.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_FLOOR, Decimal
from typing import Iterator

from ledger_core.exceptions import InvalidEntityStateError
from ledger_core.models.accounting import (
    Credit,
    RepaymentFrequency,
    RepaymentType,
    ScheduleComponent,
)

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = Decimal("365.25")
MIN_REPAYMENT_YEARS = Decimal("0.1")
DEFAULT_TERM_YEARS = Decimal("10")

PERIODS_PER_YEAR = {
    RepaymentType.MONTHLY: 12,
    RepaymentType.YEARLY: 1,
}

FREQUENCY_PER_YEAR = {
    RepaymentFrequency.MONTHLY: 12,
    RepaymentFrequency.QUARTERLY: 4,
    RepaymentFrequency.BIYEARLY: 2,
    RepaymentFrequency.YEARLY: 1,
}


@dataclass(frozen=True)
class ScheduleSummary:
    """Repayment preview shown while a credit is being entered."""

    principal_per_payment: Decimal
    interest_per_payment: Decimal
    total_principal_payments: int
    total_interest_payments: int
    payment_start_date: date
    principal_frequency: RepaymentFrequency
    interest_frequency: RepaymentFrequency


@dataclass(frozen=True)
class ScheduledPayment:
    """One dated row of an expanded repayment schedule."""

    due_date: date
    component: ScheduleComponent
    sequence: int  # 1-based within its component
    amount: Decimal


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def year_fraction(start: date, end: date) -> Decimal:
    """Span between two dates in 365.25-day years."""
    return Decimal((end - start).days) / DAYS_PER_YEAR


def calendar_years(start: date, end: date) -> Decimal:
    """Span in years counted as whole calendar months plus leftover days.

    Whole-year terms come out exact (2024-01-01 to 2034-01-01 is 10),
    where :func:`year_fraction` gives 3653 / 365.25 for the same span.
    Only the leftover days are divided by 365.25.
    """
    if end < start:
        return -calendar_years(end, start)

    months = (end.year - start.year) * 12 + (end.month - start.month)
    if add_months(start, months) > end:
        months -= 1
    leftover_days = (end - add_months(start, months)).days
    return Decimal(months) / 12 + Decimal(leftover_days) / DAYS_PER_YEAR


def repayment_years(credit: Credit) -> Decimal:
    """Years over which the principal is repaid after the grace period.

    Falls back to a 10-year term when either date is missing and never
    goes below 0.1 years.
    """
    if credit.start_date is not None and credit.maturity_date is not None:
        maturity_years = calendar_years(credit.start_date, credit.maturity_date)
    else:
        maturity_years = DEFAULT_TERM_YEARS

    grace_years = Decimal(credit.grace_period_months or 0) / 12
    return max(MIN_REPAYMENT_YEARS, maturity_years - grace_years)


def compute_installment(credit: Credit) -> Decimal:
    """Fixed periodic payment that fully amortizes the principal.

    Parameters
    ----------
    credit : Credit
        Credit terms. ``repayment_type`` selects monthly or yearly periods.

    Returns
    -------
    Decimal
        Unrounded installment amount.

    Raises
    ------
    InvalidEntityStateError
        If the interest rate is negative or the repayment type is unknown.

    Notes
    -----
    The term is measured with :func:`calendar_years`, not with elapsed
    days / 365.25, so a 10-year credit is amortized over exactly 10
    yearly or 120 monthly periods. The elapsed-days convention would
    stretch a term holding more leap days than the 365.25 average.
    """
    rate = credit.annual_interest_rate
    if rate < 0:
        raise InvalidEntityStateError(
            f"Credit {credit.credit_id} has negative interest rate {rate}"
        )

    try:
        periods = PERIODS_PER_YEAR[RepaymentType(credit.repayment_type)]
    except ValueError:
        raise InvalidEntityStateError(
            f"Credit {credit.credit_id} has unknown repayment type {credit.repayment_type!r}"
        ) from None

    principal = credit.principal or Decimal("0")
    total_periods = repayment_years(credit) * periods

    if rate == 0:
        return principal / total_periods

    period_rate = rate / 100 / periods
    growth = (1 + period_rate) ** total_periods
    return principal * period_rate * growth / (growth - 1)


def _floor(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def preview_schedule(credit: Credit) -> ScheduleSummary | None:
    """Preview straight-line principal and flat interest payments.

    Returns ``None`` when the credit cannot be scheduled yet: a date or the
    principal is missing, a cadence is unknown, or the grace period pushes
    the first payment to or past maturity.
    """
    if credit.start_date is None or credit.maturity_date is None or not credit.principal:
        logger.debug("Credit %s is missing dates or principal", credit.credit_id)
        return None

    try:
        principal_frequency = RepaymentFrequency(credit.principal_repayment_frequency)
        interest_frequency = RepaymentFrequency(credit.interest_repayment_frequency)
    except ValueError:
        logger.warning("Credit %s has an unknown repayment cadence", credit.credit_id)
        return None

    payment_start_date = add_months(credit.start_date, credit.grace_period_months or 0)
    if payment_start_date >= credit.maturity_date:
        logger.debug(
            "Credit %s grace period ends on or after maturity (%s >= %s)",
            credit.credit_id,
            payment_start_date,
            credit.maturity_date,
        )
        return None

    total_years = year_fraction(payment_start_date, credit.maturity_date)

    principal_per_year = FREQUENCY_PER_YEAR[principal_frequency]
    interest_per_year = FREQUENCY_PER_YEAR[interest_frequency]

    total_principal_payments = _floor(total_years * principal_per_year)
    total_interest_payments = _floor(total_years * interest_per_year)

    principal = credit.principal
    principal_per_payment = (
        principal / total_principal_payments if total_principal_payments > 0 else Decimal("0")
    )

    # Flat on the original principal: does not decay as principal is repaid
    annual_interest = principal * credit.annual_interest_rate / 100
    interest_per_payment = (
        annual_interest / interest_per_year if total_interest_payments > 0 else Decimal("0")
    )

    return ScheduleSummary(
        principal_per_payment=principal_per_payment,
        interest_per_payment=interest_per_payment,
        total_principal_payments=total_principal_payments,
        total_interest_payments=total_interest_payments,
        payment_start_date=payment_start_date,
        principal_frequency=principal_frequency,
        interest_frequency=interest_frequency,
    )


def _component_rows(
    payment_start_date: date,
    frequency: RepaymentFrequency,
    count: int,
    amount: Decimal,
    component: ScheduleComponent,
) -> Iterator[ScheduledPayment]:
    step = 12 // FREQUENCY_PER_YEAR[frequency]
    for sequence in range(1, count + 1):
        yield ScheduledPayment(
            due_date=add_months(payment_start_date, sequence * step),
            component=component,
            sequence=sequence,
            amount=amount,
        )


def iter_schedule(credit: Credit) -> Iterator[ScheduledPayment]:
    """Expand :func:`preview_schedule` into dated payment rows.

    Each component is paid in arrears, one period after the payment start
    date. Rows are ordered by due date, principal before interest on the
    same day. Unschedulable credits yield nothing.
    """
    summary = preview_schedule(credit)
    if summary is None:
        return

    rows = [
        *_component_rows(
            summary.payment_start_date,
            summary.principal_frequency,
            summary.total_principal_payments,
            summary.principal_per_payment,
            ScheduleComponent.PRINCIPAL,
        ),
        *_component_rows(
            summary.payment_start_date,
            summary.interest_frequency,
            summary.total_interest_payments,
            summary.interest_per_payment,
            ScheduleComponent.INTEREST,
        ),
    ]
    rows.sort(key=lambda row: (row.due_date, row.component != ScheduleComponent.PRINCIPAL, row.sequence))
    yield from rows
