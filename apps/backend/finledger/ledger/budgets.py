"""Budget enrichment: spent-to-date and remaining for monthly budgets.

A budget's month is the half-open range [first day, first day of next month).
``enrich`` is all-or-nothing; ``enrich_many`` isolates every item so one
unreadable sum degrades that item to zero spent instead of failing the list.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from ..core.errors import DeadlineExceeded, InvalidBillingParameters
from .billing import next_month, require_month
from .deadline import Deadline, check_deadline
from .store import LedgerStore
from .types import BudgetRecord, EnrichedBudget


logger = structlog.get_logger(__name__)


def budget_period(year: int, month: int) -> tuple[date, date]:
    """Return ``(start, end_exclusive)`` for the budget month.

    Raises ``InvalidBillingParameters`` for a month outside the calendar,
    including December 9999 whose exclusive end cannot be represented.
    """
    require_month(year, month)
    next_year, next_mon = next_month(year, month)
    if next_year > date.max.year:
        raise InvalidBillingParameters(f"budget month {year}-{month:02d} has no following month")
    start = date(year, month, 1)
    return start, date(next_year, next_mon, 1)


def _enriched(budget: BudgetRecord, spent: Decimal, *, available: bool = True) -> EnrichedBudget:
    return EnrichedBudget(
        id=budget.id,
        user_id=budget.user_id,
        category_id=budget.category_id,
        category_name=budget.category_name,
        month=budget.month,
        year=budget.year,
        amount=budget.amount,
        spent_amount=spent,
        spent_available=available,
    )


class BudgetEnrichmentEngine:
    def __init__(self, store: LedgerStore) -> None:
        self.store = store

    def _spent(self, budget: BudgetRecord, deadline: Optional[Deadline]) -> Decimal:
        start, end_exclusive = budget_period(budget.year, budget.month)
        check_deadline(deadline, "sum_expenses")
        spent = self.store.sum_expenses(budget.user_id, budget.category_id, start, end_exclusive)
        return Decimal(spent) if spent is not None else Decimal("0.00")

    def enrich(self, budget: BudgetRecord, *, deadline: Optional[Deadline] = None) -> EnrichedBudget:
        try:
            spent = self._spent(budget, deadline)
        except Exception as exc:
            logger.error("budget_spent_failed", budget_id=budget.id, user_id=budget.user_id, error=str(exc))
            raise
        return _enriched(budget, spent)

    def enrich_many(
        self,
        budgets: Iterable[BudgetRecord],
        *,
        deadline: Optional[Deadline] = None,
    ) -> list[EnrichedBudget]:
        results: list[EnrichedBudget] = []
        for budget in budgets:
            try:
                spent = self._spent(budget, deadline)
            except DeadlineExceeded:
                raise
            except Exception as exc:
                # listing degrades per item; the caller still gets every budget
                logger.warning(
                    "budget_spent_degraded",
                    budget_id=budget.id,
                    category_id=budget.category_id,
                    user_id=budget.user_id,
                    error=str(exc),
                )
                results.append(_enriched(budget, Decimal("0.00"), available=False))
                continue
            results.append(_enriched(budget, spent))
        return results

    def enrich_by_id(self, budget_id: int, user_id: int, *, deadline: Optional[Deadline] = None) -> EnrichedBudget:
        check_deadline(deadline, "fetch_budget")
        return self.enrich(self.store.fetch_budget(budget_id, user_id), deadline=deadline)

    def enrich_period(
        self,
        user_id: int,
        month: int,
        year: int,
        *,
        deadline: Optional[Deadline] = None,
    ) -> list[EnrichedBudget]:
        budget_period(year, month)
        check_deadline(deadline, "list_budgets")
        return self.enrich_many(self.store.list_budgets(user_id, month, year), deadline=deadline)
