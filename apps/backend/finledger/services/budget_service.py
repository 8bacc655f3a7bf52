from __future__ import annotations

from typing import Optional

from finledger.ledger import BudgetEnrichmentEngine, Deadline, EnrichedBudget, LedgerStore


class BudgetService:
    def __init__(self, store: LedgerStore) -> None:
        self.engine = BudgetEnrichmentEngine(store)

    def get_budget(self, budget_id: int, user_id: int, *, deadline: Optional[Deadline] = None) -> EnrichedBudget:
        return self.engine.enrich_by_id(budget_id, user_id, deadline=deadline)

    def list_budgets(
        self,
        user_id: int,
        month: int,
        year: int,
        *,
        deadline: Optional[Deadline] = None,
    ) -> list[EnrichedBudget]:
        return self.engine.enrich_period(user_id, month, year, deadline=deadline)
