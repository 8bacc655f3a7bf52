from fastapi import APIRouter

from finledger.api.budgets import handlers
from finledger.schemas import BudgetOut

router = APIRouter(prefix="/budgets", tags=["budgets"])

router.add_api_route(
    "",
    handlers.create_budget,
    methods=["POST"],
    response_model=BudgetOut,
    status_code=201,
)

router.add_api_route(
    "",
    handlers.list_budgets,
    methods=["GET"],
    response_model=list[BudgetOut],
)

router.add_api_route(
    "/{budget_id}",
    handlers.get_budget,
    methods=["GET"],
    response_model=BudgetOut,
)

router.add_api_route(
    "/{budget_id}",
    handlers.update_budget,
    methods=["PUT"],
    response_model=BudgetOut,
)

router.add_api_route(
    "/{budget_id}",
    handlers.delete_budget,
    methods=["DELETE"],
    status_code=204,
)
