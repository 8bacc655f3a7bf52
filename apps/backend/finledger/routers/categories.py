from fastapi import APIRouter

from finledger.api.categories import handlers
from finledger.schemas import CategoryOut

router = APIRouter(prefix="/categories", tags=["categories"])

router.add_api_route(
    "",
    handlers.create_category,
    methods=["POST"],
    response_model=CategoryOut,
    status_code=201,
)

router.add_api_route(
    "",
    handlers.list_categories,
    methods=["GET"],
    response_model=list[CategoryOut],
)
