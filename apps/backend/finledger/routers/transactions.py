"""Transactions router exposing the transaction handlers."""

from fastapi import APIRouter

from finledger.api.transactions import handlers
from finledger.schemas import TransactionOut

router = APIRouter(prefix="/transactions", tags=["transactions"])

router.add_api_route(
    "",
    handlers.create_transaction,
    methods=["POST"],
    response_model=TransactionOut,
    status_code=201,
)

router.add_api_route(
    "",
    handlers.list_transactions,
    methods=["GET"],
    response_model=list[TransactionOut],
)

router.add_api_route(
    "/{txn_id}",
    handlers.delete_transaction,
    methods=["DELETE"],
    status_code=204,
)

router.add_api_route(
    "/{txn_id}",
    handlers.get_transaction,
    methods=["GET"],
    response_model=TransactionOut,
)

router.add_api_route(
    "/{txn_id}",
    handlers.update_transaction,
    methods=["PUT"],
    response_model=TransactionOut,
)

router.add_api_route(
    "/{txn_id}",
    handlers.patch_transaction,
    methods=["PATCH"],
    response_model=TransactionOut,
)
