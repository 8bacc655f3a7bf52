"""Router aggregation: mount every feature router under ``/api``."""

from fastapi import FastAPI

from . import accounts, budgets, categories, transactions


def register_routers(app: FastAPI) -> None:
    """Attach all API routes to the FastAPI application."""

    app.include_router(accounts.router, prefix="/api")
    app.include_router(transactions.router, prefix="/api")
    app.include_router(budgets.router, prefix="/api")
    app.include_router(categories.router, prefix="/api")
