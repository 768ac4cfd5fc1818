"""API version 1 routes."""

from fastapi import APIRouter

from spendtrack.api.v1 import category_rules, transactions

router = APIRouter(prefix="/api/v1")

router.include_router(transactions.router)
router.include_router(category_rules.router)
