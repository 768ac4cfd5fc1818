"""Transaction endpoints: CRUD with auto-categorization and recurring lookups."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from spendtrack.api.deps import (
    get_categorization_service,
    get_current_user,
    get_transaction_service,
)
from spendtrack.models.user import User
from spendtrack.schemas.transaction import (
    CategorizeRequest,
    CategorizeResponse,
    PaginationMeta,
    TransactionCreate,
    TransactionListResult,
    TransactionResponse,
    TransactionUpdate,
)
from spendtrack.services.categorization import CategorizationService
from spendtrack.services.transaction import TransactionService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post(
    "",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a transaction",
    description="""
    Create a one-off transaction or a recurring definition.

    When **category** is omitted it is inferred from the description using the
    caller's category rules, then the built-in keyword table.

    Recurring definitions (**is_recurring**) need a **recurring_pattern**
    (`daily`, `weekly`, `monthly`, `yearly`). Instances are generated by the
    recurrence scheduler, never by this endpoint.
    """,
)
async def create_transaction(
    payload: TransactionCreate,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    transaction = await service.create_transaction(current_user.id, payload)
    return TransactionResponse.model_validate(transaction)


@router.get(
    "",
    response_model=TransactionListResult,
    summary="List transactions",
)
async def list_transactions(
    recurring: Annotated[
        bool | None, Query(description="True: recurring definitions only; False: exclude them")
    ] = None,
    category: Annotated[str | None, Query(description="Filter by category")] = None,
    month: Annotated[int | None, Query(ge=1, le=12, description="Calendar month; requires year")] = None,
    year: Annotated[int | None, Query(ge=1, le=9999, description="Calendar year; requires month")] = None,
    page: Annotated[int, Query(ge=1, description="Page number (1-indexed)")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page (1-100)")] = 50,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResult:
    transactions, total = await service.list_transactions(
        current_user.id,
        recurring=recurring,
        category=category,
        month=month,
        year=year,
        skip=(page - 1) * limit,
        limit=limit,
    )
    return TransactionListResult(
        transactions=[TransactionResponse.model_validate(txn) for txn in transactions],
        total=total,
        pagination=PaginationMeta(
            page=page,
            limit=limit,
            total=total,
            total_pages=(total + limit - 1) // limit if total > 0 else 0,
        ),
    )


@router.post(
    "/categorize",
    response_model=CategorizeResponse,
    summary="Preview the category for a description",
)
async def preview_category(
    payload: CategorizeRequest,
    current_user: User = Depends(get_current_user),
    service: CategorizationService = Depends(get_categorization_service),
) -> CategorizeResponse:
    # Strict: a preview that silently ignored the user's rules would be misleading.
    result = await service.classify(payload.description, current_user.id, strict=True)
    return CategorizeResponse(
        category=result.category,
        source=result.source,
        rule_id=result.rule_id,
        matched_keyword=result.matched_keyword,
    )


@router.patch(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Update a transaction",
    responses={404: {"description": "Transaction not found"}},
)
@router.put(
    "/{transaction_id}",
    response_model=TransactionResponse,
    summary="Update a transaction",
    responses={404: {"description": "Transaction not found"}},
)
async def update_transaction(
    transaction_id: UUID,
    payload: TransactionUpdate,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionResponse:
    transaction = await service.update_transaction(current_user.id, transaction_id, payload)
    return TransactionResponse.model_validate(transaction)


@router.delete(
    "/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a transaction",
    description="Soft delete. Deleting a recurring definition keeps its generated instances.",
    responses={404: {"description": "Transaction not found"}},
)
async def delete_transaction(
    transaction_id: UUID,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> None:
    await service.delete_transaction(current_user.id, transaction_id)


@router.get(
    "/{transaction_id}/instances",
    response_model=TransactionListResult,
    summary="List instances generated from a recurring definition",
    responses={404: {"description": "Recurring definition not found"}},
)
async def list_instances(
    transaction_id: UUID,
    current_user: User = Depends(get_current_user),
    service: TransactionService = Depends(get_transaction_service),
) -> TransactionListResult:
    instances = await service.list_instances(current_user.id, transaction_id)
    return TransactionListResult(
        transactions=[TransactionResponse.model_validate(txn) for txn in instances],
        total=len(instances),
    )
