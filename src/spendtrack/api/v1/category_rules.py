"""Category rule management endpoints (user-scoped)."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from spendtrack.api.deps import get_current_user, get_rule_repository
from spendtrack.core.exceptions import NotFoundError
from spendtrack.models.category_rule import CategoryRule
from spendtrack.models.user import User
from spendtrack.repositories.category_rule import CategoryRuleRepository
from spendtrack.schemas.category_rule import (
    CategoryRuleCreate,
    CategoryRuleListResult,
    CategoryRuleResponse,
    CategoryRuleUpdate,
)

router = APIRouter(prefix="/category-rules", tags=["category-rules"])


@router.get(
    "",
    response_model=CategoryRuleListResult,
    summary="List category rules",
    description="All of the caller's rules, in the order they are evaluated.",
)
async def list_rules(
    current_user: User = Depends(get_current_user),
    rule_repo: CategoryRuleRepository = Depends(get_rule_repository),
) -> CategoryRuleListResult:
    rules = await rule_repo.get_by_user(current_user.id)
    return CategoryRuleListResult(
        rules=[CategoryRuleResponse.model_validate(rule) for rule in rules]
    )


@router.post(
    "",
    response_model=CategoryRuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category rule",
)
async def create_rule(
    payload: CategoryRuleCreate,
    current_user: User = Depends(get_current_user),
    rule_repo: CategoryRuleRepository = Depends(get_rule_repository),
) -> CategoryRuleResponse:
    rule = await rule_repo.create(
        CategoryRule(
            user_id=current_user.id,
            keywords=payload.keywords,
            category=payload.category.strip(),
            priority=payload.priority,
            enabled=payload.enabled,
        )
    )
    return CategoryRuleResponse.model_validate(rule)


@router.patch(
    "/{rule_id}",
    response_model=CategoryRuleResponse,
    summary="Update a category rule",
    responses={404: {"description": "Rule not found"}},
)
async def update_rule(
    rule_id: UUID,
    payload: CategoryRuleUpdate,
    current_user: User = Depends(get_current_user),
    rule_repo: CategoryRuleRepository = Depends(get_rule_repository),
) -> CategoryRuleResponse:
    rule = await rule_repo.get_for_user(current_user.id, rule_id)
    if rule is None:
        raise NotFoundError("API_002", {"rule_id": str(rule_id)})

    updated = await rule_repo.update(rule.id, payload.model_dump(exclude_unset=True, exclude_none=True))
    return CategoryRuleResponse.model_validate(updated)


@router.delete(
    "/{rule_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category rule",
    responses={404: {"description": "Rule not found"}},
)
async def delete_rule(
    rule_id: UUID,
    current_user: User = Depends(get_current_user),
    rule_repo: CategoryRuleRepository = Depends(get_rule_repository),
) -> None:
    rule = await rule_repo.get_for_user(current_user.id, rule_id)
    if rule is None:
        raise NotFoundError("API_002", {"rule_id": str(rule_id)})

    await rule_repo.soft_delete(rule.id)
