"""
Budget Models

A budget caps spending over the current period, either for one
category or for the whole month.

DESIGN DECISION: The two kinds of budget are separate model classes
joined in a discriminated union on `kind`. Earlier versions marked the
monthly cap with the reserved category string "Total Budget"; that
label now only exists for display.
"""

import calendar
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
    model_validator,
)

from finance_manager.models.transaction import to_naive_local


TOTAL_BUDGET_LABEL = "Total Budget"


def first_instant_of_month(moment: Optional[datetime] = None) -> datetime:
    """Midnight on the first day of the month containing `moment`."""
    moment = moment or datetime.now()
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def last_instant_of_month(moment: Optional[datetime] = None) -> datetime:
    """Last representable instant of the month containing `moment`."""
    moment = moment or datetime.now()
    last_day = calendar.monthrange(moment.year, moment.month)[1]
    return moment.replace(
        day=last_day, hour=23, minute=59, second=59, microsecond=999999
    )


# =============================================================================
# BUDGET VARIANTS
# =============================================================================

class BudgetBase(BaseModel):
    """
    Fields shared by every budget.

    start_date/end_date describe the budget period. Spending is
    currently measured against the calendar month at query time,
    not against this period.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: int = Field(
        default=0,
        ge=0,
        description="Store-assigned identity (0 until added)"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Allocated cap"
    )
    start_date: datetime = Field(
        default_factory=first_instant_of_month,
        description="Start of the budget period"
    )
    end_date: datetime = Field(
        default_factory=last_instant_of_month,
        description="End of the budget period"
    )
    description: str = Field(
        default="",
        max_length=500,
    )

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, v: datetime) -> datetime:
        return to_naive_local(v)

    @model_validator(mode="after")
    def validate_period(self) -> "BudgetBase":
        if self.end_date < self.start_date:
            raise ValueError("Budget end date cannot be before start date")
        return self


class TotalBudget(BudgetBase):
    """The overall monthly spending cap."""

    kind: Literal["total"] = "total"

    @property
    def label(self) -> str:
        return TOTAL_BUDGET_LABEL


class CategoryBudget(BudgetBase):
    """A spending cap for a single transaction category."""

    kind: Literal["category"] = "category"
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Transaction category this budget caps"
    )

    @field_validator("category")
    @classmethod
    def reject_reserved_label(cls, v: str) -> str:
        if v == TOTAL_BUDGET_LABEL:
            raise ValueError(
                f"'{TOTAL_BUDGET_LABEL}' is reserved; use TotalBudget instead"
            )
        return v

    @property
    def label(self) -> str:
        return self.category


Budget = Annotated[Union[TotalBudget, CategoryBudget], Field(discriminator="kind")]

_budget_adapter: TypeAdapter = TypeAdapter(Budget)


def parse_budget(data: dict[str, Any]) -> Union[TotalBudget, CategoryBudget]:
    """Build the right budget variant from a plain dict carrying `kind`."""
    return _budget_adapter.validate_python(data)


def budget_for_category(
    category: str,
    amount: Decimal,
    **fields: Any,
) -> Union[TotalBudget, CategoryBudget]:
    """
    Build a budget from a category label.

    The legacy "Total Budget" label maps to TotalBudget, anything
    else to a CategoryBudget.
    """
    if category.strip() == TOTAL_BUDGET_LABEL:
        return TotalBudget(amount=amount, **fields)
    return CategoryBudget(category=category, amount=amount, **fields)


# =============================================================================
# USAGE MODELS
# =============================================================================

class BudgetStatus(str, Enum):
    """
    Classification of how much of a budget has been used.

    NORMAL up to 85%, WARNING above 85% up to 100%, OVER_BUDGET above 100%.
    """
    NORMAL = "normal"
    WARNING = "warning"
    OVER_BUDGET = "over_budget"


class BudgetUsage(BaseModel):
    """Spending of one budget in the current month."""
    model_config = ConfigDict(frozen=True)

    budget: Budget
    spent: Decimal
    remaining: Decimal
    percentage: float
    status: BudgetStatus


class CategorySummary(BaseModel):
    """One row of the per-category budget summary."""
    model_config = ConfigDict(frozen=True)

    budget: Decimal = Field(description="Allocated amount")
    spent: Decimal = Field(description="Spent this month")
    remaining: Decimal = Field(description="Allocated minus spent, may be negative")
    percentage: float = Field(description="Spent as a percentage of allocated")
    status: BudgetStatus
