"""
Transaction Model

A transaction is a single dated money movement, flagged income or
expense and tagged with a free-form category.

DESIGN DECISION: The amount is never signed. Direction lives in the
is_income flag so every sum in the system adds non-negative values.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


MONTH_KEY_FORMAT = "%Y-%m"


def to_naive_local(moment: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


class Transaction(BaseModel):
    """
    A recorded income or expense.

    Built by a collaborator (entry form or CSV import) with id=0.
    The transaction store assigns the real id when it is added;
    after that the record is immutable.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: int = Field(
        default=0,
        ge=0,
        description="Store-assigned identity (0 until added)"
    )
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the money moved"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount; direction is given by is_income"
    )
    is_income: bool = Field(
        default=False,
        description="True for income, False for expense"
    )
    category: str = Field(
        default="",
        max_length=100,
        description="Free-form category label"
    )
    description: str = Field(
        default="",
        description="Optional note"
    )

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        """Store every date as naive local time so dates stay comparable."""
        return to_naive_local(v)

    @property
    def month_key(self) -> str:
        """Calendar month of the transaction as YYYY-MM."""
        return self.date.strftime(MONTH_KEY_FORMAT)

    @property
    def is_expense(self) -> bool:
        return not self.is_income
