from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from sqlmodel import SQLModel, Field


def _new_id() -> str:
    return uuid4().hex


class Transaction(SQLModel, table=True):
    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(index=True)
    title: str = ""
    description: Optional[str] = None
    amount: Decimal = Field(default=0, max_digits=14, decimal_places=2)
    category: str = "Geral"
    # yyyy-MM-dd, mesmo formato do Firestore (comparação lexicográfica)
    date: str = Field(index=True)
    is_income: bool = False
    type: str = "expense"
    status: str = "pending"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_recurring: bool = False
    recurring_frequency: str = ""
    recurring_end_date: str = ""
    source_transaction_id: Optional[str] = Field(default=None, index=True)
