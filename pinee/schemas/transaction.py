from datetime import date as dt_date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pinee.models.enums import RecurringFrequency, TransactionType, VALID_STATUSES
from pinee.schemas.period import DateRange

DEFAULT_STATUS = {
    TransactionType.income: "pending",
    TransactionType.expense: "unpaid",
    TransactionType.investment: "invested",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransactionRecord(BaseModel):
    """Snapshot imutável de uma transação, como vem do Transaction Store.

    `type` e `status` ficam como string crua: um documento gravado por um
    cliente mais novo continua legível e o motor de agregação decide o que
    ignorar. `date` também fica crua (yyyy-MM-dd).
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: Optional[str] = None
    user_id: str
    title: str = ""
    description: Optional[str] = None
    amount: Decimal = Field(ge=0)
    category: str = "Geral"
    date: str
    is_income: bool = False
    type: str = TransactionType.expense.value
    status: str = "pending"
    created_at: datetime = Field(default_factory=_utcnow)
    is_recurring: bool = False
    recurring_frequency: str = ""
    recurring_end_date: str = ""
    source_transaction_id: Optional[str] = None

    @field_validator("created_at")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        # datetimes naive (SQLite) são tratados como UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class TransactionCreate(BaseModel):
    title: str
    description: Optional[str] = None
    amount: Decimal = Field(ge=0)
    category: str = "Geral"
    date: dt_date
    type: TransactionType
    status: Optional[str] = None
    is_recurring: bool = False
    recurring_frequency: Optional[RecurringFrequency] = None
    recurring_end_date: Optional[dt_date] = None
    source_transaction_id: Optional[str] = None

    @model_validator(mode="after")
    def _check_status_and_recurrence(self):
        if self.status is None:
            self.status = DEFAULT_STATUS[self.type]
        elif self.status not in VALID_STATUSES[self.type.value]:
            raise ValueError(f"Status '{self.status}' inválido para o tipo '{self.type.value}'")

        if self.is_recurring and (self.recurring_frequency is None or self.recurring_end_date is None):
            raise ValueError("Transações recorrentes exigem frequência e data final")
        if self.is_recurring and self.recurring_end_date < self.date:
            raise ValueError("A data final da recorrência é anterior à data da transação")
        return self

    def to_record(self, user_id: str, record_id: Optional[str] = None,
                  created_at: Optional[datetime] = None) -> TransactionRecord:
        return TransactionRecord(
            id=record_id,
            user_id=user_id,
            title=self.title,
            description=self.description,
            amount=self.amount,
            category=self.category,
            date=self.date.isoformat(),
            is_income=self.type == TransactionType.income,
            type=self.type.value,
            status=self.status,
            created_at=created_at or _utcnow(),
            is_recurring=self.is_recurring,
            recurring_frequency=self.recurring_frequency.value if self.is_recurring else "",
            recurring_end_date=self.recurring_end_date.isoformat() if self.is_recurring else "",
            source_transaction_id=self.source_transaction_id,
        )


class TransactionUpdate(TransactionCreate):
    pass


class TransferCreate(BaseModel):
    amount: Decimal = Field(gt=0)
    title: Optional[str] = None
    category: Optional[str] = None
    date: Optional[dt_date] = None


class TransferResult(BaseModel):
    created: TransactionRecord
    source: Optional[TransactionRecord] = None
    source_deleted: bool = False


class TransactionListResponse(BaseModel):
    range: DateRange
    transactions: List[TransactionRecord]
    projected_income: Decimal
    projected_expense: Decimal
    projected_balance: Decimal
