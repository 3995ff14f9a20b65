from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional, Tuple

from pinee.constants.categories import SystemCategoryKey
from pinee.models.enums import IncomeStatus, InvestmentStatus, TransactionType
from pinee.schemas.transaction import TransactionRecord

# Diferença abaixo disso conta como transferência total
FULL_TRANSFER_TOLERANCE = Decimal("0.01")


class TransferError(ValueError):
    pass


def _validate(source: TransactionRecord, expected_type: TransactionType, amount: Decimal) -> None:
    if source.type != expected_type.value:
        raise TransferError(f"A transação de origem precisa ser do tipo '{expected_type.value}'")
    if not source.id:
        raise TransferError("A transação de origem ainda não foi salva")
    if amount <= 0:
        raise TransferError("O valor deve ser maior que zero")
    if amount > source.amount:
        raise TransferError("O valor não pode exceder o valor da transação de origem")


def _remaining(source: TransactionRecord, amount: Decimal) -> Optional[TransactionRecord]:
    """None quando a origem deve ser excluída; senão a origem com o valor reduzido."""
    if abs(source.amount - amount) < FULL_TRANSFER_TOLERANCE:
        return None
    return source.model_copy(update={"amount": source.amount - amount})


def income_to_investment(income: TransactionRecord, amount: Decimal, title: Optional[str] = None,
                         on: Optional[date] = None) -> TransactionRecord:
    """Cria o investimento ligado à receita de origem.

    A receita não é alterada: o valor continua nos baldes de receita e sai
    dos saldos via `source_transaction_id`.
    """
    _validate(income, TransactionType.income, amount)
    return TransactionRecord(
        user_id=income.user_id,
        title=title or income.title,
        description=title or income.title,
        amount=amount,
        category=SystemCategoryKey.INVESTMENT.value,
        date=(on or date.today()).isoformat(),
        is_income=False,
        type=TransactionType.investment.value,
        status=InvestmentStatus.invested.value,
        created_at=datetime.now(timezone.utc),
        source_transaction_id=income.id,
    )


def investment_to_income(investment: TransactionRecord, amount: Decimal, title: Optional[str] = None,
                         category: Optional[str] = None,
                         on: Optional[date] = None) -> Tuple[TransactionRecord, Optional[TransactionRecord]]:
    _validate(investment, TransactionType.investment, amount)
    income = TransactionRecord(
        user_id=investment.user_id,
        title=title or investment.title,
        description=title or investment.title,
        amount=amount,
        category=category or SystemCategoryKey.EXTRA_INCOME.value,
        date=(on or date.today()).isoformat(),
        is_income=True,
        type=TransactionType.income.value,
        status=IncomeStatus.received.value,
        created_at=datetime.now(timezone.utc),
        source_transaction_id=investment.id,
    )
    return income, _remaining(investment, amount)
