from collections import defaultdict
from decimal import Decimal
from typing import Iterable, List, Sequence

from pinee.models.enums import CONFIRMED_INCOME_STATUSES, ExpenseStatus, TransactionType
from pinee.schemas.report import CategoryShare, ReportSummary, StatusShare
from pinee.schemas.transaction import TransactionRecord

ZERO = Decimal("0")
CENT = Decimal("0.01")

# Registros sem categoria entram aqui
OTHER_CATEGORY = "Outros"


def report_summary(records: Iterable[TransactionRecord]) -> ReportSummary:
    """Receitas e despesas do período, sem distinguir status."""
    income = expense = ZERO
    for record in records:
        if record.type == TransactionType.income.value:
            income += record.amount
        elif record.type == TransactionType.expense.value:
            expense += record.amount
    return ReportSummary(total_income=income, total_expense=expense, balance=income - expense)


def category_breakdown(records: Iterable[TransactionRecord], type_: TransactionType) -> List[CategoryShare]:
    totals = defaultdict(lambda: ZERO)
    for record in records:
        if record.type != type_.value:
            continue
        category = record.category.strip() or OTHER_CATEGORY
        totals[category] += record.amount

    grand_total = sum(totals.values(), ZERO)
    shares = [
        CategoryShare(
            category=category,
            total=total,
            percentage=(total / grand_total * 100).quantize(CENT) if grand_total > 0 else ZERO,
        )
        for category, total in totals.items()
    ]
    # maior valor primeiro; empate pelo nome
    shares.sort(key=lambda s: (-s.total, s.category))
    return shares


def status_breakdown(records: Sequence[TransactionRecord]) -> List[StatusShare]:
    """Pago / Não Pago para despesas, Recebido / Pendente para receitas.

    Lista vazia quando não há nada a mostrar.
    """
    paid = unpaid = received = pending = ZERO
    for record in records:
        if record.type == TransactionType.expense.value:
            if record.status == ExpenseStatus.paid.value:
                paid += record.amount
            else:
                unpaid += record.amount
        elif record.type == TransactionType.income.value:
            if record.status in CONFIRMED_INCOME_STATUSES:
                received += record.amount
            else:
                pending += record.amount

    if paid + unpaid + received + pending <= 0:
        return []
    return [
        StatusShare(status="paid", label="Pago", total=paid),
        StatusShare(status="unpaid", label="Não Pago", total=unpaid),
        StatusShare(status="received", label="Recebido", total=received),
        StatusShare(status="pending", label="Pendente", total=pending),
    ]
