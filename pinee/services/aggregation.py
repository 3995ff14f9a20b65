import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from pinee.core.config import RECENT_LIMIT
from pinee.models.enums import CONFIRMED_INCOME_STATUSES, ExpenseStatus, TransactionType
from pinee.schemas.dashboard import ChartPoint, DashboardTotals
from pinee.schemas.period import DateRange
from pinee.schemas.transaction import TransactionRecord
from pinee.services.period import contains, parse_iso_date

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class Buckets:
    income_confirmed: Decimal = ZERO
    income_pending: Decimal = ZERO
    expense_paid: Decimal = ZERO
    expense_pending: Decimal = ZERO
    invested_total: Decimal = ZERO
    # investimentos criados a partir de uma receita; não exposto no dashboard
    transferred_from_income: Decimal = ZERO

    @property
    def projected_balance(self) -> Decimal:
        return (
            (self.income_confirmed + self.income_pending)
            - (self.expense_paid + self.expense_pending)
            - self.transferred_from_income
        )

    @property
    def consolidated_balance(self) -> Decimal:
        return self.income_confirmed - self.expense_paid - self.transferred_from_income


def compute_buckets(records: Iterable[TransactionRecord]) -> Buckets:
    income_confirmed = income_pending = ZERO
    expense_paid = expense_pending = ZERO
    invested_total = transferred = ZERO

    for record in records:
        amount = record.amount
        if record.type == TransactionType.income.value:
            if record.status in CONFIRMED_INCOME_STATUSES:
                income_confirmed += amount
            else:
                income_pending += amount
        elif record.type == TransactionType.expense.value:
            if record.status == ExpenseStatus.paid.value:
                expense_paid += amount
            elif record.status == ExpenseStatus.unpaid.value:
                expense_pending += amount
            else:
                # status desconhecido não entra em nenhum balde
                logger.debug("Despesa %s com status '%s' ignorada nos totais", record.id, record.status)
        elif record.type == TransactionType.investment.value:
            invested_total += amount
            if record.source_transaction_id:
                transferred += amount
        else:
            logger.warning("Transação %s com tipo desconhecido '%s' ignorada", record.id, record.type)

    return Buckets(
        income_confirmed=income_confirmed,
        income_pending=income_pending,
        expense_paid=expense_paid,
        expense_pending=expense_pending,
        invested_total=invested_total,
        transferred_from_income=transferred,
    )


def recent_transactions(records: Sequence[TransactionRecord], limit: int = RECENT_LIMIT) -> List[TransactionRecord]:
    # sorted é estável: empates mantêm a ordem de entrada
    return sorted(records, key=lambda r: r.created_at, reverse=True)[:limit]


def chart_series(records: Iterable[TransactionRecord]) -> List[ChartPoint]:
    daily = defaultdict(lambda: {"income": ZERO, "expense": ZERO})

    for record in records:
        if record.type == TransactionType.income.value:
            key = "income"
        elif record.type == TransactionType.expense.value:
            key = "expense"
        else:
            continue

        day = parse_iso_date(record.date)
        if day is None:
            logger.warning("Transação %s com data inválida '%s' fora do gráfico", record.id, record.date)
            continue
        daily[day][key] += record.amount

    return [
        ChartPoint(date=d, income=v["income"], expense=v["expense"])
        for d, v in sorted(daily.items())
    ]


def aggregate(records: Sequence[TransactionRecord],
              consolidated_records: Optional[Sequence[TransactionRecord]] = None) -> DashboardTotals:
    """Calcula os totais do dashboard.

    `records` é o conjunto do período selecionado (projeções, recentes e
    gráfico). `consolidated_records` é o conjunto do intervalo consolidado;
    se omitido, o saldo consolidado sai do próprio `records`.
    """
    records = list(records)
    selection = compute_buckets(records)
    if consolidated_records is None:
        consolidated = selection
    else:
        consolidated = compute_buckets(consolidated_records)

    return DashboardTotals(
        income_confirmed=selection.income_confirmed,
        income_pending=selection.income_pending,
        expense_paid=selection.expense_paid,
        expense_pending=selection.expense_pending,
        invested_total=selection.invested_total,
        consolidated_balance=consolidated.consolidated_balance,
        projected_balance=selection.projected_balance,
        recent_transactions=recent_transactions(records),
        chart_series=chart_series(records),
    )


def apply_local_patch(current_list: Sequence[TransactionRecord], changed_record: TransactionRecord,
                      selection_range: DateRange) -> List[TransactionRecord]:
    """Aplica uma edição local sem ir ao Transaction Store.

    Não recalcula totais: quem chama deve rodar `aggregate()` de novo.
    """
    if not contains(selection_range, changed_record.date):
        # saiu da janela visível
        return remove_local(current_list, changed_record.id)

    patched = list(current_list)
    if changed_record.id is not None:
        for index, record in enumerate(patched):
            if record.id == changed_record.id:
                patched[index] = changed_record
                return patched

    patched.append(changed_record)
    return patched


def remove_local(current_list: Sequence[TransactionRecord], record_id: Optional[str]) -> List[TransactionRecord]:
    if record_id is None:
        return list(current_list)
    return [record for record in current_list if record.id != record_id]
