import csv
import io
from typing import Iterable

from pinee.schemas.period import DateRange
from pinee.schemas.transaction import TransactionRecord
from pinee.services.period import parse_iso_date

CSV_HEADER = ["Data", "Descrição", "Categoria", "Tipo", "Valor", "Status", "Recorrente", "Frequência", "Data de Criação"]

STATUS_LABELS = {
    "paid": "Pago",
    "unpaid": "Não Pago",
    "received": "Recebido",
    "pending": "Pendente",
    "consolidated": "Consolidado",
    "invested": "Investido",
}

FREQUENCY_LABELS = {
    "weekly": "Semanal",
    "monthly": "Mensal",
    "yearly": "Anual",
}

TYPE_LABELS = {
    "income": "Receita",
    "expense": "Despesa",
    "investment": "Investimento",
}


class NoDataFound(Exception):
    pass


def export_filename(date_range: DateRange) -> str:
    return f"PINEE_Transacoes_{date_range.start.isoformat()}_{date_range.end.isoformat()}.csv"


def _row(record: TransactionRecord) -> list:
    parsed = parse_iso_date(record.date)
    return [
        parsed.strftime("%d/%m/%Y") if parsed else record.date,
        record.title or record.description or "-",
        record.category,
        TYPE_LABELS.get(record.type, record.type.capitalize()),
        f"{record.amount:.2f}",
        STATUS_LABELS.get(record.status, record.status.capitalize()),
        "Sim" if record.is_recurring else "Não",
        FREQUENCY_LABELS.get(record.recurring_frequency, record.recurring_frequency.capitalize()),
        record.created_at.strftime("%d/%m/%Y %H:%M"),
    ]


def export_csv(records: Iterable[TransactionRecord]) -> str:
    records = list(records)
    if not records:
        raise NoDataFound("Nenhuma transação encontrada para o período selecionado")

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow(_row(record))
    return buffer.getvalue()
