import logging
from datetime import date, timedelta
from typing import List, Optional

from pinee.models.enums import RecurringFrequency
from pinee.schemas.transaction import TransactionRecord
from pinee.services.period import add_months, parse_iso_date

logger = logging.getLogger(__name__)

MAX_OCCURRENCES = 366


def occurrence_dates(start: date, frequency: RecurringFrequency, end: date) -> List[date]:
    """Datas de start até end (inclusive). Meses curtos limitam o dia ao último do mês."""
    dates = []
    step = 0
    current = start
    while current <= end and len(dates) < MAX_OCCURRENCES:
        dates.append(current)
        step += 1
        if frequency == RecurringFrequency.weekly:
            current = start + timedelta(weeks=step)
        elif frequency == RecurringFrequency.monthly:
            current = add_months(start, step, anchor_day=start.day)
        else:
            current = add_months(start, 12 * step, anchor_day=start.day)
    return dates


def expand_recurring(record: TransactionRecord, until: Optional[date] = None) -> List[TransactionRecord]:
    """Materializa uma série recorrente em registros individuais.

    O primeiro item é o próprio registro; as cópias seguintes não têm id e
    não são marcadas como recorrentes.
    """
    if not record.is_recurring:
        return [record]

    try:
        frequency = RecurringFrequency(record.recurring_frequency)
    except ValueError:
        logger.warning("Frequência '%s' desconhecida; série não expandida", record.recurring_frequency)
        return [record]

    start = parse_iso_date(record.date)
    end = parse_iso_date(record.recurring_end_date)
    if start is None or end is None:
        return [record]
    if until is not None and until < end:
        end = until

    expanded = [record]
    for occurrence in occurrence_dates(start, frequency, end)[1:]:
        expanded.append(record.model_copy(update={
            "id": None,
            "date": occurrence.isoformat(),
            "is_recurring": False,
            "recurring_frequency": "",
            "recurring_end_date": "",
        }))
    return expanded
