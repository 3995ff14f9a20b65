import calendar
from datetime import date, datetime
from typing import Optional, Tuple

from pinee.models.enums import PeriodMode
from pinee.schemas.period import DateRange

# Limites do modo "todo o período"
EPOCH_START = date(2000, 1, 1)
FUTURE_CAP = date(2100, 12, 31)

ISO_FORMAT = "%Y-%m-%d"


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """yyyy-MM-dd -> date, ou None se não for uma data válida."""
    if not value:
        return None
    try:
        return datetime.strptime(value, ISO_FORMAT).date()
    except (TypeError, ValueError):
        return None


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def add_months(d: date, months: int, anchor_day: Optional[int] = None) -> date:
    """Desloca `d` em N meses, limitando o dia ao tamanho do mês de destino."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(anchor_day or d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def resolve_range(reference_date: date, mode: PeriodMode,
                  today: Optional[date] = None) -> Tuple[DateRange, DateRange]:
    """Retorna (selection_range, consolidated_range) para o período.

    No modo mensal o consolidado cobre todo o histórico até o fim do mês;
    no anual fica restrito ao próprio ano.
    """
    mode = PeriodMode(mode)

    if mode == PeriodMode.monthly:
        start = reference_date.replace(day=1)
        end = last_day_of_month(reference_date.year, reference_date.month)
        selection = DateRange(start=start, end=end, label=start.strftime("%Y-%m"))
        consolidated = DateRange(start=EPOCH_START, end=end, label="consolidated")
        return selection, consolidated

    if mode == PeriodMode.yearly:
        start = date(reference_date.year, 1, 1)
        end = date(reference_date.year, 12, 31)
        selection = DateRange(start=start, end=end, label=str(reference_date.year))
        return selection, DateRange(start=start, end=end, label="consolidated")

    today = today or date.today()
    selection = DateRange(start=EPOCH_START, end=FUTURE_CAP, label="all")
    consolidated = DateRange(start=EPOCH_START, end=today, label="consolidated")
    return selection, consolidated


def advance(mode: PeriodMode, direction: int, reference_date: date) -> date:
    if direction not in (1, -1):
        raise ValueError("direction deve ser +1 ou -1")

    mode = PeriodMode(mode)
    if mode == PeriodMode.monthly:
        return add_months(reference_date, direction)
    if mode == PeriodMode.yearly:
        return add_months(reference_date, 12 * direction)
    # allTime não navega
    return reference_date


def can_navigate(mode: PeriodMode) -> bool:
    return PeriodMode(mode) != PeriodMode.all_time


def contains(date_range: DateRange, value: Optional[str]) -> bool:
    parsed = parse_iso_date(value)
    if parsed is None:
        return False
    return date_range.start <= parsed <= date_range.end
