import datetime as dt
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict

from pinee.models.enums import PeriodMode
from pinee.schemas.period import DateRange
from pinee.schemas.transaction import TransactionRecord


class ChartPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    income: Decimal
    expense: Decimal


class DashboardTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    income_confirmed: Decimal = Decimal("0")
    income_pending: Decimal = Decimal("0")
    expense_paid: Decimal = Decimal("0")
    expense_pending: Decimal = Decimal("0")
    invested_total: Decimal = Decimal("0")
    consolidated_balance: Decimal = Decimal("0")
    projected_balance: Decimal = Decimal("0")
    recent_transactions: List[TransactionRecord] = []
    chart_series: List[ChartPoint] = []


class DashboardResponse(BaseModel):
    mode: PeriodMode
    reference: dt.date
    selection_range: DateRange
    consolidated_range: DateRange
    totals: DashboardTotals


class NavigationResponse(BaseModel):
    mode: PeriodMode
    reference: dt.date
    can_navigate: bool
