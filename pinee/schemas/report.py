import datetime as dt
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict

from pinee.models.enums import PeriodMode
from pinee.schemas.dashboard import ChartPoint
from pinee.schemas.period import DateRange


class CategoryShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str
    total: Decimal
    percentage: Decimal


class StatusShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str
    label: str
    total: Decimal


class ReportSummary(BaseModel):
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class ReportResponse(BaseModel):
    mode: PeriodMode
    reference: dt.date
    range: DateRange
    summary: ReportSummary
    expense_by_category: List[CategoryShare]
    income_by_category: List[CategoryShare]
    status_breakdown: List[StatusShare]
    chart_series: List[ChartPoint]
