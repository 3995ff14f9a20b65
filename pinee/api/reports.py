# pinee/api/reports.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from pinee.core.security import AuthContext, get_current_user
from pinee.models.enums import PeriodMode, TransactionType
from pinee.schemas.report import ReportResponse
from pinee.services.aggregation import chart_series
from pinee.services.period import resolve_range
from pinee.services.reports import category_breakdown, report_summary, status_breakdown
from pinee.stores.base import TransactionStore
from pinee.stores.provider import get_store

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("", response_model=ReportResponse)
@router.get("/", response_model=ReportResponse)
async def get_report(
    mode: PeriodMode = Query(PeriodMode.monthly),
    reference: Optional[date] = Query(None),
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
):
    """
    Relatório do período selecionado: resumo, distribuição por categoria
    e por status, e a evolução diária.
    """
    reference = reference or date.today()
    selection, _ = resolve_range(reference, mode)
    records = await store.fetch(auth.user_id, selection.start.isoformat(), selection.end.isoformat(), auth.token)

    return ReportResponse(
        mode=mode,
        reference=reference,
        range=selection,
        summary=report_summary(records),
        expense_by_category=category_breakdown(records, TransactionType.expense),
        income_by_category=category_breakdown(records, TransactionType.income),
        status_breakdown=status_breakdown(records),
        chart_series=chart_series(records),
    )
