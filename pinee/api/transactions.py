# pinee/api/transactions.py

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from pinee.core.security import AuthContext, get_current_user
from pinee.models.enums import PeriodMode
from pinee.schemas.period import DateRange
from pinee.schemas.transaction import (
    TransactionCreate,
    TransactionListResponse,
    TransactionRecord,
    TransactionUpdate,
    TransferCreate,
    TransferResult,
)
from pinee.services.aggregation import compute_buckets
from pinee.services.dashboard import DashboardService, get_dashboard_service
from pinee.services.export import NoDataFound, export_csv, export_filename
from pinee.services.period import resolve_range
from pinee.services.recurrence import expand_recurring
from pinee.services.transfers import TransferError, income_to_investment, investment_to_income
from pinee.stores.base import TransactionStore
from pinee.stores.provider import get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])


def _resolve_query_range(start: Optional[date], end: Optional[date],
                         mode: PeriodMode, reference: Optional[date]) -> DateRange:
    # start/end explícitos têm prioridade sobre mode/reference
    if start or end:
        if not (start and end):
            raise HTTPException(status_code=400, detail="Informe start e end juntos")
        if start > end:
            raise HTTPException(status_code=400, detail="start não pode ser posterior a end")
        return DateRange(start=start, end=end, label="custom")
    selection, _ = resolve_range(reference or date.today(), mode)
    return selection


@router.get("", response_model=TransactionListResponse)
@router.get("/", response_model=TransactionListResponse)
async def list_transactions(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    mode: PeriodMode = Query(PeriodMode.monthly),
    reference: Optional[date] = Query(None),
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
):
    date_range = _resolve_query_range(start, end, mode, reference)
    records = await store.fetch(auth.user_id, date_range.start.isoformat(), date_range.end.isoformat(), auth.token)
    buckets = compute_buckets(records)

    return TransactionListResponse(
        range=date_range,
        transactions=sorted(records, key=lambda r: r.created_at, reverse=True),
        projected_income=buckets.income_confirmed + buckets.income_pending,
        projected_expense=buckets.expense_paid + buckets.expense_pending,
        projected_balance=buckets.projected_balance,
    )


@router.post("", response_model=List[TransactionRecord], status_code=201)
@router.post("/", response_model=List[TransactionRecord], status_code=201)
async def create_transaction(
    transaction_data: TransactionCreate,
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    """
    Cria a transação. Se for recorrente, cada ocorrência até a data final
    vira um documento próprio.
    """
    record = transaction_data.to_record(auth.user_id)
    created = []
    for occurrence in expand_recurring(record):
        saved = await store.create(occurrence, auth.user_id, auth.token)
        dashboard.patch(auth.user_id, saved)
        created.append(saved)

    logger.info("%d transação(ões) criada(s) para %s", len(created), auth.user_id)
    return created


@router.get("/export")
async def export_transactions(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    mode: PeriodMode = Query(PeriodMode.monthly),
    reference: Optional[date] = Query(None),
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
):
    date_range = _resolve_query_range(start, end, mode, reference)
    records = await store.fetch(auth.user_id, date_range.start.isoformat(), date_range.end.isoformat(), auth.token)
    # mais recentes primeiro, como na exportação do app
    records = sorted(records, key=lambda r: r.date, reverse=True)
    try:
        content = export_csv(records)
    except NoDataFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))

    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(date_range)}"'},
    )


@router.get("/{transaction_id}", response_model=TransactionRecord)
async def get_transaction(
    transaction_id: str,
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
):
    return await store.get(transaction_id, auth.user_id, auth.token)


@router.put("/{transaction_id}", response_model=TransactionRecord)
async def update_transaction(
    transaction_id: str,
    transaction_data: TransactionUpdate,
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    existing = await store.get(transaction_id, auth.user_id, auth.token)
    record = transaction_data.to_record(auth.user_id, record_id=transaction_id, created_at=existing.created_at)
    updated = await store.update(record, auth.user_id, auth.token)

    # atualiza localmente em vez de recarregar tudo
    dashboard.patch(auth.user_id, updated)
    return updated


@router.delete("/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: str,
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    await store.delete(transaction_id, auth.user_id, auth.token)
    dashboard.forget(auth.user_id, transaction_id)
    return Response(status_code=204)


async def _apply_redeem(
    income: TransactionRecord,
    remaining: Optional[TransactionRecord],
    investment: TransactionRecord,
    auth: AuthContext,
    store: TransactionStore,
    dashboard: DashboardService,
) -> TransferResult:
    created = await store.create(income, auth.user_id, auth.token)
    dashboard.patch(auth.user_id, created)

    if remaining is None:
        # resgate total: o investimento deixa de existir
        await store.delete(investment.id, auth.user_id, auth.token)
        dashboard.forget(auth.user_id, investment.id)
        return TransferResult(created=created, source=None, source_deleted=True)

    updated = await store.update(remaining, auth.user_id, auth.token)
    dashboard.patch(auth.user_id, updated)
    return TransferResult(created=created, source=updated, source_deleted=False)


@router.post("/{transaction_id}/invest", response_model=TransferResult, status_code=201)
async def transfer_income_to_investment(
    transaction_id: str,
    transfer_data: TransferCreate,
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    """A receita de origem fica intacta; o investimento criado aponta para ela."""
    income = await store.get(transaction_id, auth.user_id, auth.token)
    try:
        investment = income_to_investment(income, transfer_data.amount, transfer_data.title, transfer_data.date)
    except TransferError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    created = await store.create(investment, auth.user_id, auth.token)
    dashboard.patch(auth.user_id, created)
    return TransferResult(created=created, source=income, source_deleted=False)


@router.post("/{transaction_id}/redeem", response_model=TransferResult, status_code=201)
async def transfer_investment_to_income(
    transaction_id: str,
    transfer_data: TransferCreate,
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    investment = await store.get(transaction_id, auth.user_id, auth.token)
    try:
        income, remaining = investment_to_income(investment, transfer_data.amount, transfer_data.title,
                                                 transfer_data.category, transfer_data.date)
    except TransferError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return await _apply_redeem(income, remaining, investment, auth, store, dashboard)
