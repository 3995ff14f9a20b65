# pinee/api/dashboard.py

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from pinee.core.security import AuthContext, get_current_user
from pinee.models.enums import PeriodMode
from pinee.schemas.dashboard import DashboardResponse, NavigationResponse
from pinee.services.dashboard import DashboardService, get_dashboard_service
from pinee.services.period import advance, can_navigate

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
@router.get("/", response_model=DashboardResponse)
async def get_dashboard(
    mode: PeriodMode = Query(PeriodMode.monthly),
    reference: Optional[date] = Query(None, description="Data de referência do período (yyyy-MM-dd)"),
    auth: AuthContext = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    return await service.refresh(auth, mode, reference or date.today())


@router.get("/cached", response_model=DashboardResponse)
def get_cached_dashboard(
    auth: AuthContext = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Último dashboard calculado, já com as edições locais aplicadas."""
    cached = service.cached(auth.user_id)
    if cached is None:
        raise HTTPException(status_code=404, detail="Nenhum dashboard carregado ainda")
    return cached


@router.get("/navigate", response_model=NavigationResponse)
def navigate(
    direction: int = Query(..., description="+1 para avançar, -1 para voltar"),
    mode: PeriodMode = Query(PeriodMode.monthly),
    reference: Optional[date] = Query(None),
    auth: AuthContext = Depends(get_current_user),
):
    reference = reference or date.today()
    try:
        new_reference = advance(mode, direction, reference)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return NavigationResponse(mode=mode, reference=new_reference, can_navigate=can_navigate(mode))
