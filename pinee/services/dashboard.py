import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends

from pinee.core.config import DASHBOARD_CACHE_SIZE
from pinee.core.security import AuthContext
from pinee.models.enums import PeriodMode
from pinee.schemas.dashboard import DashboardResponse
from pinee.schemas.period import DateRange
from pinee.schemas.transaction import TransactionRecord
from pinee.services.aggregation import aggregate, apply_local_patch, remove_local
from pinee.services.period import resolve_range
from pinee.stores.base import TransactionStore
from pinee.stores.provider import get_store

logger = logging.getLogger(__name__)


@dataclass
class DashboardState:
    mode: PeriodMode
    reference: date
    selection_range: DateRange
    consolidated_range: DateRange
    records: List[TransactionRecord] = field(default_factory=list)
    consolidated_records: List[TransactionRecord] = field(default_factory=list)

    def response(self) -> DashboardResponse:
        return DashboardResponse(
            mode=self.mode,
            reference=self.reference,
            selection_range=self.selection_range,
            consolidated_range=self.consolidated_range,
            totals=aggregate(self.records, self.consolidated_records),
        )


class DashboardService:
    """Busca os dois intervalos, agrega e guarda a última lista por usuário.

    Edições locais são aplicadas sobre a lista guardada (`patch`/`forget`)
    sem nova ida ao Transaction Store. A última escrita vence. O cache guarda
    no máximo `max_users` usuários; o menos usado recentemente sai primeiro.
    """

    def __init__(self, store: TransactionStore, max_users: int = DASHBOARD_CACHE_SIZE):
        self.store = store
        self.max_users = max_users
        self._states: "OrderedDict[str, DashboardState]" = OrderedDict()

    def _remember(self, user_id: str, state: DashboardState) -> None:
        self._states[user_id] = state
        self._states.move_to_end(user_id)
        while len(self._states) > self.max_users:
            evicted, _ = self._states.popitem(last=False)
            logger.debug("Dashboard de %s removido do cache", evicted)

    def _state(self, user_id: str) -> Optional[DashboardState]:
        state = self._states.get(user_id)
        if state is not None:
            self._states.move_to_end(user_id)
        return state

    async def refresh(self, auth: AuthContext, mode: PeriodMode, reference: date,
                      today: Optional[date] = None) -> DashboardResponse:
        selection, consolidated = resolve_range(reference, mode, today=today)
        records, consolidated_records = await asyncio.gather(
            self.store.fetch(auth.user_id, selection.start.isoformat(), selection.end.isoformat(), auth.token),
            self.store.fetch(auth.user_id, consolidated.start.isoformat(), consolidated.end.isoformat(), auth.token),
        )
        state = DashboardState(
            mode=PeriodMode(mode),
            reference=reference,
            selection_range=selection,
            consolidated_range=consolidated,
            records=records,
            consolidated_records=consolidated_records,
        )
        self._remember(auth.user_id, state)
        logger.info("Dashboard de %s: %d transações no período, %d no consolidado",
                    auth.user_id, len(records), len(consolidated_records))
        return state.response()

    def cached(self, user_id: str) -> Optional[DashboardResponse]:
        state = self._state(user_id)
        return state.response() if state else None

    def patch(self, user_id: str, record: TransactionRecord) -> Optional[DashboardResponse]:
        state = self._state(user_id)
        if state is None:
            return None
        state.records = apply_local_patch(state.records, record, state.selection_range)
        state.consolidated_records = apply_local_patch(state.consolidated_records, record, state.consolidated_range)
        return state.response()

    def forget(self, user_id: str, record_id: str) -> Optional[DashboardResponse]:
        state = self._state(user_id)
        if state is None:
            return None
        state.records = remove_local(state.records, record_id)
        state.consolidated_records = remove_local(state.consolidated_records, record_id)
        return state.response()


@lru_cache
def _service_for(store: TransactionStore) -> DashboardService:
    return DashboardService(store)


def get_dashboard_service(store: TransactionStore = Depends(get_store)) -> DashboardService:
    return _service_for(store)
