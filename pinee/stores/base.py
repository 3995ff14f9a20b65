from abc import ABC, abstractmethod
from typing import List, Optional

from pinee.schemas.category import CategoryCreate, CategoryRead
from pinee.schemas.transaction import TransactionRecord


class TransactionStoreError(Exception):
    """Falha ao falar com o Transaction Store (rede, upstream, dados)."""

    status_code: int = 502

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class StoreAuthError(TransactionStoreError):
    status_code = 401


class RecordNotFound(TransactionStoreError):
    status_code = 404


class StoreConfigurationError(TransactionStoreError):
    status_code = 503


class TransactionStore(ABC):
    """Contrato do armazenamento remoto de transações e categorias.

    Nenhum método levanta erro para "zero documentos": isso é lista vazia.
    """

    @abstractmethod
    async def fetch(self, user_id: str, start_date: str, end_date: str, token: str) -> List[TransactionRecord]:
        ...

    @abstractmethod
    async def get(self, record_id: str, user_id: str, token: str) -> TransactionRecord:
        ...

    @abstractmethod
    async def create(self, record: TransactionRecord, user_id: str, token: str) -> TransactionRecord:
        ...

    @abstractmethod
    async def update(self, record: TransactionRecord, user_id: str, token: str) -> TransactionRecord:
        ...

    @abstractmethod
    async def delete(self, record_id: str, user_id: str, token: str) -> None:
        ...

    @abstractmethod
    async def list_categories(self, user_id: str, token: str) -> List[CategoryRead]:
        ...

    @abstractmethod
    async def create_category(self, category: CategoryCreate, user_id: str, token: str) -> CategoryRead:
        ...

    @abstractmethod
    async def delete_category(self, category_id: str, user_id: str, token: str) -> None:
        ...
