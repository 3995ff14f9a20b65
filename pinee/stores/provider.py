from functools import lru_cache

from pinee.core.config import STORE_BACKEND
from pinee.stores.base import TransactionStore


@lru_cache
def get_store() -> TransactionStore:
    """Dependência FastAPI: instância única do Transaction Store configurado."""
    if STORE_BACKEND == "firestore":
        from pinee.stores.firestore import FirestoreTransactionStore
        return FirestoreTransactionStore()
    if STORE_BACKEND == "sql":
        from pinee.stores.sql import SqlTransactionStore
        return SqlTransactionStore()
    raise ValueError(f"STORE_BACKEND desconhecido: {STORE_BACKEND}")
