import asyncio
import logging
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from pinee.core.config import (
    FIREBASE_API_KEY,
    FIREBASE_PROJECT_ID,
    FIRESTORE_BASE_URL,
    FIRESTORE_RETRY_DELAY,
    FIRESTORE_TIMEOUT,
)
from pinee.models.enums import CategoryType
from pinee.schemas.category import CategoryCreate, CategoryRead
from pinee.schemas.transaction import TransactionRecord
from pinee.stores.base import (
    RecordNotFound,
    StoreAuthError,
    StoreConfigurationError,
    TransactionStore,
    TransactionStoreError,
)

logger = logging.getLogger(__name__)

TRANSACTIONS = "transactions"
CATEGORIES = "categories"

# Firestore devolve até 9 casas de fração; datetime aceita no máximo 6
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


# ---------- Conversão de valores tipados do Firestore ----------

def decode_value(value: Optional[Dict[str, Any]]) -> Any:
    if not value:
        return None
    if "stringValue" in value:
        return value["stringValue"]
    if "doubleValue" in value:
        return value["doubleValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "booleanValue" in value:
        return value["booleanValue"]
    if "timestampValue" in value:
        return value["timestampValue"]
    return None


def encode_value(value: Any) -> Dict[str, Any]:
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, datetime):
        return {"timestampValue": format_timestamp(value)}
    if isinstance(value, Decimal):
        return {"doubleValue": float(value)}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    return {"stringValue": str(value)}


def parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    text = _FRACTION_RE.sub(r"\1", raw.strip()).replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_amount(value: Optional[Dict[str, Any]]) -> Decimal:
    """Aceita doubleValue, integerValue ou stringValue ("12,50")."""
    raw = decode_value(value)
    if raw is None or isinstance(raw, bool):
        return Decimal("0")
    if isinstance(raw, str):
        raw = raw.replace(",", ".")
    try:
        return Decimal(str(raw))
    except InvalidOperation:
        return Decimal("0")


def document_id(document: Dict[str, Any]) -> str:
    return document.get("name", "").rsplit("/", 1)[-1]


def document_to_record(document: Dict[str, Any], fallback_user_id: str = "") -> TransactionRecord:
    fields = document.get("fields", {})

    def text(name: str, default: str = "") -> str:
        value = decode_value(fields.get(name))
        return default if value is None else str(value)

    created_at = parse_timestamp(decode_value(fields.get("createdAt")))
    source_id = decode_value(fields.get("sourceTransactionId"))

    return TransactionRecord(
        id=document_id(document),
        user_id=text("userId", fallback_user_id),
        title=text("title") or text("description"),
        description=decode_value(fields.get("description")),
        amount=parse_amount(fields.get("amount")),
        category=text("category", "Geral"),
        date=text("date"),
        is_income=bool(decode_value(fields.get("isIncome")) or False),
        type=text("type", "expense"),
        status=text("status", "pending"),
        created_at=created_at or datetime.now(timezone.utc),
        is_recurring=bool(decode_value(fields.get("isRecurring")) or False),
        recurring_frequency=text("recurringFrequency"),
        recurring_end_date=text("recurringEndDate"),
        source_transaction_id=source_id or None,
    )


def record_to_document(record: TransactionRecord, user_id: str) -> Dict[str, Any]:
    fields = {
        "userId": user_id,
        "title": record.title,
        "description": record.description or "",
        "amount": record.amount,
        "category": record.category,
        "date": record.date,
        "isIncome": record.is_income,
        "type": record.type,
        "status": record.status,
        "createdAt": record.created_at,
        "isRecurring": record.is_recurring,
        "recurringFrequency": record.recurring_frequency,
        "recurringEndDate": record.recurring_end_date,
        "sourceTransactionId": record.source_transaction_id,
    }
    return {"fields": {name: encode_value(value) for name, value in fields.items()}}


def document_to_category(document: Dict[str, Any]) -> CategoryRead:
    fields = document.get("fields", {})
    raw_type = decode_value(fields.get("type")) or CategoryType.expense.value
    return CategoryRead(
        id=document_id(document),
        name=decode_value(fields.get("name")) or "",
        type=CategoryType(raw_type),
        icon=decode_value(fields.get("icon")) or "tag",
        color=decode_value(fields.get("color")) or "gray",
        is_system=bool(decode_value(fields.get("isSystem")) or False),
        is_default=bool(decode_value(fields.get("isDefault")) or False),
        user_id=decode_value(fields.get("userId")),
    )


def field_filter(field: str, op: str, value: Any) -> Dict[str, Any]:
    return {"fieldFilter": {"field": {"fieldPath": field}, "op": op, "value": encode_value(value)}}


def transactions_query(user_id: str, start_date: Optional[str] = None, end_date: Optional[str] = None) -> Dict[str, Any]:
    filters = [field_filter("userId", "EQUAL", user_id)]
    if start_date is None:
        # consulta sem índice composto
        return {"structuredQuery": {"from": [{"collectionId": TRANSACTIONS}], "where": filters[0]}}

    filters.append(field_filter("date", "GREATER_THAN_OR_EQUAL", start_date))
    filters.append(field_filter("date", "LESS_THAN_OR_EQUAL", end_date))
    return {
        "structuredQuery": {
            "from": [{"collectionId": TRANSACTIONS}],
            "where": {"compositeFilter": {"op": "AND", "filters": filters}},
            "orderBy": [{"field": {"fieldPath": "date"}, "direction": "ASCENDING"}],
        }
    }


class FirestoreTransactionStore(TransactionStore):
    """Transaction Store sobre a API REST do Firestore."""

    def __init__(
        self,
        project_id: str = FIREBASE_PROJECT_ID,
        api_key: str = FIREBASE_API_KEY,
        base_url: str = FIRESTORE_BASE_URL,
        timeout: float = FIRESTORE_TIMEOUT,
        retry_delay: float = FIRESTORE_RETRY_DELAY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.project_id = project_id
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_delay = retry_delay
        self.transport = transport

    @property
    def documents_url(self) -> str:
        return f"{self.base_url}/{self.project_id}/databases/(default)/documents"

    async def _request(self, method: str, path: str, token: str, json: Optional[dict] = None) -> httpx.Response:
        if not self.project_id or not self.api_key:
            raise StoreConfigurationError("Firebase não configurado (FIREBASE_PROJECT_ID / FIREBASE_API_KEY)")

        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{self.documents_url}{path}"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                r = await client.request(method, url, params={"key": self.api_key}, headers=headers, json=json)
                if r.status_code == 429:
                    logger.warning("Quota do Firestore excedida; nova tentativa em %ss", self.retry_delay)
                    await asyncio.sleep(self.retry_delay)
                    r = await client.request(method, url, params={"key": self.api_key}, headers=headers, json=json)
            except httpx.HTTPError as exc:
                raise TransactionStoreError(f"Falha de rede ao acessar o Firestore: {exc}") from exc

        return r

    def _raise_for_status(self, r: httpx.Response, what: str) -> None:
        if r.status_code < 400:
            return
        logger.error("Firestore %s falhou: HTTP %s %s", what, r.status_code, r.text[:300])
        if r.status_code in (401, 403):
            raise StoreAuthError(f"Acesso negado pelo Firestore ({what})", status_code=r.status_code)
        if r.status_code == 404:
            raise RecordNotFound(f"Documento não encontrado ({what})")
        raise TransactionStoreError(f"Erro do Firestore ao {what}: HTTP {r.status_code}")

    async def _run_query(self, query: dict, token: str) -> httpx.Response:
        return await self._request("POST", ":runQuery", token, json=query)

    @staticmethod
    def _documents(r: httpx.Response) -> List[Dict[str, Any]]:
        # resultado vazio vem como [{"readTime": ...}]
        return [item["document"] for item in r.json() if item.get("document")]

    def _to_records(self, documents: List[Dict[str, Any]], user_id: str) -> List[TransactionRecord]:
        records = []
        for document in documents:
            try:
                records.append(document_to_record(document, user_id))
            except ValidationError as exc:
                logger.warning("Documento %s inválido ignorado: %s", document.get("name"), exc)
        return records

    async def fetch(self, user_id: str, start_date: str, end_date: str, token: str) -> List[TransactionRecord]:
        logger.info("Buscando transações de %s entre %s e %s", user_id, start_date, end_date)
        r = await self._run_query(transactions_query(user_id, start_date, end_date), token)

        if r.status_code == 400 and "requires an index" in r.text:
            logger.warning("Índice composto ausente; filtrando datas localmente")
            r = await self._run_query(transactions_query(user_id), token)
            self._raise_for_status(r, "buscar transações")
            documents = [
                d for d in self._documents(r)
                if start_date <= (decode_value(d.get("fields", {}).get("date")) or "") <= end_date
            ]
            documents.sort(key=lambda d: decode_value(d.get("fields", {}).get("date")) or "")
            return self._to_records(documents, user_id)

        self._raise_for_status(r, "buscar transações")
        return self._to_records(self._documents(r), user_id)

    async def get(self, record_id: str, user_id: str, token: str) -> TransactionRecord:
        r = await self._request("GET", f"/{TRANSACTIONS}/{record_id}", token)
        self._raise_for_status(r, "ler transação")
        # sem userId no documento não há como provar a posse
        record = document_to_record(r.json())
        if record.user_id != user_id:
            raise RecordNotFound(f"Transação {record_id} não encontrada")
        return record

    async def create(self, record: TransactionRecord, user_id: str, token: str) -> TransactionRecord:
        r = await self._request("POST", f"/{TRANSACTIONS}", token, json=record_to_document(record, user_id))
        self._raise_for_status(r, "salvar transação")
        created = document_to_record(r.json(), user_id)
        logger.info("Transação %s criada", created.id)
        return created

    async def update(self, record: TransactionRecord, user_id: str, token: str) -> TransactionRecord:
        if not record.id:
            raise RecordNotFound("Transação sem id não pode ser atualizada")
        r = await self._request("PATCH", f"/{TRANSACTIONS}/{record.id}", token,
                                json=record_to_document(record, user_id))
        self._raise_for_status(r, "atualizar transação")
        return document_to_record(r.json(), user_id)

    async def delete(self, record_id: str, user_id: str, token: str) -> None:
        r = await self._request("DELETE", f"/{TRANSACTIONS}/{record_id}", token)
        self._raise_for_status(r, "excluir transação")
        logger.info("Transação %s removida", record_id)

    async def list_categories(self, user_id: str, token: str) -> List[CategoryRead]:
        query = {
            "structuredQuery": {
                "from": [{"collectionId": CATEGORIES}],
                "where": field_filter("userId", "EQUAL", user_id),
            }
        }
        r = await self._run_query(query, token)
        self._raise_for_status(r, "buscar categorias")
        categories = []
        for document in self._documents(r):
            try:
                categories.append(document_to_category(document))
            except (ValueError, ValidationError) as exc:
                logger.warning("Categoria %s inválida ignorada: %s", document.get("name"), exc)
        return sorted(categories, key=lambda c: c.name)

    async def create_category(self, category: CategoryCreate, user_id: str, token: str) -> CategoryRead:
        fields = {
            "name": category.name,
            "icon": category.icon,
            "color": category.color,
            "type": category.type.value,
            "isSystem": False,
            "isDefault": False,
            "userId": user_id,
            "createdAt": datetime.now(timezone.utc),
        }
        r = await self._request("POST", f"/{CATEGORIES}", token,
                                json={"fields": {k: encode_value(v) for k, v in fields.items()}})
        self._raise_for_status(r, "salvar categoria")
        return document_to_category(r.json())

    async def delete_category(self, category_id: str, user_id: str, token: str) -> None:
        r = await self._request("DELETE", f"/{CATEGORIES}/{category_id}", token)
        self._raise_for_status(r, "excluir categoria")
