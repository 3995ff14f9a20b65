import logging
from typing import List

from sqlmodel import Session, select

from pinee.database import engine
from pinee.models.category import Category
from pinee.models.transaction import Transaction
from pinee.schemas.category import CategoryCreate, CategoryRead
from pinee.schemas.transaction import TransactionRecord
from pinee.stores.base import RecordNotFound, TransactionStore, TransactionStoreError

logger = logging.getLogger(__name__)

RECORD_FIELDS = (
    "title", "description", "amount", "category", "date", "is_income", "type", "status",
    "created_at", "is_recurring", "recurring_frequency", "recurring_end_date", "source_transaction_id",
)


class SqlTransactionStore(TransactionStore):
    """Transaction Store sobre SQLModel, para desenvolvimento local e testes.

    O token é ignorado: o isolamento é feito por `user_id`.
    """

    def __init__(self, bind=engine):
        self.engine = bind

    def _get_owned(self, session: Session, record_id: str, user_id: str) -> Transaction:
        tx = session.get(Transaction, record_id)
        if not tx or tx.user_id != user_id:
            raise RecordNotFound(f"Transação {record_id} não encontrada")
        return tx

    async def fetch(self, user_id: str, start_date: str, end_date: str, token: str) -> List[TransactionRecord]:
        with Session(self.engine) as session:
            rows = session.exec(
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.date >= start_date)
                .where(Transaction.date <= end_date)
                .order_by(Transaction.date)
            ).all()
            return [TransactionRecord.model_validate(row) for row in rows]

    async def get(self, record_id: str, user_id: str, token: str) -> TransactionRecord:
        with Session(self.engine) as session:
            return TransactionRecord.model_validate(self._get_owned(session, record_id, user_id))

    async def create(self, record: TransactionRecord, user_id: str, token: str) -> TransactionRecord:
        data = {field: getattr(record, field) for field in RECORD_FIELDS}
        tx = Transaction(**data, user_id=user_id)
        if record.id:
            tx.id = record.id
        with Session(self.engine) as session:
            if session.get(Transaction, tx.id):
                raise TransactionStoreError(f"Transação {tx.id} já existe", status_code=409)
            session.add(tx)
            session.commit()
            session.refresh(tx)
            logger.info("Transação %s criada para %s", tx.id, user_id)
            return TransactionRecord.model_validate(tx)

    async def update(self, record: TransactionRecord, user_id: str, token: str) -> TransactionRecord:
        if not record.id:
            raise RecordNotFound("Transação sem id não pode ser atualizada")
        with Session(self.engine) as session:
            tx = self._get_owned(session, record.id, user_id)
            for field in RECORD_FIELDS:
                setattr(tx, field, getattr(record, field))
            session.add(tx)
            session.commit()
            session.refresh(tx)
            return TransactionRecord.model_validate(tx)

    async def delete(self, record_id: str, user_id: str, token: str) -> None:
        with Session(self.engine) as session:
            tx = self._get_owned(session, record_id, user_id)
            session.delete(tx)
            session.commit()
            logger.info("Transação %s removida", record_id)

    async def list_categories(self, user_id: str, token: str) -> List[CategoryRead]:
        with Session(self.engine) as session:
            rows = session.exec(
                select(Category).where(Category.user_id == user_id).order_by(Category.name)
            ).all()
            return [CategoryRead.model_validate(row) for row in rows]

    async def create_category(self, category: CategoryCreate, user_id: str, token: str) -> CategoryRead:
        with Session(self.engine) as session:
            row = Category(**category.model_dump(), user_id=user_id)
            session.add(row)
            session.commit()
            session.refresh(row)
            return CategoryRead.model_validate(row)

    async def delete_category(self, category_id: str, user_id: str, token: str) -> None:
        with Session(self.engine) as session:
            row = session.get(Category, category_id)
            if not row or row.user_id != user_id:
                raise RecordNotFound(f"Categoria {category_id} não encontrada")
            session.delete(row)
            session.commit()
