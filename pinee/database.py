from sqlmodel import SQLModel, Session, create_engine

from pinee.core.config import DATABASE_URL, SQL_ECHO

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=SQL_ECHO, connect_args=connect_args)

def create_db_and_tables():
    from pinee.models.user import User  # importar os modelos
    from pinee.models.transaction import Transaction
    from pinee.models.category import Category
    SQLModel.metadata.create_all(engine)

def get_session():
    with Session(engine) as session:
        yield session
