from sqlmodel import SQLModel, Field
from uuid import uuid4
from datetime import datetime, timezone

# Usuários só existem no modo AUTH_MODE=local; em produção quem autentica é o Firebase
class User(SQLModel, table=True):
    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    email: str = Field(index=True, unique=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
