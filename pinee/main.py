import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pinee.api import auth, categories, dashboard, reports, transactions
from pinee.core.config import AUTH_MODE, CORS_ORIGINS, STORE_BACKEND, check_auth_mode
from pinee.core.logging import setup_logging
from pinee.database import create_db_and_tables
from pinee.stores.base import TransactionStoreError

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    check_auth_mode()
    # tabelas locais: transações (backend sql) e usuários (auth local)
    if STORE_BACKEND == "sql" or AUTH_MODE == "local":
        create_db_and_tables()
    logger.info("PINEE iniciado (store=%s, auth=%s)", STORE_BACKEND, AUTH_MODE)
    yield

app = FastAPI(title="PINEE", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(TransactionStoreError)
async def store_error_handler(request: Request, exc: TransactionStoreError):
    # "nenhum documento" nunca chega aqui: é lista vazia
    logger.warning("Erro do Transaction Store em %s: %s", request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

app.include_router(auth.router)
app.include_router(transactions.router)
app.include_router(categories.router)
app.include_router(dashboard.router)
app.include_router(reports.router)

@app.get("/")
def root():
    return {"message": "Servidor PINEE de finanças pessoais"}
