import os
from dotenv import load_dotenv

load_dotenv()  # Carrega as variáveis do .env

# Backend do Transaction Store: "firestore" (produção) ou "sql" (dev/testes)
STORE_BACKEND = os.getenv("STORE_BACKEND", "sql")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./pinee.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Firebase
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")
FIREBASE_API_KEY = os.getenv("FIREBASE_API_KEY", "")
FIRESTORE_BASE_URL = os.getenv("FIRESTORE_BASE_URL", "https://firestore.googleapis.com/v1/projects")
IDENTITY_TOOLKIT_URL = os.getenv(
    "IDENTITY_TOOLKIT_URL", "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
)
FIRESTORE_TIMEOUT = float(os.getenv("FIRESTORE_TIMEOUT", "10"))
FIRESTORE_RETRY_DELAY = float(os.getenv("FIRESTORE_RETRY_DELAY", "3"))

# Auth: "firebase" repassa o ID token do Firebase; "local" emite JWT próprio
AUTH_MODE = os.getenv("AUTH_MODE", "local")
SECRET_KEY = os.getenv("SECRET_KEY", "pinee-dev-secret")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Quantidade de transações recentes exibidas no dashboard
RECENT_LIMIT = int(os.getenv("RECENT_LIMIT", "5"))

# Dashboards mantidos em memória (um por usuário, o mais antigo sai primeiro)
DASHBOARD_CACHE_SIZE = int(os.getenv("DASHBOARD_CACHE_SIZE", "1000"))


def check_auth_mode(auth_mode: str = AUTH_MODE, store_backend: str = STORE_BACKEND) -> None:
    """Falha na inicialização se a combinação de auth e store for insegura.

    No modo firebase a assinatura do token só é verificada pelo Firestore,
    então qualquer outro backend aceitaria tokens forjados.
    """
    if auth_mode not in ("local", "firebase"):
        raise ValueError(f"AUTH_MODE desconhecido: {auth_mode}")
    if auth_mode == "firebase" and store_backend != "firestore":
        raise ValueError("AUTH_MODE=firebase exige STORE_BACKEND=firestore")
