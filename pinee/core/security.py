from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from pinee.core.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    AUTH_MODE,
    FIREBASE_API_KEY,
    FIRESTORE_TIMEOUT,
    IDENTITY_TOOLKIT_URL,
    SECRET_KEY,
)

# Senhas só são guardadas no modo local
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    # token opaco repassado ao Transaction Store; nunca é renovado aqui
    token: str


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


async def firebase_sign_in(email: str, password: str,
                           transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    """Troca email/senha por um ID token no Identity Toolkit do Firebase."""
    body = {"email": email, "password": password, "returnSecureToken": True}
    async with httpx.AsyncClient(timeout=FIRESTORE_TIMEOUT, transport=transport) as client:
        try:
            r = await client.post(IDENTITY_TOOLKIT_URL, params={"key": FIREBASE_API_KEY}, json=body)
        except httpx.HTTPError:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Falha ao contatar o Firebase")
    if r.status_code != 200:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciais incorretas")
    return r.json()["idToken"]


def get_current_user(token: str = Depends(oauth2_scheme)) -> AuthContext:
    try:
        if AUTH_MODE == "firebase":
            # a assinatura é verificada pelo Firestore a cada requisição
            payload = jwt.get_unverified_claims(token)
        else:
            payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id = payload.get("user_id") or payload.get("sub")
        if not user_id:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido")
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido")

    return AuthContext(user_id=str(user_id), token=token)
