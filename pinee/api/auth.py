from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from pinee.core.config import AUTH_MODE
from pinee.core.security import (
    AuthContext,
    create_access_token,
    firebase_sign_in,
    get_current_user,
    get_password_hash,
    verify_password,
)
from pinee.database import get_session
from pinee.models.user import User
from pinee.schemas.user import UserCreate, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])

# Registro (somente modo local; no modo firebase o cadastro é feito pelo Firebase)
@router.post("/register", response_model=UserRead, status_code=201)
def register(user_create: UserCreate, session: Session = Depends(get_session)):
    if AUTH_MODE != "local":
        raise HTTPException(status_code=400, detail="Cadastro disponível apenas no modo local")

    user_exists = session.exec(select(User).where(User.email == user_create.email)).first()
    if user_exists:
        raise HTTPException(status_code=400, detail="Email já registrado")

    user = User(email=user_create.email, hashed_password=get_password_hash(user_create.password))
    session.add(user)
    session.commit()
    session.refresh(user)
    return UserRead(id=user.id, email=user.email)

# Login
@router.post("/login")
async def login(form_data: OAuth2PasswordRequestForm = Depends(), session: Session = Depends(get_session)):
    if AUTH_MODE == "firebase":
        id_token = await firebase_sign_in(form_data.username, form_data.password)
        return {"access_token": id_token, "token_type": "bearer"}

    user = session.exec(select(User).where(User.email == form_data.username)).first()
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Credenciais incorretas")

    access_token = create_access_token(data={"sub": user.id})
    return {"access_token": access_token, "token_type": "bearer"}

# Rota protegida
@router.get("/me")
def read_users_me(auth: AuthContext = Depends(get_current_user)):
    return {"user_id": auth.user_id}
