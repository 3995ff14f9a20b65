# pinee/api/categories.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from pinee.constants.categories import DEFAULT_CATEGORY_IDS, default_categories
from pinee.core.security import AuthContext, get_current_user
from pinee.models.enums import CategoryType
from pinee.schemas.category import CategoryCreate, CategoryRead
from pinee.stores.base import TransactionStore
from pinee.stores.provider import get_store

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryRead])
@router.get("/", response_model=List[CategoryRead])
async def list_categories(
    type: Optional[CategoryType] = Query(None),
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
):
    """
    Categorias padrão do app seguidas das categorias do usuário.
    A categoria de investimentos só aparece quando type=investment.
    """
    user_categories = await store.list_categories(auth.user_id, auth.token)
    if type:
        user_categories = [c for c in user_categories if c.type == type]
    else:
        user_categories = [c for c in user_categories if c.type != CategoryType.investment]
    return default_categories(type) + user_categories


@router.post("", response_model=CategoryRead, status_code=201)
@router.post("/", response_model=CategoryRead, status_code=201)
async def create_category(
    category_data: CategoryCreate,
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
):
    name = category_data.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="O nome da categoria é obrigatório")

    existing = default_categories(category_data.type) + await store.list_categories(auth.user_id, auth.token)
    if any(c.name.lower() == name.lower() and c.type == category_data.type for c in existing):
        raise HTTPException(status_code=400, detail="Categoria já existe")

    return await store.create_category(category_data.model_copy(update={"name": name}), auth.user_id, auth.token)


@router.delete("/{category_id}", status_code=204)
async def delete_category(
    category_id: str,
    auth: AuthContext = Depends(get_current_user),
    store: TransactionStore = Depends(get_store),
):
    if category_id in DEFAULT_CATEGORY_IDS:
        raise HTTPException(status_code=400, detail="Categorias do sistema não podem ser excluídas")
    await store.delete_category(category_id, auth.user_id, auth.token)
    return Response(status_code=204)
