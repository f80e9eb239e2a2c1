from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.auth_deps import get_current_user
from app.infra.models import UserORM
from app.schemas.users import UserOut

router = APIRouter()


@router.get("/me", response_model=UserOut)
def me(user: UserORM = Depends(get_current_user)):
    return user
