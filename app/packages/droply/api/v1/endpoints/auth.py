"""认证相关路由定义（内置身份提供方）。"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.packages.droply.api.v1.schemas.auth import (
    AccountResponse,
    SignInRequest,
    SignOutResponse,
    SignUpRequest,
    TokenResponse,
)
from app.packages.droply.core.dependencies import get_current_session, get_current_user_id, get_db
from app.packages.droply.core.guards import CurrentSession
from app.packages.droply.services.auth_service import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-up", response_model=AccountResponse)
def sign_up(payload: SignUpRequest, db: Session = Depends(get_db)):
    return auth_service.sign_up(db, email=payload.email, password=payload.password)


@router.post("/sign-in", response_model=TokenResponse)
def sign_in(payload: SignInRequest, db: Session = Depends(get_db)):
    """校验凭证并签发访问令牌。"""
    return auth_service.sign_in(db, email=payload.email, password=payload.password)


@router.post("/sign-out", response_model=SignOutResponse)
def sign_out(current: CurrentSession = Depends(get_current_session)):
    """删除当前会话，之后同一令牌将无法通过校验。"""
    return auth_service.sign_out(current.session_id)


@router.get("/me", response_model=AccountResponse)
def me(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return auth_service.describe(db, user_id=user_id)
