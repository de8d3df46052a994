"""依赖注入模块：封装 FastAPI 中复用度高的依赖函数。"""

from collections.abc import Generator
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.packages.droply.core.constants import ACCESS_TOKEN_TYPE
from app.packages.droply.core.guards import CurrentSession, require_session
from app.packages.droply.db import session as db_session

security_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """生成一个数据库会话，并在请求结束后自动关闭。"""
    db = db_session.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
) -> CurrentSession:
    """解析 ``Authorization`` 头部并返回当前会话，缺失或非法时抛出 401。"""
    token = None
    if credentials and credentials.scheme.lower() == ACCESS_TOKEN_TYPE:
        token = credentials.credentials
    return require_session(token)


def get_current_user_id(current: CurrentSession = Depends(get_current_session)) -> str:
    return current.user_id
