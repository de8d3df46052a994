"""身份守卫：粗粒度的会话校验与细粒度的归属校验。

两个守卫相互独立：会话边界中间件只用 ``resolve_session``，
路由处理函数在此基础上再调用 ``ensure_owner`` 比对请求里的 userId。
"""

from __future__ import annotations

from typing import Any, NamedTuple, Optional

from app.packages.droply.core.exceptions import AuthenticationMissing, AuthorizationMismatch
from app.packages.droply.core.security import decode_token
from app.packages.droply.core.session import touch_session


class CurrentSession(NamedTuple):
    user_id: str
    session_id: str


def resolve_session(token: Optional[str]) -> Optional[CurrentSession]:
    """解析访问令牌并续期会话；令牌非法或会话已失效时返回 ``None``。"""
    if not token:
        return None
    payload = decode_token(token)
    if payload is None:
        return None

    user_id = payload.get("sub")
    session_id = payload.get("sid")
    if not user_id or not session_id:
        return None

    if not touch_session(session_id, str(user_id)):
        return None
    return CurrentSession(str(user_id), session_id)


def require_session(token: Optional[str]) -> CurrentSession:
    """要求存在有效会话，否则抛出 401。"""
    current = resolve_session(token)
    if current is None:
        raise AuthenticationMissing()
    return current


def ensure_owner(caller_id: str, target_owner_id: Any) -> None:
    """要求目标归属人与调用方一致；缺失或不一致均视为越权。"""
    if not target_owner_id or target_owner_id != caller_id:
        raise AuthorizationMismatch()
