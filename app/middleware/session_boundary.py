"""会话边界中间件：在请求到达路由之前做粗粒度的登录态分流。

规则：
- 已登录用户访问登录/注册页（非首页）时重定向到 /dashboard；
- 未登录用户访问私有接口返回 401，访问私有页面重定向到 /sign-in；
- 路由层仍会独立执行会话与归属校验。
"""

from __future__ import annotations

from typing import Optional

from starlette.responses import JSONResponse, RedirectResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from app.packages.droply.core.config import get_settings
from app.packages.droply.core.constants import (
    ACCESS_TOKEN_TYPE,
    AFTER_SIGN_IN_PATH,
    HTTP_STATUS_UNAUTHORIZED,
    PUBLIC_EXACT_PATHS,
    PUBLIC_PAGE_PREFIXES,
    SIGN_IN_PATH,
)
from app.packages.droply.core.guards import resolve_session


def _public_api_paths() -> tuple[str, ...]:
    prefix = get_settings().api_prefix.rstrip("/")
    return (f"{prefix}/auth/sign-in", f"{prefix}/auth/sign-up")


def is_public_route(path: str) -> bool:
    if path in PUBLIC_EXACT_PATHS or path in _public_api_paths():
        return True
    return any(path == prefix or path.startswith(prefix + "/") for prefix in PUBLIC_PAGE_PREFIXES)


def is_api_route(path: str) -> bool:
    prefix = get_settings().api_prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


def _bearer_token(scope: Scope) -> Optional[str]:
    for key, value in scope.get("headers", []):
        if key.decode("latin-1").lower() != "authorization":
            continue
        scheme, _, credentials = value.decode("latin-1").partition(" ")
        if scheme.lower() == ACCESS_TOKEN_TYPE and credentials:
            return credentials.strip()
    return None


class SessionBoundaryMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http" or scope.get("method") == "OPTIONS":
            await self.app(scope, receive, send)
            return

        path = str(scope.get("path") or "/")
        signed_in = resolve_session(_bearer_token(scope)) is not None

        if is_public_route(path):
            if signed_in and path != "/" and not is_api_route(path) and path not in PUBLIC_EXACT_PATHS:
                await RedirectResponse(AFTER_SIGN_IN_PATH)(scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        if not signed_in:
            if is_api_route(path):
                response = JSONResponse(
                    status_code=HTTP_STATUS_UNAUTHORIZED,
                    content={"msg": "Unauthorized", "data": None, "code": HTTP_STATUS_UNAUTHORIZED},
                )
            else:
                response = RedirectResponse(SIGN_IN_PATH)
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)
