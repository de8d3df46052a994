"""异常处理模块：定义统一的业务异常与响应格式。

错误分类与状态码：
- AuthenticationMissing：缺少或失效的会话 -> 401；
- AuthorizationMismatch：调用方与目标归属人不一致 -> 401；
- ValidationFailed：名称为空、缺少存储地址等 -> 400；
- NotFound：父文件夹或节点不存在/不属于调用方 -> 404；
- 其余未捕获异常 -> 500，仅在服务端记录堆栈。
"""

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from app.packages.droply.core.constants import (
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_INTERNAL_SERVER_ERROR,
    HTTP_STATUS_NOT_FOUND,
    HTTP_STATUS_UNAUTHORIZED,
)
from app.packages.droply.core.logger import logger


class AppException(HTTPException):
    """携带统一响应结构的业务异常，方便在全局处理中转换响应体。"""

    def __init__(self, msg: str, code: int = HTTP_STATUS_BAD_REQUEST, data=None) -> None:
        super().__init__(status_code=code, detail=msg)
        self.data = data


class AuthenticationMissing(AppException):
    def __init__(self, msg: str = "Unauthorized") -> None:
        super().__init__(msg, HTTP_STATUS_UNAUTHORIZED)


class AuthorizationMismatch(AppException):
    def __init__(self, msg: str = "Unauthorized") -> None:
        super().__init__(msg, HTTP_STATUS_UNAUTHORIZED)


class ValidationFailed(AppException):
    def __init__(self, msg: str) -> None:
        super().__init__(msg, HTTP_STATUS_BAD_REQUEST)


class NotFound(AppException):
    def __init__(self, msg: str) -> None:
        super().__init__(msg, HTTP_STATUS_NOT_FOUND)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:  # pragma: no cover - framework glue
    """将 FastAPI 的 ``HTTPException`` 转换为统一响应格式。"""
    payload = {"msg": exc.detail, "data": getattr(exc, "data", None), "code": exc.status_code}
    return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # pragma: no cover - framework glue
    """兜底处理：记录堆栈并返回不含内部细节的 500 响应。"""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    payload = {
        "msg": "Internal server error",
        "data": None,
        "code": HTTP_STATUS_INTERNAL_SERVER_ERROR,
    }
    return JSONResponse(status_code=HTTP_STATUS_INTERNAL_SERVER_ERROR, content=payload)
