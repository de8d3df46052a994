"""Droply 业务包：个人云存储的文件树、上传登记与内置身份提供方。"""

from app.middleware.request_id import RequestIdMiddleware
from app.middleware.session_boundary import SessionBoundaryMiddleware
from app.packages.types import AppPackage

from .api.v1 import api_router
from .core.config import get_settings
from .core.exceptions import generic_exception_handler, http_exception_handler
from .core.logger import logger, setup_logging
from .core.responses import create_response
from .db.init_db import init_db

package = AppPackage(
    name="droply",
    api_router=api_router,
    get_settings=get_settings,
    setup_logging=setup_logging,
    logger=logger,
    init_db=init_db,
    create_response=create_response,
    http_exception_handler=http_exception_handler,
    generic_exception_handler=generic_exception_handler,
    # 请求 ID 在最外层，会话边界拒绝的请求也能带上日志标识
    middleware=(RequestIdMiddleware, SessionBoundaryMiddleware),
)

__all__ = ["package", "api_router", "get_settings"]
