"""媒体托管上传凭证路由。"""

from fastapi import APIRouter, Depends

from app.packages.droply.api.v1.schemas.files import MediaAuthResponse
from app.packages.droply.core.constants import HTTP_STATUS_INTERNAL_SERVER_ERROR
from app.packages.droply.core.dependencies import get_current_user_id
from app.packages.droply.core.exceptions import AppException
from app.packages.droply.core.logger import logger
from app.packages.droply.services.media_host import media_host_service

router = APIRouter(tags=["media"])


@router.get("/imagekit-auth", response_model=MediaAuthResponse)
def imagekit_auth(user_id: str = Depends(get_current_user_id)):
    """为已登录用户签发浏览器直传所需的短期凭证。"""
    try:
        return media_host_service.get_authentication_parameters()
    except Exception as exc:
        logger.exception("Error generating media upload credentials for %s", user_id)
        raise AppException(
            "Failed to generate authentication parameters", HTTP_STATUS_INTERNAL_SERVER_ERROR
        ) from exc
