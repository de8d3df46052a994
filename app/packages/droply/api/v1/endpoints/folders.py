"""文件夹路由。"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.packages.droply.api.v1.schemas.files import FolderCreateBody, FolderCreateResponse
from app.packages.droply.core.constants import HTTP_STATUS_INTERNAL_SERVER_ERROR
from app.packages.droply.core.dependencies import get_current_user_id, get_db
from app.packages.droply.core.exceptions import AppException
from app.packages.droply.core.guards import ensure_owner
from app.packages.droply.core.logger import logger
from app.packages.droply.services.node_service import node_service

router = APIRouter(prefix="/folders", tags=["folders"])


@router.post("/create", response_model=FolderCreateResponse)
def create_folder(
    payload: FolderCreateBody,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """在根目录或指定父文件夹下新建文件夹；同级重名不做限制。"""
    ensure_owner(user_id, payload.userId)
    try:
        folder = node_service.create_folder(db, user_id=user_id, name=payload.name, parent_id=payload.parentId)
    except AppException:
        raise
    except Exception as exc:
        logger.exception("Error creating folder for %s", user_id)
        raise AppException("Failed to create folder", HTTP_STATUS_INTERNAL_SERVER_ERROR) from exc
    return {"success": True, "message": "Folder created successfully", "folder": folder}
