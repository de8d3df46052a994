"""文件路由：列举、上传登记以及收藏/回收站/删除等状态变更。

所有接口都先经过会话守卫；带 userId 的接口再与会话用户比对，
按 ID 操作的接口则只在调用方自己的节点中查找，不存在即 404。
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.packages.droply.api.v1.schemas.files import (
    DeleteResponse,
    NodeOut,
    RenameBody,
    UploadRecordBody,
)
from app.packages.droply.core.constants import HTTP_STATUS_INTERNAL_SERVER_ERROR
from app.packages.droply.core.dependencies import get_current_user_id, get_db
from app.packages.droply.core.exceptions import AppException
from app.packages.droply.core.guards import ensure_owner
from app.packages.droply.core.logger import logger
from app.packages.droply.services.node_service import node_service

router = APIRouter(tags=["files"])

T = TypeVar("T")


def _run(action: Callable[[], T], *, failure: str) -> T:
    """执行业务动作；非业务异常记录堆栈后统一转换为 500。"""
    try:
        return action()
    except AppException:
        raise
    except Exception as exc:
        logger.exception(failure)
        raise AppException(failure, HTTP_STATUS_INTERNAL_SERVER_ERROR) from exc


@router.get("/files", response_model=list[NodeOut])
def list_files(
    query_user_id: Optional[str] = Query(None, alias="userId"),
    parent_id: Optional[str] = Query(None, alias="parentId"),
    view: Optional[str] = Query(None, pattern=r"^(all|starred|trash)$"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """列出某一层级的节点；不传 parentId 时列出根目录。"""
    ensure_owner(user_id, query_user_id)
    return _run(
        lambda: node_service.list_nodes(db, user_id=user_id, parent_id=parent_id, view=view),
        failure="Failed to fetch files",
    )


@router.post("/upload", response_model=NodeOut)
def record_upload(
    payload: UploadRecordBody,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """登记浏览器已直传到媒体托管的文件。"""
    ensure_owner(user_id, payload.userId)
    return _run(
        lambda: node_service.record_upload(db, user_id=user_id, upload=payload.imagekit, parent_id=payload.parentId),
        failure="Failed to save file information",
    )


@router.patch("/files/{file_id}/star", response_model=NodeOut)
def toggle_star(file_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return _run(
        lambda: node_service.toggle_star(db, user_id=user_id, node_id=file_id),
        failure="Failed to update file",
    )


@router.patch("/files/{file_id}/trash", response_model=NodeOut)
def toggle_trash(file_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return _run(
        lambda: node_service.toggle_trash(db, user_id=user_id, node_id=file_id),
        failure="Failed to update file",
    )


@router.patch("/files/{file_id}/rename", response_model=NodeOut)
def rename(
    file_id: str,
    payload: RenameBody,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return _run(
        lambda: node_service.rename(db, user_id=user_id, node_id=file_id, name=payload.name),
        failure="Failed to rename file",
    )


@router.delete("/files/trash/empty", response_model=DeleteResponse)
def empty_trash(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    deleted = _run(lambda: node_service.empty_trash(db, user_id=user_id), failure="Failed to empty trash")
    return {"success": True, "message": "Trash emptied successfully", "deletedIds": deleted}


@router.delete("/files/{file_id}", response_model=DeleteResponse)
def delete_file(file_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """永久删除；文件夹会连同全部子孙节点一起删除。"""
    deleted = _run(
        lambda: node_service.delete_permanently(db, user_id=user_id, node_id=file_id),
        failure="Failed to delete file",
    )
    return {"success": True, "message": "File deleted successfully", "deletedIds": deleted}
