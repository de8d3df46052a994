"""节点服务：文件与文件夹在单表树中的创建、列举与状态变更。

调用方身份由路由层通过守卫校验后传入；本服务只负责归属范围内的树操作：
- 任何读写都限定在 ``user_id`` 内，不存在跨用户查询；
- 父文件夹校验只在写入时进行：必须存在、属于同一用户且为文件夹；
- 上传结果中的 URL/大小/类型来自媒体托管，按原样入库，不做二次核验。
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.packages.droply.core.constants import (
    DEFAULT_FILE_NAME,
    DEFAULT_FILE_TYPE,
    FOLDER_TYPE,
)
from app.packages.droply.core.exceptions import NotFound, ValidationFailed
from app.packages.droply.core.logger import logger
from app.packages.droply.crud.nodes import node_crud
from app.packages.droply.models.node import Node

VIEW_STARRED = "starred"
VIEW_TRASH = "trash"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def serialize_node(node: Node) -> dict[str, Any]:
    """转换为前端使用的驼峰结构。"""
    return {
        "id": node.id,
        "name": node.name,
        "path": node.path,
        "size": node.size,
        "type": node.type,
        "fileUrl": node.file_url,
        "thumbnailUrl": node.thumbnail_url,
        "userId": node.user_id,
        "parentId": node.parent_id,
        "isFolder": node.is_folder,
        "isStarred": node.is_starred,
        "isTrash": node.is_trash,
        "createdAt": _iso(node.created_at),
        "updatedAt": _iso(node.updated_at),
    }


def _normalize_parent_id(parent_id: Any) -> Optional[str]:
    """缺省或空串表示根目录；其他值原样作为 ID 查找，空白串不会被当成根目录。"""
    if parent_id is None or parent_id == "":
        return None
    return parent_id if isinstance(parent_id, str) else str(parent_id)


def _optional_text(upload: dict[str, Any], key: str) -> Optional[str]:
    value = upload.get(key)
    if value is None or isinstance(value, str):
        return value or None
    raise ValidationFailed("Invalid file upload data")


def _validate_upload(upload: Any) -> dict[str, Any]:
    """校验媒体托管回传的上传结果：必须是对象，url 为非空字符串，size 为非负整数。"""
    if not isinstance(upload, dict):
        raise ValidationFailed("Invalid file upload data")
    url = upload.get("url")
    if not isinstance(url, str) or not url:
        raise ValidationFailed("Invalid file upload data")
    size = upload.get("size")
    if size is None:
        size = 0
    elif isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise ValidationFailed("Invalid file upload data")
    return {
        "url": url,
        "name": _optional_text(upload, "name"),
        "filePath": _optional_text(upload, "filePath"),
        "size": size,
        "fileType": _optional_text(upload, "fileType"),
        "thumbnailUrl": _optional_text(upload, "thumbnailUrl"),
    }


class NodeService:
    """聚合节点相关的业务流程，保持路由层轻量。"""

    def record_upload(
        self,
        db: Session,
        *,
        user_id: str,
        upload: Any,
        parent_id: Any = None,
    ) -> dict[str, Any]:
        """把媒体托管返回的上传结果登记为文件节点。"""
        upload = _validate_upload(upload)

        parent_id = _normalize_parent_id(parent_id)
        if parent_id is not None:
            self._require_parent_folder(db, user_id=user_id, parent_id=parent_id)

        name = upload["name"] or DEFAULT_FILE_NAME
        node = node_crud.create(
            db,
            {
                "name": name,
                "path": upload["filePath"] or f"/droply/{user_id}/{name}",
                "size": upload["size"],
                "type": upload["fileType"] or DEFAULT_FILE_TYPE,
                "file_url": upload["url"],
                "thumbnail_url": upload["thumbnailUrl"],
                "user_id": user_id,
                "parent_id": parent_id,
                "is_folder": False,
                "is_starred": False,
                "is_trash": False,
            },
        )
        logger.info("Recorded upload %s for user %s (parent=%s)", node.id, user_id, parent_id)
        return serialize_node(node)

    def create_folder(
        self,
        db: Session,
        *,
        user_id: str,
        name: Any,
        parent_id: Any = None,
    ) -> dict[str, Any]:
        if not isinstance(name, str) or not name.strip():
            raise ValidationFailed("Folder name is required")

        parent_id = _normalize_parent_id(parent_id)
        if parent_id is not None:
            self._require_parent_folder(db, user_id=user_id, parent_id=parent_id)

        folder = node_crud.create(
            db,
            {
                "id": str(uuid.uuid4()),
                "name": name.strip(),
                "path": f"/folders/{user_id}/{uuid.uuid4()}",
                "size": 0,
                "type": FOLDER_TYPE,
                "file_url": "",
                "thumbnail_url": None,
                "user_id": user_id,
                "parent_id": parent_id,
                "is_folder": True,
                "is_starred": False,
                "is_trash": False,
            },
        )
        logger.info("Created folder %s for user %s (parent=%s)", folder.id, user_id, parent_id)
        return serialize_node(folder)

    def list_nodes(
        self,
        db: Session,
        *,
        user_id: str,
        parent_id: Optional[str] = None,
        view: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """列出某一层级的节点；收藏与回收站视图跨越整棵树。"""
        if view == VIEW_STARRED:
            nodes = node_crud.list_starred(db, user_id=user_id)
        elif view == VIEW_TRASH:
            nodes = node_crud.list_trashed(db, user_id=user_id)
        else:
            nodes = node_crud.list_children(db, user_id=user_id, parent_id=_normalize_parent_id(parent_id))
        return [serialize_node(node) for node in nodes]

    def toggle_star(self, db: Session, *, user_id: str, node_id: str) -> dict[str, Any]:
        node = self._require_node(db, user_id=user_id, node_id=node_id)
        node.is_starred = not node.is_starred
        return serialize_node(node_crud.save(db, node))

    def toggle_trash(self, db: Session, *, user_id: str, node_id: str) -> dict[str, Any]:
        """移入或移出回收站；只修改当前节点，子节点随父级在界面上一并隐藏。"""
        node = self._require_node(db, user_id=user_id, node_id=node_id)
        node.is_trash = not node.is_trash
        return serialize_node(node_crud.save(db, node))

    def rename(self, db: Session, *, user_id: str, node_id: str, name: Any) -> dict[str, Any]:
        if not isinstance(name, str) or not name.strip():
            raise ValidationFailed("Name is required")
        node = self._require_node(db, user_id=user_id, node_id=node_id)
        node.name = name.strip()
        return serialize_node(node_crud.save(db, node))

    def delete_permanently(self, db: Session, *, user_id: str, node_id: str) -> list[str]:
        """物理删除节点；文件夹连同其整棵子树一起删除。返回被删除的 ID。"""
        node = self._require_node(db, user_id=user_id, node_id=node_id)
        doomed = node_crud.collect_subtree(db, root=node)
        deleted_ids = [item.id for item in doomed]
        node_crud.hard_delete_many(db, doomed)
        logger.info("Deleted %s node(s) rooted at %s for user %s", len(deleted_ids), node_id, user_id)
        return deleted_ids

    def empty_trash(self, db: Session, *, user_id: str) -> list[str]:
        doomed: dict[str, Node] = {}
        for trashed in node_crud.list_trashed(db, user_id=user_id):
            if trashed.id in doomed:
                continue
            for item in node_crud.collect_subtree(db, root=trashed):
                doomed.setdefault(item.id, item)
        node_crud.hard_delete_many(db, doomed.values())
        logger.info("Emptied trash for user %s (%s node(s))", user_id, len(doomed))
        return list(doomed)

    def _require_parent_folder(self, db: Session, *, user_id: str, parent_id: str) -> Node:
        # 父级属于他人或是文件时同样返回 404，不暴露其存在
        parent = node_crud.get_owned_folder(db, folder_id=parent_id, user_id=user_id)
        if parent is None:
            raise NotFound("Parent folder not found")
        return parent

    def _require_node(self, db: Session, *, user_id: str, node_id: str) -> Node:
        node = node_crud.get_owned(db, node_id=node_id, user_id=user_id)
        if node is None:
            raise NotFound("File not found")
        return node


node_service = NodeService()
