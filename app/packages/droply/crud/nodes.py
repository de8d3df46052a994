"""Node CRUD：所有查询都以 user_id 作为第一过滤条件。"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Query, Session

from app.packages.droply.crud.base import CRUDBase
from app.packages.droply.models.node import Node


class CRUDNode(CRUDBase[Node]):
    def owned(self, db: Session, *, user_id: str) -> Query:
        return self.query(db).filter(Node.user_id == user_id)

    def get_owned(self, db: Session, *, node_id: str, user_id: str) -> Optional[Node]:
        return self.owned(db, user_id=user_id).filter(Node.id == node_id).first()

    def get_owned_folder(self, db: Session, *, folder_id: str, user_id: str) -> Optional[Node]:
        return (
            self.owned(db, user_id=user_id)
            .filter(Node.id == folder_id)
            .filter(Node.is_folder.is_(True))
            .first()
        )

    def list_children(self, db: Session, *, user_id: str, parent_id: Optional[str]) -> list[Node]:
        query = self.owned(db, user_id=user_id)
        # 根目录必须用 IS NULL，普通等值比较匹配不到 NULL 行
        if parent_id is None:
            query = query.filter(Node.parent_id.is_(None))
        else:
            query = query.filter(Node.parent_id == parent_id)
        return query.all()

    def list_starred(self, db: Session, *, user_id: str) -> list[Node]:
        return self.owned(db, user_id=user_id).filter(Node.is_starred.is_(True)).all()

    def list_trashed(self, db: Session, *, user_id: str) -> list[Node]:
        return self.owned(db, user_id=user_id).filter(Node.is_trash.is_(True)).all()

    def collect_subtree(self, db: Session, *, root: Node) -> list[Node]:
        """按层遍历收集 ``root`` 及其全部后代，仅限同一归属人。"""
        collected = [root]
        frontier = [root.id] if root.is_folder else []
        seen = {root.id}
        while frontier:
            children = (
                self.owned(db, user_id=root.user_id)
                .filter(Node.parent_id.in_(frontier))
                .all()
            )
            frontier = []
            for child in children:
                # 数据库不防环，遍历时按已访问集合截断
                if child.id in seen:
                    continue
                seen.add(child.id)
                collected.append(child)
                if child.is_folder:
                    frontier.append(child.id)
        return collected


node_crud = CRUDNode(Node)
