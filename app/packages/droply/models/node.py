"""统一的文件/文件夹节点模型（单表自引用树）。

存储规则：
- parent_id 为空表示位于根目录；非空时应指向同一用户的文件夹节点，
  该约束由写入时的业务校验保证，数据库层面不建外键；
- is_folder=True 的节点 size=0、type="folder"、file_url=""；
- path 仅用于展示，不参与任何查询。
"""

import uuid
from typing import Optional

from sqlalchemy import Boolean, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import expression

from app.packages.droply.models.base import Base, OwnedMixin, TimestampMixin


def _new_id() -> str:
    return str(uuid.uuid4())


class Node(OwnedMixin, TimestampMixin, Base):
    __tablename__ = "files"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    path: Mapped[str] = mapped_column(Text, nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 文件为媒体 MIME/类型，文件夹为 "folder"
    type: Mapped[str] = mapped_column(Text, nullable=False)
    file_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    thumbnail_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    parent_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    is_folder: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    is_starred: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    is_trash: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )

    __table_args__ = (
        Index("ix_files_user_id_parent_id", "user_id", "parent_id"),
    )
