"""用户模型：内置身份提供方使用的账号表。"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.packages.droply.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """以邮箱登录的账号；主键为对外暴露的不透明用户 ID。"""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255))
