"""模型包初始化，便于统一导入 ORM 实体并触发模型注册。"""

from app.packages.droply.models.node import Node
from app.packages.droply.models.user import User

__all__ = [
    "Node",
    "User",
]
