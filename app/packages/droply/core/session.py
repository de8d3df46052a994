"""登录会话存储。

每次登录生成一个会话 ID 写入令牌的 ``sid``；每次通过守卫都会把会话有效期顺延
一个完整周期（滑动过期）。默认使用 Redis，连接失败时回退到进程内存。
"""

from __future__ import annotations

import threading
import time
import uuid
from typing import Optional, Protocol

import redis

from app.packages.droply.core.config import get_settings
from app.packages.droply.core.logger import logger

SESSION_KEY_PREFIX = "droply:session:"


class SessionBackend(Protocol):
    def create_session(self, user_id: str, ttl_seconds: int) -> str: ...

    def touch_session(self, session_id: str, user_id: str, ttl_seconds: int) -> bool: ...

    def delete_session(self, session_id: str) -> None: ...


class RedisSessionBackend:
    """会话 ID -> 用户 ID 的字符串键，TTL 由 Redis 负责过期。"""

    def __init__(self, url: str) -> None:
        self._client = redis.Redis.from_url(url, decode_responses=True)
        self._client.ping()

    def create_session(self, user_id: str, ttl_seconds: int) -> str:
        session_id = uuid.uuid4().hex
        self._client.set(SESSION_KEY_PREFIX + session_id, user_id, ex=ttl_seconds)
        return session_id

    def touch_session(self, session_id: str, user_id: str, ttl_seconds: int) -> bool:
        key = SESSION_KEY_PREFIX + session_id
        if self._client.get(key) != user_id:
            return False
        return bool(self._client.expire(key, ttl_seconds))

    def delete_session(self, session_id: str) -> None:
        self._client.delete(SESSION_KEY_PREFIX + session_id)


class InMemorySessionBackend:
    """单进程内的会话表，用于测试或 Redis 不可用时。"""

    def __init__(self) -> None:
        self._deadlines: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def create_session(self, user_id: str, ttl_seconds: int) -> str:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._deadlines[session_id] = (user_id, time.monotonic() + ttl_seconds)
        return session_id

    def touch_session(self, session_id: str, user_id: str, ttl_seconds: int) -> bool:
        now = time.monotonic()
        with self._lock:
            entry = self._deadlines.get(session_id)
            if entry is None:
                return False
            if entry[0] != user_id or entry[1] < now:
                # 令牌与会话不匹配或已过期，直接作废
                del self._deadlines[session_id]
                return False
            self._deadlines[session_id] = (user_id, now + ttl_seconds)
            return True

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            self._deadlines.pop(session_id, None)


_backend: Optional[SessionBackend] = None


def _get_backend() -> SessionBackend:
    global _backend
    if _backend is None:
        url = get_settings().redis_url
        try:
            _backend = RedisSessionBackend(url)
            logger.info("Session store using Redis at %s", url)
        except redis.RedisError as exc:
            logger.warning("Redis unavailable (%s), keeping sessions in memory", exc)
            _backend = InMemorySessionBackend()
    return _backend


def set_backend(backend: Optional[SessionBackend]) -> None:
    """替换当前会话后端；传入 ``None`` 时下次访问重新探测 Redis。"""
    global _backend
    _backend = backend


def session_ttl_seconds() -> int:
    return max(get_settings().access_token_expire_minutes, 1) * 60


def create_session(user_id: str) -> str:
    return _get_backend().create_session(user_id, session_ttl_seconds())


def touch_session(session_id: str, user_id: str) -> bool:
    """顺延会话有效期；会话不存在、已过期或不属于该用户时返回 ``False``。"""
    return _get_backend().touch_session(session_id, user_id, session_ttl_seconds())


def delete_session(session_id: str) -> None:
    _get_backend().delete_session(session_id)
