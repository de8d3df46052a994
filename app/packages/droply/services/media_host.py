"""媒体托管（ImageKit）签名服务。

浏览器直传文件到媒体托管前，需要先向本服务换取一组短期上传凭证
``{token, expire, signature}``，由 ImageKit SDK 使用私钥生成。私钥始终留在服务端。
"""

from __future__ import annotations

import time
from typing import Optional

from imagekitio import ImageKit

from app.packages.droply.core.config import get_settings


class MediaHostNotConfigured(RuntimeError):
    """缺少媒体托管私钥，无法签发上传凭证。"""


class MediaHostService:
    def __init__(
        self,
        private_key: Optional[str] = None,
        public_key: Optional[str] = None,
        url_endpoint: Optional[str] = None,
        expire_seconds: Optional[int] = None,
    ) -> None:
        self._private_key = private_key
        self._public_key = public_key
        self._url_endpoint = url_endpoint
        self._expire_seconds = expire_seconds

    @property
    def private_key(self) -> str:
        if self._private_key is not None:
            return self._private_key
        return get_settings().imagekit_private_key

    @property
    def public_key(self) -> str:
        if self._public_key is not None:
            return self._public_key
        return get_settings().imagekit_public_key

    @property
    def url_endpoint(self) -> str:
        if self._url_endpoint is not None:
            return self._url_endpoint
        return get_settings().imagekit_url_endpoint

    @property
    def expire_seconds(self) -> int:
        if self._expire_seconds is not None:
            return self._expire_seconds
        return get_settings().media_auth_expire_seconds

    def client(self) -> ImageKit:
        private_key = self.private_key
        if not private_key:
            raise MediaHostNotConfigured("IMAGEKIT_PRIVATE_KEY is not configured")
        return ImageKit(
            private_key=private_key,
            public_key=self.public_key,
            url_endpoint=self.url_endpoint,
        )

    def get_authentication_parameters(self, token: Optional[str] = None, expire: Optional[int] = None) -> dict:
        """签发 ``{token, expire, signature}``，上传作用域由媒体托管自身约束。"""
        client = self.client()
        # SDK 默认有效期固定为 30 分钟，这里按配置显式传入
        expire = expire or int(time.time()) + self.expire_seconds
        params = client.get_authentication_parameters(token or "", expire)
        return {"token": params["token"], "expire": int(params["expire"]), "signature": params["signature"]}


media_host_service = MediaHostService()
