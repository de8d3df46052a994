"""文件与文件夹接口的请求/响应模型。

请求体不做类型约束：userId、名称与上传结果的合法性由路由与服务层判定，
以便分别返回 401/400，而不是统一的 422。
"""

from typing import Any, Optional

from pydantic import BaseModel


class NodeOut(BaseModel):
    id: str
    name: str
    path: str
    size: int
    type: str
    fileUrl: str
    thumbnailUrl: Optional[str] = None
    userId: str
    parentId: Optional[str] = None
    isFolder: bool
    isStarred: bool
    isTrash: bool
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class UploadRecordBody(BaseModel):
    # imagekit 为媒体托管回传的上传结果：url、name、filePath、size、fileType、thumbnailUrl
    userId: Any = None
    imagekit: Any = None
    parentId: Any = None


class FolderCreateBody(BaseModel):
    name: Any = None
    userId: Any = None
    parentId: Any = None


class RenameBody(BaseModel):
    name: Any = None


class FolderCreateResponse(BaseModel):
    success: bool
    message: str
    folder: NodeOut


class DeleteResponse(BaseModel):
    success: bool
    message: str
    deletedIds: list[str]


class MediaAuthResponse(BaseModel):
    token: str
    expire: int
    signature: str
