"""业务常量：HTTP 状态码、令牌类型与节点约定值。"""

from fastapi import status

HTTP_STATUS_OK = status.HTTP_200_OK
HTTP_STATUS_BAD_REQUEST = status.HTTP_400_BAD_REQUEST
HTTP_STATUS_UNAUTHORIZED = status.HTTP_401_UNAUTHORIZED
HTTP_STATUS_NOT_FOUND = status.HTTP_404_NOT_FOUND
HTTP_STATUS_CONFLICT = status.HTTP_409_CONFLICT
HTTP_STATUS_INTERNAL_SERVER_ERROR = status.HTTP_500_INTERNAL_SERVER_ERROR

ACCESS_TOKEN_TYPE = "bearer"

# 文件夹节点的 type 取值；文件节点存放媒体托管返回的 MIME/文件类型
FOLDER_TYPE = "folder"
DEFAULT_FILE_TYPE = "image"
DEFAULT_FILE_NAME = "Untitled"

USER_ID_PREFIX = "user_"

# 会话边界：无需登录即可访问的页面与接口
PUBLIC_PAGE_PREFIXES = ("/sign-in", "/sign-up")
PUBLIC_EXACT_PATHS = ("/", "/health", "/docs", "/redoc", "/openapi.json")
AFTER_SIGN_IN_PATH = "/dashboard"
SIGN_IN_PATH = "/sign-in"
