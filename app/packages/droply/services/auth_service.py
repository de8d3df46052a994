"""认证服务：内置身份提供方的注册、登录与退出流程。"""

import uuid

from sqlalchemy.orm import Session

from app.packages.droply.core.constants import (
    ACCESS_TOKEN_TYPE,
    HTTP_STATUS_CONFLICT,
    HTTP_STATUS_OK,
    USER_ID_PREFIX,
)
from app.packages.droply.core.exceptions import AppException, AuthenticationMissing
from app.packages.droply.core.logger import logger
from app.packages.droply.core.responses import create_response
from app.packages.droply.core.security import create_access_token, get_password_hash, verify_password
from app.packages.droply.core.session import create_session, delete_session
from app.packages.droply.crud.users import user_crud


class AuthService:
    """负责处理用户注册与登录流程，并保持逻辑聚合。"""

    def sign_up(self, db: Session, *, email: str, password: str) -> dict:
        email = email.strip().lower()
        if user_crud.get_by_email(db, email):
            raise AppException(msg="Email is already registered", code=HTTP_STATUS_CONFLICT)

        user = user_crud.create(
            db,
            {
                "id": f"{USER_ID_PREFIX}{uuid.uuid4().hex}",
                "email": email,
                "hashed_password": get_password_hash(password),
            },
        )
        logger.info("Registered user %s", user.id)
        return create_response("Sign-up successful", {"userId": user.id, "email": user.email}, HTTP_STATUS_OK)

    def sign_in(self, db: Session, *, email: str, password: str) -> dict:
        """校验凭证，创建会话并签发访问令牌。"""
        user = user_crud.get_by_email(db, email)
        if user is None or not verify_password(password, user.hashed_password):
            logger.info("Failed sign-in attempt for %s", email)
            raise AuthenticationMissing("Invalid email or password")

        session_id = create_session(user.id)
        access_token = create_access_token({"sub": user.id, "sid": session_id})
        return create_response(
            "Sign-in successful",
            {
                "access_token": access_token,
                "token_type": ACCESS_TOKEN_TYPE,
                "userId": user.id,
            },
            HTTP_STATUS_OK,
        )

    def sign_out(self, session_id: str) -> dict:
        delete_session(session_id)
        return create_response("Signed out", None, HTTP_STATUS_OK)

    def describe(self, db: Session, *, user_id: str) -> dict:
        user = user_crud.get(db, user_id)
        return create_response(
            "OK",
            {"userId": user_id, "email": user.email if user else None},
            HTTP_STATUS_OK,
        )


auth_service = AuthService()
