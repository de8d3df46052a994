"""认证相关的请求与响应模型。"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from app.packages.droply.api.v1.schemas.common import ResponseEnvelope


class SignUpRequest(BaseModel):
    """注册表单：密码至少 8 位，且两次输入一致。"""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    passwordConfirmation: str = Field(..., min_length=1, max_length=128)

    @model_validator(mode="after")
    def _passwords_match(self) -> "SignUpRequest":
        if self.password != self.passwordConfirmation:
            raise ValueError("Passwords do not match")
        return self


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class AccountData(BaseModel):
    userId: str
    email: Optional[str] = None


class TokenData(BaseModel):
    access_token: str
    token_type: Literal["bearer"]
    userId: str


AccountResponse = ResponseEnvelope[AccountData]
TokenResponse = ResponseEnvelope[TokenData]
SignOutResponse = ResponseEnvelope[None]
