"""사용자 및 로그인 요청 본문 구조. 비밀번호는 요청에만 존재하고 응답 구조에는 없습니다."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=1)


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
