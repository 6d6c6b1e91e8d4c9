"""
티켓 요청 본문 구조.

JSON 필드 이름은 camelCase(projectId, userId)이며, 모델 속성은 snake_case입니다.
``TicketUpdate``에서 userId를 명시적으로 null로 보내는 것과 아예 보내지 않는 것은
다른 의미(담당자 해제 / 변경 없음)이므로, 서비스는 ``model_fields_set``으로 둘을 구분합니다.
userId가 빈 문자열이면 null과 같게 취급합니다. (담당자 없음)
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.database.models import PRIORITIES, STATUSES

Priority = Literal[PRIORITIES]
Status = Literal[STATUSES]


def _blank_to_none(value):
    return None if value == "" else value


class TicketCreate(BaseModel):
    # status는 받지 않습니다. 생성 시 항상 "open"입니다.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    priority: Priority
    project_id: str = Field(alias="projectId", min_length=1)
    user_id: Optional[str] = Field(None, alias="userId")

    @field_validator("user_id", mode="before")
    @classmethod
    def blank_user_id_is_none(cls, value):
        return _blank_to_none(value)


class TicketUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    priority: Optional[Priority] = None
    status: Optional[Status] = None
    user_id: Optional[str] = Field(None, alias="userId")

    @field_validator("user_id", mode="before")
    @classmethod
    def blank_user_id_is_none(cls, value):
        return _blank_to_none(value)
