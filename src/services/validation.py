"""
요청 본문 검증 계층.

모든 함수는 부수 효과가 없으며, 저장소에 접근하기 전에 호출됩니다.
검증에 실패하면 ``ValidationError``를, 성공하면 서비스가 그대로 사용할 수 있는
요청 구조체(또는 변경 필드 딕셔너리)를 반환합니다.
"""

import re
from typing import Any, Dict, Iterable, Type, TypeVar

import pydantic

from src.schemas import (
    ProjectCreate, ProjectUpdate, TicketCreate, TicketUpdate,
    UserCreate, UserUpdate, LoginRequest,
)
from src.services.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")

_WIRE_NAMES = {"project_id": "projectId", "user_id": "userId"}
_ENUM_MESSAGES = {"priority": "Invalid priority level", "status": "Invalid status"}


def is_valid_id(value: Any) -> bool:
    """저장소 식별자로 쓸 수 있는 문자열인지 검사합니다. 존재 여부는 확인하지 않습니다."""
    return isinstance(value, str) and ID_PATTERN.match(value) is not None


def validate_id(value: Any, entity: str) -> str:
    if not is_valid_id(value):
        raise ValidationError(f"Invalid {entity} ID")
    return value


def _describe(error: pydantic.ValidationError, missing_message: str) -> str:
    first = error.errors()[0]
    field = str(first["loc"][0]) if first["loc"] else ""
    if first["type"] in ("missing", "string_too_short"):
        if missing_message:
            return missing_message
        return f"'{field}' must not be empty"
    if field in _ENUM_MESSAGES:
        return _ENUM_MESSAGES[field]
    return f"Invalid value for '{field}'"


def _parse(schema: Type[ModelT], payload: Any, missing_message: str = "") -> ModelT:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(_describe(e, missing_message)) from None


def _changes(model: pydantic.BaseModel, nullable: Iterable[str] = ()) -> Dict[str, Any]:
    changes = model.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("At least one field must be provided for update")
    for key, value in changes.items():
        if value is None and key not in nullable:
            raise ValidationError(f"'{_WIRE_NAMES.get(key, key)}' cannot be null")
    return changes


# --- Project ---

def validate_project_create(payload: Any) -> ProjectCreate:
    return _parse(ProjectCreate, payload, "Title and description are required")


def validate_project_update(payload: Any) -> Dict[str, Any]:
    return _changes(_parse(ProjectUpdate, payload))


# --- Ticket ---

def validate_ticket_create(payload: Any) -> TicketCreate:
    data = _parse(TicketCreate, payload, "Required fields are missing")
    validate_id(data.project_id, "project")
    if data.user_id is not None:
        validate_id(data.user_id, "user")
    return data


def validate_ticket_update(payload: Any) -> Dict[str, Any]:
    """
    티켓 변경 필드를 반환합니다.

    반환값에 ``user_id`` 키가 None으로 들어 있으면 담당자 해제를 의미합니다.
    키가 아예 없으면 담당자는 변경하지 않습니다.
    """
    changes = _changes(_parse(TicketUpdate, payload), nullable=("user_id",))
    if changes.get("user_id") is not None:
        validate_id(changes["user_id"], "user")
    return changes


# --- User ---

def validate_user_create(payload: Any) -> UserCreate:
    return _parse(UserCreate, payload, "Name, email, and password are required")


def validate_user_update(payload: Any) -> Dict[str, Any]:
    return _changes(_parse(UserUpdate, payload))


def validate_login(payload: Any) -> LoginRequest:
    return _parse(LoginRequest, payload, "Email and password are required")
