"""
정규화된 레코드(Project, Ticket, User)를 응답용 읽기 모델로 조합합니다.

서비스는 필요한 레코드를 컬렉션별로 한 번씩 일괄 조회한 뒤 이 모듈의 함수로 조합합니다.
(레코드마다 추가 조회를 하지 않습니다.) 모든 함수는 순수 함수이며 JSON으로 바로 직렬화할
수 있는 딕셔너리를 반환합니다. 사용자 딕셔너리에는 어떤 경로로도 비밀번호가 포함되지 않습니다.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from src.database import models


def _as_utc(value: datetime) -> datetime:
    # SQLite는 tzinfo 없이 돌려주므로, 저장 시점의 UTC로 간주합니다.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _timestamp(value: Optional[datetime]) -> Optional[str]:
    return _as_utc(value).isoformat() if value is not None else None


def _creation_order(record) -> tuple:
    return (_as_utc(record.created_at), record.id)


def assignee_ids(tickets: Iterable[models.Ticket]) -> set:
    """티켓들이 참조하는 담당자 ID 집합. 일괄 조회에 사용합니다."""
    return {ticket.user_id for ticket in tickets if ticket.user_id is not None}


# --- 단일 레코드 직렬화 ---

def project_to_dict(project: models.Project) -> Dict[str, Any]:
    return {
        "_id": project.id,
        "title": project.title,
        "description": project.description,
        "createdAt": _timestamp(project.created_at),
        "updatedAt": _timestamp(project.updated_at),
    }


def ticket_to_dict(ticket: models.Ticket) -> Dict[str, Any]:
    data = {
        "_id": ticket.id,
        "title": ticket.title,
        "description": ticket.description,
        "priority": ticket.priority,
        "status": ticket.status,
        "projectId": ticket.project_id,
        "createdAt": _timestamp(ticket.created_at),
        "updatedAt": _timestamp(ticket.updated_at),
    }
    # 담당자가 없는 티켓은 userId 키 자체를 갖지 않습니다.
    if ticket.user_id is not None:
        data["userId"] = ticket.user_id
    return data


def user_to_dict(user: models.User) -> Dict[str, Any]:
    return {
        "_id": user.id,
        "name": user.name,
        "email": user.email,
        "createdAt": _timestamp(user.created_at),
        "updatedAt": _timestamp(user.updated_at),
    }


# --- 조합 ---

def _users_by_id(users: Iterable[models.User]) -> Dict[str, Dict[str, Any]]:
    return {user.id: user_to_dict(user) for user in users}


def _ticket_view(ticket: models.Ticket, users_by_id: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    view = ticket_to_dict(ticket)
    user = users_by_id.get(ticket.user_id) if ticket.user_id is not None else None
    if user is not None:
        view["user"] = dict(user)
    return view


def build_ticket_view(ticket: models.Ticket, users: Iterable[models.User]) -> Dict[str, Any]:
    """티켓에 담당자 정보를 붙입니다. 담당자가 없거나 찾을 수 없으면 user 키가 없습니다."""
    return _ticket_view(ticket, _users_by_id(users))


def build_ticket_view_list(tickets: Iterable[models.Ticket], users: Iterable[models.User]) -> List[Dict[str, Any]]:
    users_by_id = _users_by_id(users)
    return [_ticket_view(ticket, users_by_id) for ticket in sorted(tickets, key=_creation_order)]


def build_project_view(
    project: models.Project,
    tickets: Iterable[models.Ticket],
    users: Iterable[models.User],
) -> Dict[str, Any]:
    """
    프로젝트에 소속 티켓 목록을 붙입니다.

    project_id가 일치하는 티켓만 생성 순서(created_at, id)로 정렬해 포함하며,
    각 티켓에는 담당자가 조회되는 경우에만 user가 붙습니다.
    """
    users_by_id = _users_by_id(users)
    own_tickets = sorted((t for t in tickets if t.project_id == project.id), key=_creation_order)
    view = project_to_dict(project)
    view["tickets"] = [_ticket_view(ticket, users_by_id) for ticket in own_tickets]
    return view


def build_project_view_list(
    projects: Iterable[models.Project],
    tickets: Iterable[models.Ticket],
    users: Iterable[models.User],
) -> List[Dict[str, Any]]:
    """
    모든 프로젝트에 대해 build_project_view와 같은 조합을 한 번에 수행합니다.

    티켓을 project_id로 한 번만 묶어 두고 프로젝트 순서대로 붙이므로, 티켓이 없는 프로젝트도
    빈 tickets 목록과 함께 그대로 남고 같은 프로젝트가 중복되어 나타나지 않습니다.
    """
    users_by_id = _users_by_id(users)
    tickets_by_project: Dict[str, List[models.Ticket]] = {}
    for ticket in sorted(tickets, key=_creation_order):
        tickets_by_project.setdefault(ticket.project_id, []).append(ticket)

    views = []
    for project in projects:
        view = project_to_dict(project)
        view["tickets"] = [
            _ticket_view(ticket, users_by_id) for ticket in tickets_by_project.get(project.id, [])
        ]
        views.append(view)
    return views


def _user_view(
    user: models.User,
    own_tickets: List[models.Ticket],
    projects_by_id: Dict[str, models.Project],
) -> Dict[str, Any]:
    seen = set()
    user_projects = []
    for ticket in own_tickets:
        project = projects_by_id.get(ticket.project_id)
        if project is None or project.id in seen:
            continue
        seen.add(project.id)
        user_projects.append(project_to_dict(project))

    view = user_to_dict(user)
    view["projects"] = user_projects
    view["tickets"] = [ticket_to_dict(ticket) for ticket in own_tickets]
    return view


def build_user_view(
    user: models.User,
    tickets: Iterable[models.Ticket],
    projects: Iterable[models.Project],
) -> Dict[str, Any]:
    """
    사용자에게 할당된 티켓과, 그 티켓들이 속한 프로젝트 목록을 붙입니다.

    프로젝트는 ID 기준으로 중복을 제거하며 티켓 순서상 처음 등장한 순서를 유지합니다.
    """
    own_tickets = sorted((t for t in tickets if t.user_id == user.id), key=_creation_order)
    return _user_view(user, own_tickets, {p.id: p for p in projects})


def build_user_view_list(
    users: Iterable[models.User],
    tickets: Iterable[models.Ticket],
    projects: Iterable[models.Project],
) -> List[Dict[str, Any]]:
    projects_by_id = {p.id: p for p in projects}
    tickets_by_user: Dict[str, List[models.Ticket]] = {}
    for ticket in sorted(tickets, key=_creation_order):
        if ticket.user_id is not None:
            tickets_by_user.setdefault(ticket.user_id, []).append(ticket)
    return [_user_view(user, tickets_by_user.get(user.id, []), projects_by_id) for user in users]
