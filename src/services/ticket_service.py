import logging
from typing import Any, Dict, List

from src.database import models
from src.database.models.base import utcnow
from src.repositories.interfaces import IProjectRepository, ITicketRepository, IUserRepository
from src.services.exceptions import ProjectNotFoundError, TicketNotFoundError, UserNotFoundError
from src.services.store_errors import translate_store_errors
from src.services.validation import validate_id, validate_ticket_create, validate_ticket_update
from src.services.views import assignee_ids, build_ticket_view, build_ticket_view_list

logger = logging.getLogger(__name__)


class TicketService:
    """티켓 생성/조회/수정/삭제와 티켓-담당자 읽기 모델 조합을 담당합니다."""

    def __init__(self, ticket_repo: ITicketRepository, project_repo: IProjectRepository, user_repo: IUserRepository):
        """
        TicketService를 초기화합니다.

        Args:
            ticket_repo: 티켓 데이터에 접근하기 위한 리포지토리.
            project_repo: 프로젝트 존재 여부 확인용 리포지토리.
            user_repo: 담당자 존재 여부 확인 및 조합용 리포지토리.
        """
        self.ticket_repo = ticket_repo
        self.project_repo = project_repo
        self.user_repo = user_repo

    @translate_store_errors("Failed to fetch tickets")
    def list_tickets(self) -> List[Dict[str, Any]]:
        """모든 티켓을 담당자 정보와 함께 조회합니다."""
        tickets = self.ticket_repo.list_all()
        users = self.user_repo.list_by_ids(assignee_ids(tickets))
        return build_ticket_view_list(tickets, users)

    @translate_store_errors("Failed to fetch project tickets")
    def list_project_tickets(self, project_id: str) -> List[Dict[str, Any]]:
        """
        특정 프로젝트의 티켓을 담당자 정보와 함께 조회합니다.
        프로젝트 존재 여부는 확인하지 않으며, 없는 프로젝트는 빈 목록이 됩니다.

        Raises:
            ValidationError: 프로젝트 ID 형식이 잘못되었을 때.
        """
        validate_id(project_id, "project")
        tickets = self.ticket_repo.list_by_project_id(project_id)
        users = self.user_repo.list_by_ids(assignee_ids(tickets))
        return build_ticket_view_list(tickets, users)

    @translate_store_errors("Failed to fetch ticket")
    def get_ticket(self, ticket_id: str) -> Dict[str, Any]:
        """
        ID로 특정 티켓을 조회합니다.

        Raises:
            ValidationError: ID 형식이 잘못되었을 때.
            TicketNotFoundError: 해당 ID의 티켓을 찾을 수 없을 때.
        """
        validate_id(ticket_id, "ticket")
        return self._load_view(ticket_id)

    @translate_store_errors("Failed to create ticket")
    def create_ticket(self, payload: Any) -> Dict[str, Any]:
        """
        새로운 티켓을 생성합니다. 상태는 요청과 관계없이 항상 "open"으로 시작합니다.

        Args:
            payload: title, description, priority, projectId, (선택) userId를 담은 요청 본문.

        Returns:
            저장소에서 다시 읽어 담당자 정보까지 조합한 티켓.

        Raises:
            ValidationError: 필수 필드 누락, 잘못된 priority, 잘못된 ID 형식.
            ProjectNotFoundError: projectId에 해당하는 프로젝트가 없을 때.
            UserNotFoundError: userId에 해당하는 담당자가 없을 때.
        """
        data = validate_ticket_create(payload)

        if not self.project_repo.find_by_id(data.project_id):
            raise ProjectNotFoundError("Project not found")
        if data.user_id is not None and not self.user_repo.find_by_id(data.user_id):
            raise UserNotFoundError("Assignee user not found")

        now = utcnow()
        created = self.ticket_repo.create(models.Ticket(
            title=data.title,
            description=data.description,
            priority=data.priority,
            status="open",
            project_id=data.project_id,
            user_id=data.user_id,
            created_at=now,
            updated_at=now,
        ))
        logger.info("Ticket created: %s (project %s)", created.id, created.project_id)
        return self._load_view(created.id)

    @translate_store_errors("Failed to update ticket")
    def update_ticket(self, ticket_id: str, payload: Any) -> Dict[str, Any]:
        """
        티켓의 일부 필드를 갱신합니다.

        userId가 null이면 담당자를 해제하고(필드 제거), 값이 있으면 해당 사용자가
        존재하는지 확인한 뒤 할당합니다. 상태 전이 순서는 제한하지 않습니다.

        Raises:
            ValidationError: ID 형식 오류, 빈 요청, 잘못된 priority/status.
            UserNotFoundError: 할당하려는 담당자가 없을 때.
            TicketNotFoundError: 해당 ID의 티켓을 찾을 수 없을 때.
        """
        validate_id(ticket_id, "ticket")
        changes = validate_ticket_update(payload)

        unassign = "user_id" in changes and changes["user_id"] is None
        if unassign:
            del changes["user_id"]
        elif "user_id" in changes and not self.user_repo.find_by_id(changes["user_id"]):
            raise UserNotFoundError("Assignee user not found")

        changes["updated_at"] = utcnow()
        if self.ticket_repo.update(ticket_id, changes, unassign=unassign) is None:
            raise TicketNotFoundError("Ticket not found")
        return self._load_view(ticket_id)

    @translate_store_errors("Failed to delete ticket")
    def delete_ticket(self, ticket_id: str) -> bool:
        validate_id(ticket_id, "ticket")
        if not self.ticket_repo.delete(ticket_id):
            raise TicketNotFoundError("Ticket not found")
        logger.info("Ticket deleted: %s", ticket_id)
        return True

    def _load_view(self, ticket_id: str) -> Dict[str, Any]:
        ticket = self.ticket_repo.find_by_id(ticket_id)
        if not ticket:
            raise TicketNotFoundError("Ticket not found")
        users = self.user_repo.list_by_ids(assignee_ids([ticket]))
        return build_ticket_view(ticket, users)
