import logging
from typing import Any, Dict, List

from src.database import models
from src.database.models.base import utcnow
from src.repositories.interfaces import IProjectRepository, ITicketRepository, IUserRepository
from src.services.exceptions import ProjectNotFoundError
from src.services.store_errors import translate_store_errors
from src.services.validation import validate_id, validate_project_create, validate_project_update
from src.services.views import assignee_ids, build_project_view, build_project_view_list

logger = logging.getLogger(__name__)


class ProjectService:
    """프로젝트 생성/조회/수정/삭제와 프로젝트-티켓-담당자 읽기 모델 조합을 담당합니다."""

    def __init__(self, project_repo: IProjectRepository, ticket_repo: ITicketRepository, user_repo: IUserRepository):
        """
        ProjectService를 초기화합니다.

        Args:
            project_repo: 프로젝트 데이터에 접근하기 위한 리포지토리.
            ticket_repo: 티켓 데이터에 접근하기 위한 리포지토리 (조합 및 연쇄 삭제용).
            user_repo: 사용자 데이터에 접근하기 위한 리포지토리 (티켓 담당자 조합용).
        """
        self.project_repo = project_repo
        self.ticket_repo = ticket_repo
        self.user_repo = user_repo

    @translate_store_errors("Failed to fetch projects")
    def list_projects(self) -> List[Dict[str, Any]]:
        """
        모든 프로젝트를 티켓, 담당자와 함께 조회합니다.
        티켓이 없는 프로젝트도 빈 tickets 목록과 함께 포함됩니다.

        Raises:
            ProjectNotFoundError: 프로젝트가 하나도 없을 때.
        """
        projects = self.project_repo.list_all()
        if not projects:
            raise ProjectNotFoundError("There are no projects")
        tickets = self.ticket_repo.list_all()
        users = self.user_repo.list_by_ids(assignee_ids(tickets))
        return build_project_view_list(projects, tickets, users)

    @translate_store_errors("Failed to fetch project")
    def get_project(self, project_id: str) -> Dict[str, Any]:
        """
        ID로 특정 프로젝트를 티켓, 담당자와 함께 조회합니다.

        Raises:
            ValidationError: ID 형식이 잘못되었을 때.
            ProjectNotFoundError: 해당 ID의 프로젝트를 찾을 수 없을 때.
        """
        validate_id(project_id, "project")
        return self._load_view(project_id)

    @translate_store_errors("Failed to create project")
    def create_project(self, payload: Any) -> Dict[str, Any]:
        """
        새로운 프로젝트를 생성하고, 저장된 내용을 다시 읽어 반환합니다.

        Raises:
            ValidationError: title 또는 description이 없거나 비어 있을 때.
        """
        data = validate_project_create(payload)
        now = utcnow()
        created = self.project_repo.create(models.Project(
            title=data.title,
            description=data.description,
            created_at=now,
            updated_at=now,
        ))
        logger.info("Project created: %s", created.id)
        return self._load_view(created.id)

    @translate_store_errors("Failed to update project")
    def update_project(self, project_id: str, payload: Any) -> Dict[str, Any]:
        """
        프로젝트의 title/description 중 전달된 필드만 갱신합니다.

        Raises:
            ValidationError: ID 형식이 잘못되었거나, 갱신할 필드가 하나도 없을 때.
            ProjectNotFoundError: 해당 ID의 프로젝트를 찾을 수 없을 때.
        """
        validate_id(project_id, "project")
        changes = validate_project_update(payload)
        changes["updated_at"] = utcnow()
        if self.project_repo.update(project_id, changes) is None:
            raise ProjectNotFoundError("Project not found")
        return self._load_view(project_id)

    @translate_store_errors("Failed to delete project")
    def delete_project(self, project_id: str) -> bool:
        """
        프로젝트와 그 프로젝트의 모든 티켓을 삭제합니다.

        Raises:
            ValidationError: ID 형식이 잘못되었을 때.
            ProjectNotFoundError: 해당 ID의 프로젝트를 찾을 수 없을 때.
        """
        validate_id(project_id, "project")
        deleted_tickets = self.project_repo.delete_with_tickets(project_id)
        if deleted_tickets is None:
            raise ProjectNotFoundError("Project not found")
        logger.info("Project deleted: %s (%d tickets removed)", project_id, deleted_tickets)
        return True

    def _load_view(self, project_id: str) -> Dict[str, Any]:
        project = self.project_repo.find_by_id(project_id)
        if not project:
            raise ProjectNotFoundError("Project not found")
        tickets = self.ticket_repo.list_by_project_id(project_id)
        users = self.user_repo.list_by_ids(assignee_ids(tickets))
        return build_project_view(project, tickets, users)
