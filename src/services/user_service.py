import logging
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError

from src.database import models
from src.database.models.base import utcnow
from src.repositories.interfaces import IProjectRepository, ITicketRepository, IUserRepository
from src.services.exceptions import AuthenticationError, UserAlreadyExistsError, UserNotFoundError
from src.services.store_errors import translate_store_errors
from src.services.validation import validate_id, validate_login, validate_user_create, validate_user_update
from src.services.views import build_user_view, build_user_view_list, user_to_dict
from src.utils.security import hash_password, verify_password

logger = logging.getLogger(__name__)


class UserService:
    """사용자 관리, 자격 증명 확인, 사용자-프로젝트-티켓 읽기 모델 조합을 담당합니다."""

    def __init__(self, user_repo: IUserRepository, ticket_repo: ITicketRepository, project_repo: IProjectRepository):
        """
        UserService를 초기화합니다.

        Args:
            user_repo: 사용자 데이터에 접근하기 위한 리포지토리.
            ticket_repo: 사용자에게 할당된 티켓 조회용 리포지토리.
            project_repo: 티켓이 속한 프로젝트 조회용 리포지토리.
        """
        self.user_repo = user_repo
        self.ticket_repo = ticket_repo
        self.project_repo = project_repo

    @translate_store_errors("Failed to fetch users")
    def list_users(self) -> List[Dict[str, Any]]:
        """모든 사용자를 할당된 티켓, 관련 프로젝트와 함께 조회합니다. (비밀번호 제외)"""
        users = self.user_repo.list_all()
        tickets = self.ticket_repo.list_by_user_ids([u.id for u in users])
        projects = self.project_repo.list_by_ids({t.project_id for t in tickets})
        return build_user_view_list(users, tickets, projects)

    @translate_store_errors("Failed to fetch user details")
    def get_user(self, user_id: str) -> Dict[str, Any]:
        """
        ID로 특정 사용자를 조회합니다. (비밀번호 제외)

        Raises:
            ValidationError: ID 형식이 잘못되었을 때.
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
        """
        validate_id(user_id, "user")
        return self._load_view(user_id)

    @translate_store_errors("Failed to create user")
    def create_user(self, payload: Any) -> Dict[str, Any]:
        """
        새로운 사용자를 생성합니다. 비밀번호는 해시하여 저장합니다.

        Raises:
            ValidationError: name, email, password 중 하나라도 없을 때.
            UserAlreadyExistsError: 동일한 이메일의 사용자가 이미 존재할 때.
        """
        data = validate_user_create(payload)
        if self.user_repo.find_by_email(data.email):
            raise UserAlreadyExistsError("User with this email already exists")

        now = utcnow()
        new_user = models.User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            created_at=now,
            updated_at=now,
        )
        try:
            created = self.user_repo.create(new_user)
        except IntegrityError:
            # 사전 확인과 insert 사이에 같은 이메일이 먼저 저장된 경우
            raise UserAlreadyExistsError("User with this email already exists")
        logger.info("User registered: %s", created.id)
        return self._load_view(created.id)

    @translate_store_errors("Failed to update user")
    def update_user(self, user_id: str, payload: Any) -> Dict[str, Any]:
        """
        사용자의 name/email 중 전달된 필드만 갱신합니다.

        Raises:
            ValidationError: ID 형식이 잘못되었거나, 갱신할 필드가 하나도 없을 때.
            UserAlreadyExistsError: 변경하려는 이메일을 다른 사용자가 쓰고 있을 때.
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
        """
        validate_id(user_id, "user")
        changes = validate_user_update(payload)
        changes["updated_at"] = utcnow()
        try:
            updated = self.user_repo.update(user_id, changes)
        except IntegrityError:
            raise UserAlreadyExistsError("User with this email already exists")
        if updated is None:
            raise UserNotFoundError("User not found")
        return self._load_view(user_id)

    @translate_store_errors("Failed to delete user")
    def delete_user(self, user_id: str) -> bool:
        """
        사용자를 삭제합니다. 사용자가 담당하던 티켓은 삭제하지 않고 담당자만 해제합니다.

        Raises:
            ValidationError: ID 형식이 잘못되었을 때.
            UserNotFoundError: 해당 ID의 사용자를 찾을 수 없을 때.
        """
        validate_id(user_id, "user")
        unassigned = self.user_repo.delete_and_unassign(user_id)
        if unassigned is None:
            raise UserNotFoundError("User not found")
        logger.info("User deleted: %s (%d tickets unassigned)", user_id, unassigned)
        return True

    @translate_store_errors("Failed to verify credentials")
    def authenticate(self, payload: Any) -> Dict[str, Any]:
        """
        이메일과 평문 비밀번호로 사용자를 확인합니다.
        사용자가 없는 경우와 비밀번호가 틀린 경우를 구분하지 않습니다.

        Returns:
            비밀번호가 제거된 사용자 정보.

        Raises:
            ValidationError: email 또는 password가 없을 때.
            AuthenticationError: 자격 증명이 일치하지 않을 때.
        """
        data = validate_login(payload)
        user = self.user_repo.find_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
        return user_to_dict(user)

    def _load_view(self, user_id: str) -> Dict[str, Any]:
        user = self.user_repo.find_by_id(user_id)
        if not user:
            raise UserNotFoundError("User not found")
        tickets = self.ticket_repo.list_by_user_ids([user_id])
        projects = self.project_repo.list_by_ids({t.project_id for t in tickets})
        return build_user_view(user, tickets, projects)
