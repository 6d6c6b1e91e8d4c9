from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional
from src.database import models

class ITicketRepository(ABC):
    @abstractmethod
    def create(self, ticket_model: models.Ticket) -> models.Ticket:
        """새로운 티켓을 데이터베이스에 생성합니다."""
        pass

    @abstractmethod
    def find_by_id(self, ticket_id: str) -> Optional[models.Ticket]:
        """고유 ID로 특정 티켓을 조회합니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.Ticket]:
        """모든 티켓을 생성 순서대로 조회합니다."""
        pass

    @abstractmethod
    def list_by_project_id(self, project_id: str) -> List[models.Ticket]:
        """특정 프로젝트에 속한 티켓을 생성 순서대로 조회합니다."""
        pass

    @abstractmethod
    def list_by_user_ids(self, user_ids: Iterable[str]) -> List[models.Ticket]:
        """주어진 사용자들에게 할당된 티켓을 생성 순서대로 조회합니다."""
        pass

    @abstractmethod
    def update(self, ticket_id: str, fields: Dict[str, Any], unassign: bool = False) -> Optional[models.Ticket]:
        """
        티켓의 일부 필드를 갱신합니다. unassign이 True이면 담당자(user_id)를 해제합니다.

        Returns:
            갱신된 티켓. 해당 ID의 티켓이 없으면 None.
        """
        pass

    @abstractmethod
    def delete(self, ticket_id: str) -> bool:
        """티켓을 삭제합니다. 삭제된 티켓이 없으면 False를 반환합니다."""
        pass
