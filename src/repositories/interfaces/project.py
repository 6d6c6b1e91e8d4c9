from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional
from src.database import models

class IProjectRepository(ABC):
    @abstractmethod
    def create(self, project_model: models.Project) -> models.Project:
        """새로운 프로젝트를 데이터베이스에 생성합니다."""
        pass

    @abstractmethod
    def find_by_id(self, project_id: str) -> Optional[models.Project]:
        """고유 ID로 특정 프로젝트를 조회합니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.Project]:
        """모든 프로젝트의 목록을 생성 순서대로 조회합니다."""
        pass

    @abstractmethod
    def list_by_ids(self, project_ids: Iterable[str]) -> List[models.Project]:
        """주어진 ID에 해당하는 프로젝트들을 한 번에 조회합니다. 없는 ID는 무시합니다."""
        pass

    @abstractmethod
    def update(self, project_id: str, fields: Dict[str, Any]) -> Optional[models.Project]:
        """
        프로젝트의 일부 필드를 갱신합니다.

        Returns:
            갱신된 프로젝트. 해당 ID의 프로젝트가 없으면 None.
        """
        pass

    @abstractmethod
    def delete_with_tickets(self, project_id: str) -> Optional[int]:
        """
        프로젝트와 그 프로젝트에 속한 모든 티켓을 하나의 트랜잭션으로 삭제합니다.

        Returns:
            함께 삭제된 티켓 수. 해당 ID의 프로젝트가 없으면 None (아무것도 삭제하지 않음).
        """
        pass
