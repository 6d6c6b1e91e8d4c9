from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional
from src.database import models

class IUserRepository(ABC):
    @abstractmethod
    def create(self, user_model: models.User) -> models.User:
        """새로운 사용자를 데이터베이스에 생성합니다. 이메일이 중복되면 IntegrityError가 발생합니다."""
        pass

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[models.User]:
        """고유 ID로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[models.User]:
        """이메일로 특정 사용자를 조회합니다."""
        pass

    @abstractmethod
    def list_all(self) -> List[models.User]:
        """모든 사용자의 목록을 생성 순서대로 조회합니다."""
        pass

    @abstractmethod
    def list_by_ids(self, user_ids: Iterable[str]) -> List[models.User]:
        """주어진 ID에 해당하는 사용자들을 한 번에 조회합니다. 없는 ID는 무시합니다."""
        pass

    @abstractmethod
    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[models.User]:
        """사용자의 일부 필드를 갱신합니다. 해당 ID의 사용자가 없으면 None."""
        pass

    @abstractmethod
    def delete_and_unassign(self, user_id: str) -> Optional[int]:
        """
        사용자를 삭제하고, 그 사용자를 참조하던 모든 티켓의 담당자를 해제합니다.
        두 작업은 하나의 트랜잭션으로 수행됩니다.

        Returns:
            담당자가 해제된 티켓 수. 해당 ID의 사용자가 없으면 None.
        """
        pass
