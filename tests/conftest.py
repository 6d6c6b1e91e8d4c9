# tests/conftest.py
import pytest
from unittest.mock import MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.database.db_init import initialize_db
from src.repositories.interfaces import IProjectRepository, ITicketRepository, IUserRepository

# ===================================================================
#  리포지토리 모의 객체
# ===================================================================

@pytest.fixture
def mock_project_repo() -> MagicMock:
    """IProjectRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IProjectRepository)

@pytest.fixture
def mock_ticket_repo() -> MagicMock:
    """ITicketRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=ITicketRepository)

@pytest.fixture
def mock_user_repo() -> MagicMock:
    """IUserRepository에 대한 모의 객체를 생성합니다."""
    return MagicMock(spec=IUserRepository)

# ===================================================================
#  인메모리 SQLite
# ===================================================================

@pytest.fixture
def engine():
    """테스트마다 새로 만드는 인메모리 SQLite 엔진. 모든 세션이 같은 연결을 공유합니다."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    initialize_db(engine)
    yield engine
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()
