from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from src.config import settings


def build_engine(database_url: str):
    """
    주어진 연결 문자열로 SQLAlchemy 엔진을 생성합니다.
    connect_args는 SQLite에서만 필요합니다. (thread-safe 설정)
    """
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args)


engine = build_engine(settings.database_url)

# autocommit=False, autoflush=False로 설정하여, 명시적으로 commit을 호출해야 DB에 반영됩니다.
# expire_on_commit=False: commit 이후에도 응답 직렬화를 위해 속성 값을 그대로 사용합니다.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

# 모든 모델 클래스가 상속받을 Base 클래스
Base = declarative_base()
