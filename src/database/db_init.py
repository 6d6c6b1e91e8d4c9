import logging

from sqlalchemy import inspect

from .database import engine as default_engine, Base
from . import models  # noqa: F401  (테이블 메타데이터 등록)

logger = logging.getLogger(__name__)


def initialize_db(engine=None):
    """
    DB와 테이블, 인덱스를 생성합니다. (이미 존재하면 생성하지 않음)
    이메일 유일성은 users.email의 unique 인덱스로 저장소 수준에서 보장됩니다.
    """
    engine = engine or default_engine
    logger.info("DB 초기화 중 (%s)...", engine.url.render_as_string(hide_password=True))

    existing = set(inspect(engine).get_table_names())
    Base.metadata.create_all(bind=engine)

    for table in Base.metadata.sorted_tables:
        if table.name not in existing:
            logger.info("테이블 생성 완료: %s", table.name)
    logger.info("DB 초기화 완료.")


if __name__ == '__main__':
    from src.config import settings
    from src.utils.logging_config import setup_logging

    setup_logging(settings.log_level, settings.log_file or None)
    initialize_db()
