from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

class SqlalchemyRepository:
    def __init__(self, db_session: Session):
        self.db = db_session

    def _commit(self):
        # 실패한 트랜잭션은 세션을 롤백해 두어야 같은 요청 안에서 세션을 다시 쓸 수 있습니다.
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
