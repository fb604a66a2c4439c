from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """컨텍스트 매니저를 사용한 데이터베이스 세션 관리"""
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_database(session_factory: sessionmaker) -> bool:
    """SELECT 1 로 데이터베이스 연결 상태 확인"""
    try:
        with session_scope(session_factory) as db:
            db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
