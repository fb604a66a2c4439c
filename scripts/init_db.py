import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from leaderboard.config import get_settings
from leaderboard.database.connection import create_db_engine, init_db as create_tables
from leaderboard.logging_config import setup_logging


def init_db():
    """데이터베이스 초기화"""
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, "simple")
    engine = create_db_engine(settings)
    try:
        create_tables(engine)
        print(f"Database initialized successfully: {engine.url.render_as_string(hide_password=True)}")
    except Exception as e:
        print(f"Database initialization failed: {str(e)}")
        raise
    finally:
        engine.dispose()


if __name__ == "__main__":
    init_db()
