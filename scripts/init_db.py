import logging

from wedledger.db.base import Base
from wedledger.db.session import engine

logger = logging.getLogger(__name__)


def init():
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init()
    logger.info(f"Database schema created at {engine.url}")
