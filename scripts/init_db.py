# scripts/init_db.py
"""
(Re)create the schema on the configured DATABASE_URL and load the sample
receipts when SEED_SAMPLE_DATA is on. Only useful for a file or server
database; the default in-memory store is rebuilt on every start.
"""

import logging

from receipt_desk.core.config import get_settings
from receipt_desk.db.engine import get_engine
from receipt_desk.db.schema import metadata
from receipt_desk.db.seed import seed_sample_data
from receipt_desk.db.storage import Storage

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    settings = get_settings()
    engine = get_engine(settings.DATABASE_URL)
    metadata.drop_all(engine)
    metadata.create_all(engine)
    logger.info("DB schema created.")

    if settings.SEED_SAMPLE_DATA:
        seed_sample_data(Storage(engine))


if __name__ == "__main__":
    main()
