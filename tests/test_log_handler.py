import logging

from kotoba.database import get_db_connection, init_db
from kotoba.log_handler import SQLiteHandler


def test_warnings_written_to_logs_table(tmp_path):
    db_path = str(tmp_path / "kotoba.db")
    init_db(db_path)
    logger = logging.getLogger("kotoba.test_log_handler")
    handler = SQLiteHandler(db_path)
    logger.addHandler(handler)
    try:
        logger.warning("store write failed")
        logger.info("session started")
    finally:
        logger.removeHandler(handler)

    conn = get_db_connection(db_path)
    rows = conn.execute("SELECT level, message FROM logs").fetchall()
    conn.close()
    assert [(r["level"], r["message"]) for r in rows] == [("WARNING", "store write failed")]
