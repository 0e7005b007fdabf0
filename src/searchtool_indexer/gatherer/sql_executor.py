"""
Runs queries against the MGD database for the gatherers.
"""
import logging
import sqlite3
import time

logger = logging.getLogger(__name__)


class SQLExecutor:
    """
    Knows how to connect to, and submit queries against, the MGD database.

    The connection is opened on the first query and is read only. Rows can
    be addressed by column name.
    """

    def __init__(self, config):
        self.db_path = config.get('MGD_DB_PATH')
        self.conn = None
        self.timing = 0  # milliseconds taken by the last query

    def _connect(self):
        logger.info(f"Connecting to MGD database at {self.db_path}")
        if self.db_path == ':memory:':
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        else:
            # Read only, and fail instead of creating an empty database
            self.conn = sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row

    def execute(self, query, params=()):
        """Run a query and return a cursor over its rows."""
        if self.conn is None:
            self._connect()
        start = time.time()
        cursor = self.conn.execute(query, params)
        self.timing = int((time.time() - start) * 1000)
        return cursor

    def cleanup(self):
        """Close the connection, if one was opened."""
        if self.conn is not None:
            self.conn.close()
            self.conn = None
