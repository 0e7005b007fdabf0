"""
Indexer thread for the search tool indexer.

Each indexer takes documents off the shared stack and hands them to the
index writer until the stack reports that gathering is complete and nothing
is left.
"""
import logging
import time
import traceback

from searchtool_indexer.indexer.document_stack import END_OF_STREAM

logger = logging.getLogger(__name__)


class Indexer:
    """
    Drains the shared document stack into the index writer.

    A failure while popping or writing is logged and stops this indexer
    only; the other indexers keep draining the stack. The documents of the
    failed batch that were not written are lost, and how many is logged.
    """

    def __init__(self, writer, document_stack, batch_size=1, progress_start=10000, name=None):
        self.writer = writer
        self.document_stack = document_stack
        self.batch_size = batch_size
        self.progress_threshold = progress_start
        self.name = name or f"indexer-{id(self):x}"
        self.count = 0
        self.dropped = 0
        self.error = None

    def run(self):
        """Thread target: pop, write, repeat until END_OF_STREAM."""
        start = time.time()
        logger.debug(f"{self.name} started")
        docs, written = [], 0
        try:
            while True:
                docs = self.document_stack.pop_many(self.batch_size)
                if docs is END_OF_STREAM:
                    break
                written = 0
                for doc in docs:
                    self.writer.add_document(doc)
                    written += 1
                    self.count += 1
                if self.count >= self.progress_threshold:
                    self._log_progress(start)
                    self.progress_threshold *= 2
        except Exception as e:
            self.error = e
            logger.error(f"{self.name} stopped after {self.count} documents: {e}")
            logger.error(traceback.format_exc())
            self.dropped = len(docs) - written
            if self.dropped:
                logger.error(f"{self.name} dropped {self.dropped} documents it had taken off the stack")
            return

        logger.info(f"{self.name} finished, indexed {self.count} documents")

    def _log_progress(self, start):
        elapsed = time.time() - start
        rate = int(self.count / elapsed) if elapsed > 0 else self.count
        logger.info(
            f"{self.name} indexed: {self.count} Rate: {rate} dps "
            f"Remaining: {self.document_stack.size()}"
        )
