"""
Index controller for the search tool indexer.
Responsible for the pool of indexer threads and for finalizing the index.
"""
import enum
import logging
import threading
import traceback

from searchtool_indexer.common.utils import get_memory_usage
from searchtool_indexer.indexer.indexer import Indexer

logger = logging.getLogger(__name__)


class ControllerState(enum.Enum):
    IDLE = 'idle'
    SPAWNING = 'spawning'
    RUNNING = 'running'
    DRAINING = 'draining'
    FINALIZING = 'finalizing'
    CLOSED = 'closed'


class IndexController:
    """
    Creates the indexer threads, starts them, waits until every one of them
    has finished, then optimizes and closes the index writer.

    The writer is only finalized after all indexers have exited. If every
    indexer stopped on an error there is nobody left to drain the stack:
    the stack is aborted, which also releases a gatherer waiting for
    capacity, and the index is not finalized. That, and a failure while
    finalizing, are fatal: the error is kept in ``error`` and the
    controller never reaches CLOSED.
    """

    def __init__(self, writer, document_stack, number_of_threads, batch_size=1, progress_start=10000):
        if number_of_threads < 1:
            raise ValueError(f"number_of_threads must be at least 1, got {number_of_threads}")
        self.writer = writer
        self.document_stack = document_stack
        self.number_of_threads = number_of_threads
        self.batch_size = batch_size
        self.progress_start = progress_start

        self.state = ControllerState.IDLE
        self.indexers = []
        self.threads = []
        self.error = None

    def run(self):
        """Thread target for the controller."""
        if self.state != ControllerState.IDLE:
            raise RuntimeError(f"IndexController already ran (state: {self.state.value})")

        self.state = ControllerState.SPAWNING
        for i in range(self.number_of_threads):
            indexer = Indexer(
                self.writer,
                self.document_stack,
                batch_size=self.batch_size,
                progress_start=self.progress_start,
                name=f"indexer-{i}",
            )
            thread = threading.Thread(target=indexer.run, name=indexer.name)
            self.indexers.append(indexer)
            self.threads.append(thread)
        logger.info(f"Created {self.number_of_threads} indexer threads")

        self.state = ControllerState.RUNNING
        for thread in self.threads:
            thread.start()

        # Wait until all the threads have completed their work
        self.state = ControllerState.DRAINING
        for thread in self.threads:
            thread.join()

        failed = [indexer.name for indexer in self.indexers if indexer.error is not None]
        if len(failed) == len(self.indexers):
            dropped = self.document_stack.abort()
            self.error = RuntimeError(
                f"All {len(failed)} indexers stopped early, {dropped} documents left on the stack were dropped"
            )
            logger.error(f"{self.error}, {self.total_indexed()} documents indexed")
            return
        if failed:
            dropped = sum(indexer.dropped for indexer in self.indexers)
            logger.warning(f"Indexers stopped early: {', '.join(failed)}, {dropped} documents dropped")
        logger.info(f"All indexers finished, {self.total_indexed()} documents indexed")

        self.state = ControllerState.FINALIZING
        try:
            logger.info("Optimizing the index")
            self.writer.optimize()
            self.writer.close()
        except Exception as e:
            self.error = e
            logger.error(f"Error finalizing the index: {e}")
            logger.error(traceback.format_exc())
            return

        self.state = ControllerState.CLOSED
        logger.info(f"Index closed. Memory in use: {get_memory_usage():.1f} MB")

    def total_indexed(self):
        return sum(indexer.count for indexer in self.indexers)
