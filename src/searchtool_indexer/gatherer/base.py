"""
Base classes for the gatherers, the producers that fill the shared
document stack.
"""
import logging
import time
import traceback

from searchtool_indexer.gatherer.sql_executor import SQLExecutor
from searchtool_indexer.indexer.document_stack import StackAbortedError

logger = logging.getLogger(__name__)


class AbstractGatherer:
    """
    Superclass of every gatherer.

    ``run`` is the thread target. It runs each subtask returned by
    ``subtasks`` in turn; a failing subtask is logged and the next one
    still runs. If the document stack is aborted the remaining subtasks
    are skipped. Whatever happens, the document stack is marked complete
    when the gatherer is done, otherwise the indexers would wait forever.
    """

    # Subclasses set this to the doc builder class for their index.
    builder_class = None

    def __init__(self, config, document_stack):
        self.config = config
        self.document_stack = document_stack
        self.stack_max = config.get_int('STACK_MAX')
        self.builder = self.builder_class() if self.builder_class else None
        self.pushed = 0
        self.failed_subtasks = []

    @classmethod
    def schema(cls):
        """Whoosh schema of the index this gatherer produces documents for."""
        return cls.builder_class.SCHEMA

    def subtasks(self):
        """Return the callables that make up this gatherer, in order."""
        raise NotImplementedError

    def run(self):
        start = time.time()
        name = type(self).__name__
        logger.info(f"{name} started")
        try:
            for subtask in self.subtasks():
                try:
                    subtask()
                except StackAbortedError:
                    logger.warning(f"{name} stopped in {subtask.__name__}, the document stack was aborted")
                    break
                except Exception as e:
                    self.failed_subtasks.append(subtask.__name__)
                    logger.error(f"{name}.{subtask.__name__} failed: {e}")
                    logger.error(traceback.format_exc())
        except Exception as e:
            logger.error(f"Exception caught in {name}.run(): {e}")
            logger.error(traceback.format_exc())
        finally:
            self.document_stack.set_complete()
            try:
                self.cleanup()
            except Exception as e:
                logger.error(f"Error cleaning up {name}: {e}")
        logger.info(f"{name} pushed {self.pushed} documents in {time.time() - start:.1f}s")

    def push(self, doc):
        """Put a document on the stack, pausing first while the stack is over its cap."""
        self.document_stack.wait_for_capacity(self.stack_max)
        self.document_stack.push(doc)
        self.pushed += 1

    def push_builder(self):
        """Push the builder's document and reset the builder for the next one."""
        self.push(self.builder.get_document())
        self.builder.clear()

    def cleanup(self):
        pass


class DatabaseGatherer(AbstractGatherer):
    """Parent class of the gatherers that read from the MGD database."""

    def __init__(self, config, document_stack):
        super().__init__(config, document_stack)
        self.executor = SQLExecutor(config)

    def gather(self, query, label):
        """Run a query for one subtask and log how long it took."""
        rows = self.executor.execute(query)
        logger.info(f"Time taken gather {label} result set: {self.executor.timing}ms")
        return rows

    def cleanup(self):
        """Close the database connection once the gatherer is finished with it."""
        self.executor.cleanup()
