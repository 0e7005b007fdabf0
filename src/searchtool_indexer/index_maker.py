"""
Main script for building one search tool index.

    searchtool-index <index-dir> <index-code>

The index code picks the gatherer that fills the shared document stack and
the schema (and so the analyzers) of the index that is written. After
indexing has completed a timing report is logged.
"""
import argparse
import logging
import sys
import threading
import time
import traceback

from searchtool_indexer.common.config import ConfigError, IndexCfg
from searchtool_indexer.common.utils import time_report
from searchtool_indexer.gatherer import GATHERERS
from searchtool_indexer.indexer.document_stack import SharedDocumentStack
from searchtool_indexer.indexer.index_controller import ControllerState, IndexController
from searchtool_indexer.indexer.whoosh_index import WhooshIndexWriter

logger = logging.getLogger(__name__)

JOIN_POLL_INTERVAL = 1.0  # seconds

# How long the gatherer gets to wind down once the controller is done
GATHERER_JOIN_TIMEOUT = 30.0  # seconds


def configure_logging(log_file):
    """Log to the console and to the indexer log file."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] [Indexer] %(message)s',
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file)
        ]
    )


def parse_args(argv=None):
    codes = ', '.join(f"{code} ({gatherer.__name__})" for code, gatherer in GATHERERS.items())
    parser = argparse.ArgumentParser(
        description='Build a search tool index from the MGD database',
        epilog=f"Index codes: {codes}",
    )
    parser.add_argument('index_dir', help='Directory to write the index to')
    parser.add_argument('index_code', type=str.lower, choices=sorted(GATHERERS),
                        help='Which index to create')
    return parser.parse_args(argv)


def join_thread(thread, poll_interval=JOIN_POLL_INTERVAL):
    """Join with a timeout so the main thread still sees KeyboardInterrupt."""
    while thread.is_alive():
        thread.join(poll_interval)


class IndexMaker:
    """
    Wires one indexing run together: the shared document stack, the
    gatherer that fills it, the index writer and the controller whose
    indexer threads drain it.
    """

    def __init__(self, index_dir, index_code, config):
        gatherer_class = GATHERERS[index_code]
        logger.info(f"Creating {gatherer_class.__name__} index in {index_dir}")

        self.document_stack = SharedDocumentStack(
            backoff_start=config.get_float('STACK_BACKOFF_START'),
            backoff_ceiling=config.get_float('STACK_BACKOFF_CEILING'),
        )
        self.gatherer = gatherer_class(config, self.document_stack)

        self.writer = WhooshIndexWriter(
            index_dir,
            gatherer_class.schema(),
            # How many segments are written before they are merged
            merge_factor=config.get_int('MERGE_FACTOR'),
            # How many documents are buffered before a segment is flushed
            max_buffered_docs=config.get_int('MAX_BUFFERED_DOCS'),
            use_compound=config.get_bool('USE_COMPOUND_DOCS'),
        )

        self.controller = IndexController(
            self.writer,
            self.document_stack,
            config.get_int('NUMBER_OF_THREADS'),
            batch_size=config.get_int('POP_BATCH_SIZE'),
            progress_start=config.get_int('PROGRESS_LOG_START'),
        )

    def run(self):
        """Run the gatherer and the controller; True once the index is closed."""
        gatherer_thread = threading.Thread(target=self.gatherer.run, name='gatherer')
        gatherer_thread.daemon = True
        controller_thread = threading.Thread(target=self.controller.run, name='index-controller')
        controller_thread.daemon = True

        gatherer_thread.start()
        controller_thread.start()

        join_thread(controller_thread)
        # The gatherer has normally finished by now. After a failed run it may
        # still be busy in a query.
        gatherer_thread.join(GATHERER_JOIN_TIMEOUT)
        if gatherer_thread.is_alive():
            logger.warning(f"Gatherer still running after {GATHERER_JOIN_TIMEOUT}s, not waiting for it")

        if self.gatherer.failed_subtasks:
            logger.warning(f"Index is missing data from: {', '.join(self.gatherer.failed_subtasks)}")
        return self.controller.state is ControllerState.CLOSED


def main(argv=None):
    args = parse_args(argv)

    try:
        config = IndexCfg()
        configure_logging(config.get('LOG_FILE'))
    except (ConfigError, OSError) as e:
        print(f"Error reading configuration: {e}", file=sys.stderr)
        return 1

    start = time.time()
    try:
        maker = IndexMaker(args.index_dir, args.index_code, config)
    except Exception as e:
        logger.error(f"Fatal error setting up the index: {e}")
        logger.error(traceback.format_exc())
        return 1

    try:
        if not maker.run():
            logger.error(f"Index at {args.index_dir} was not finalized")
            return 1
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, index left unfinished")
        return 1
    except Exception as e:
        logger.error(f"Fatal error while indexing: {e}")
        logger.error(traceback.format_exc())
        return 1

    time_report(start, time.time())
    return 0


if __name__ == "__main__":
    sys.exit(main())
