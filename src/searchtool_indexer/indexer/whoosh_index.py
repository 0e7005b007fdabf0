"""
Whoosh index writer for the search tool indexer.

Wraps a Whoosh index so the indexer threads can share it: documents are
buffered into a segment writer, flushed as a new segment every
``max_buffered_docs`` documents, and segments are merged once there are
``merge_factor`` of them. ``optimize`` collapses the index into a single
segment.
"""
import logging
import os
import threading

from whoosh.index import create_in
from whoosh.reading import SegmentReader

logger = logging.getLogger(__name__)

WRITER_LIMIT_MB = 256


def merge_factor_policy(merge_factor):
    """Whoosh merge policy: merge every existing segment once there are merge_factor of them."""

    def merge_segments(writer, segments):
        if len(segments) < merge_factor:
            return segments
        logger.debug(f"Merging {len(segments)} segments")
        for segment in segments:
            reader = SegmentReader(writer.storage, writer.schema, segment)
            writer.add_reader(reader)
            reader.close()
        return []

    return merge_segments


class WhooshIndexWriter:
    """A thread safe writer for one freshly created Whoosh index."""

    def __init__(self, index_dir, schema, merge_factor=10, max_buffered_docs=50000, use_compound=True):
        if merge_factor < 2:
            raise ValueError(f"merge_factor must be at least 2, got {merge_factor}")
        if max_buffered_docs < 1:
            raise ValueError(f"max_buffered_docs must be at least 1, got {max_buffered_docs}")

        self.index_dir = index_dir
        self.schema = schema
        self.merge_factor = merge_factor
        self.max_buffered_docs = max_buffered_docs
        self.use_compound = use_compound
        self.merge_policy = merge_factor_policy(merge_factor)

        os.makedirs(self.index_dir, exist_ok=True)
        logger.info(f"Creating new index at {self.index_dir}")
        self.ix = create_in(self.index_dir, self.schema)

        self.buffered = 0
        self.flushes = 0
        self.closed = False
        self.lock = threading.Lock()
        self._writer = self._new_writer()

    def _new_writer(self):
        return self.ix.writer(limitmb=WRITER_LIMIT_MB, compound=self.use_compound)

    def add_document(self, doc):
        """Add one document (a mapping of field name to value) to the index."""
        with self.lock:
            if self.closed:
                raise RuntimeError("Index writer is closed")
            self._writer.add_document(**doc)
            self.buffered += 1
            if self.buffered >= self.max_buffered_docs:
                self._flush()

    def _flush(self):
        logger.debug(f"Flushing {self.buffered} buffered documents")
        self._writer.commit(mergetype=self.merge_policy)
        self.flushes += 1
        self.buffered = 0
        self._writer = self._new_writer()

    def optimize(self):
        """Commit what is buffered and merge the index into one segment."""
        with self.lock:
            if self.closed:
                raise RuntimeError("Index writer is closed")
            logger.info(f"Optimizing index at {self.index_dir}")
            self._writer.commit(optimize=True)
            self.buffered = 0
            self._writer = None

    def close(self):
        """Commit anything still buffered and close the index."""
        with self.lock:
            if self.closed:
                return
            if self._writer is not None:
                self._writer.commit(mergetype=self.merge_policy)
                self._writer = None
            self.ix.close()
            self.closed = True
            logger.info(f"Closed index at {self.index_dir}")

    def doc_count(self):
        return self.ix.doc_count()

    def segment_count(self):
        with self.ix.reader() as reader:
            return len(reader.leaf_readers())
