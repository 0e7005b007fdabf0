"""
Shared document stack for the search tool indexer.

The stack is the only state shared between the gatherer that produces
documents and the indexer threads that consume them. It also carries the
"gathering complete" flag, which is what tells the indexers that an empty
stack means there is no more work.
"""
import logging
import threading

logger = logging.getLogger(__name__)


class StackAbortedError(RuntimeError):
    """Raised by push once the stack has been aborted."""


class _EndOfStream:
    """Sentinel returned by pop once the stack is empty and complete."""

    def __repr__(self):
        return 'END_OF_STREAM'


END_OF_STREAM = _EndOfStream()


class SharedDocumentStack:
    """
    Thread safe hand-off of documents from gatherers to indexers.

    ``push`` never blocks and never rejects a document until the stack is
    aborted. Gatherers that want to throttle themselves call
    ``wait_for_capacity`` before pushing; the cap is advisory. ``pop`` and
    ``pop_many`` block while the stack is empty and gathering is still in
    progress, re-checking with an exponential backoff (``backoff_start``
    seconds, doubling up to ``backoff_ceiling``). A push or
    ``set_complete`` wakes waiting indexers straight away.

    ``abort`` is for when nobody is left to drain the stack: the waiting
    documents are dropped and any further push raises StackAbortedError.
    """

    def __init__(self, backoff_start=1.0, backoff_ceiling=16.0, capacity_poll=0.1):
        if backoff_start <= 0 or backoff_ceiling < backoff_start:
            raise ValueError(
                f"Invalid backoff window: start={backoff_start}, ceiling={backoff_ceiling}"
            )
        self.backoff_start = backoff_start
        self.backoff_ceiling = backoff_ceiling
        self.capacity_poll = capacity_poll

        self._stack = []
        self._gathering_complete = False
        self._aborted = False

        # Both conditions share one lock, so every state change is seen by
        # whichever side is waiting.
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)

    def push(self, doc):
        """Add a document to the stack."""
        with self._lock:
            if self._aborted:
                raise StackAbortedError("Document stack was aborted")
            self._stack.append(doc)
            self._not_empty.notify()

    def pop(self):
        """Take one document off the stack, or END_OF_STREAM when done."""
        docs = self.pop_many(1)
        if docs is END_OF_STREAM:
            return END_OF_STREAM
        return docs[0]

    def pop_many(self, amount):
        """
        Take up to ``amount`` documents off the stack.

        Returns a non-empty list of documents, or END_OF_STREAM once the
        stack is empty and gathering is complete. Never returns an empty
        list: while gathering is in progress an empty stack means "wait".
        """
        if amount < 1:
            raise ValueError(f"amount must be at least 1, got {amount}")

        wait_time = self.backoff_start
        with self._lock:
            while not self._stack:
                if self._gathering_complete:
                    return END_OF_STREAM
                self._not_empty.wait(wait_time)
                wait_time = min(wait_time * 2, self.backoff_ceiling)

            take = min(amount, len(self._stack))
            docs = [self._stack.pop() for _ in range(take)]
            self._not_full.notify_all()
            return docs

    def wait_for_capacity(self, cap):
        """
        Block while the stack holds more than ``cap`` documents, or until it
        is aborted.

        A cap of None or a negative number means no limit.
        """
        if cap is None or cap < 0:
            return
        with self._lock:
            while len(self._stack) > cap and not self._aborted:
                self._not_full.wait(self.capacity_poll)

    def size(self):
        """Number of documents currently waiting. Advisory only."""
        return len(self._stack)

    def is_empty(self):
        return not self._stack

    def is_complete(self):
        return self._gathering_complete

    def set_complete(self):
        """Mark gathering as finished. Safe to call more than once."""
        with self._lock:
            if not self._gathering_complete:
                logger.info(f"Gathering complete, {len(self._stack)} documents left on the stack")
            self._gathering_complete = True
            self._not_empty.notify_all()

    def abort(self):
        """
        Drop the waiting documents and refuse any more. Pending pops see
        END_OF_STREAM and a producer waiting for capacity is released.

        Returns the number of documents dropped.
        """
        with self._lock:
            dropped = len(self._stack)
            self._stack.clear()
            self._aborted = True
            self._gathering_complete = True
            self._not_empty.notify_all()
            self._not_full.notify_all()
        logger.warning(f"Document stack aborted, {dropped} documents dropped")
        return dropped

    def is_aborted(self):
        return self._aborted
