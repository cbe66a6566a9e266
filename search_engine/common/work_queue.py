"""
Work queue for the search engine.
A fixed pool of worker threads consuming an unbounded FIFO of tasks.
"""
from collections import deque
import logging
import threading
import traceback

from search_engine.common.config import DEFAULT_THREADS

logger = logging.getLogger(__name__)


class WorkQueue:
    """
    Fixed-size worker pool with a pending-work barrier.

    finish() waits for every submitted task (including tasks submitted by
    other tasks) to complete but keeps the workers alive, so the queue can be
    reused for the next phase. shutdown() stops the workers; join() does both.
    """
    def __init__(self, threads=DEFAULT_THREADS):
        if threads < 1:
            raise ValueError(f"Work queue needs at least one thread, got {threads}")

        self.queue = deque()
        self.pending = 0
        self.shutdown_requested = False

        # One monitor guards the queue, the pending counter and the shutdown flag
        self.condition = threading.Condition()

        self.workers = []
        for i in range(threads):
            worker = threading.Thread(target=self._run_worker, name=f"worker-{i}")
            worker.daemon = True
            self.workers.append(worker)
            worker.start()
        logger.debug(f"Started work queue with {threads} workers")

    def execute(self, task):
        """Add a task to the queue. A waiting worker will pick it up."""
        with self.condition:
            if self.shutdown_requested:
                logger.warning("Work queue is shut down, dropping task")
                return
            self.pending += 1
            self.queue.append(task)
            self.condition.notify_all()

    def finish(self):
        """Block until all pending work is done. Workers keep running."""
        with self.condition:
            while self.pending > 0:
                self.condition.wait()

    def shutdown(self):
        """Ask the workers to exit. Tasks in progress are not interrupted."""
        with self.condition:
            self.shutdown_requested = True
            self.condition.notify_all()
        logger.debug("Work queue shutdown requested")

    def join(self):
        """Wait for pending work, then shut the workers down."""
        self.finish()
        self.shutdown()

    def size(self):
        """Return the number of worker threads."""
        return len(self.workers)

    def _run_worker(self):
        """Wait for work, run it, and exit once shutdown is requested."""
        while True:
            with self.condition:
                while not self.queue and not self.shutdown_requested:
                    self.condition.wait()

                if self.shutdown_requested:
                    break
                task = self.queue.popleft()

            try:
                task()
            except Exception as e:
                # Keep the worker alive; the task is counted as done either way
                logger.error(f"Work queue task failed: {e}")
                logger.error(traceback.format_exc())
            finally:
                self._decrement_pending()

    def _decrement_pending(self):
        with self.condition:
            self.pending -= 1
            if self.pending == 0:
                self.condition.notify_all()
