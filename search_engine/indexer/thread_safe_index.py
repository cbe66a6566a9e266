"""
Thread-safe inverted index for the search engine.
Wraps every index operation in a shared reader/writer lock.
"""
from contextlib import contextmanager
import logging
import threading

from search_engine.indexer.inverted_index import InvertedIndex

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Simple reader/writer lock. Any number of readers or a single writer.

    Waiting writers block new readers so that a steady stream of searches
    cannot starve merges. The lock is not reentrant.
    """
    def __init__(self):
        self.condition = threading.Condition()
        self.readers = 0
        self.writer = False
        self.waiting_writers = 0

    def acquire_read(self):
        with self.condition:
            while self.writer or self.waiting_writers > 0:
                self.condition.wait()
            self.readers += 1

    def release_read(self):
        with self.condition:
            if self.readers <= 0:
                raise RuntimeError("Released a read lock that was not held")
            self.readers -= 1
            if self.readers == 0:
                self.condition.notify_all()

    def acquire_write(self):
        with self.condition:
            self.waiting_writers += 1
            try:
                while self.writer or self.readers > 0:
                    self.condition.wait()
            finally:
                self.waiting_writers -= 1
            self.writer = True

    def release_write(self):
        with self.condition:
            if not self.writer:
                raise RuntimeError("Released a write lock that was not held")
            self.writer = False
            self.condition.notify_all()

    @contextmanager
    def read_lock(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_lock(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class ThreadSafeInvertedIndex(InvertedIndex):
    """Inverted index safe to share between worker threads."""
    def __init__(self):
        super().__init__()
        self.lock = ReadWriteLock()

    def add(self, word, location, position):
        with self.lock.write_lock():
            super().add(word, location, position)

    def add_all(self, words, location, start=1):
        position = start
        with self.lock.write_lock():
            for word in words:
                super().add(word, location, position)
                position += 1
        return position

    def merge(self, other):
        """Fold an exclusively owned local index into this one."""
        with self.lock.write_lock():
            super().merge(other)
        logger.debug(f"Merged {len(other.counts)} locations into shared index")

    def contains(self, word, location=None, position=None):
        with self.lock.read_lock():
            return super().contains(word, location, position)

    def get_words(self):
        with self.lock.read_lock():
            return super().get_words()

    def get_locations(self, word):
        with self.lock.read_lock():
            return super().get_locations(word)

    def get_positions(self, word, location):
        with self.lock.read_lock():
            return super().get_positions(word, location)

    def get_counts(self):
        with self.lock.read_lock():
            return super().get_counts()

    def num_location(self, word):
        with self.lock.read_lock():
            return super().num_location(word)

    def num_position(self, word, location):
        with self.lock.read_lock():
            return super().num_position(word, location)

    def num_counts(self):
        with self.lock.read_lock():
            return super().num_counts()

    def size(self):
        with self.lock.read_lock():
            return super().size()

    def exact_search(self, queries):
        with self.lock.read_lock():
            return super().exact_search(queries)

    def partial_search(self, queries):
        with self.lock.read_lock():
            return super().partial_search(queries)

    def as_dict(self):
        with self.lock.read_lock():
            return super().as_dict()

    def to_json(self, path):
        with self.lock.read_lock():
            super().to_json(path)

    def counts_to_json(self, path):
        with self.lock.read_lock():
            super().counts_to_json(path)

    def __str__(self):
        with self.lock.read_lock():
            return super().__str__()
