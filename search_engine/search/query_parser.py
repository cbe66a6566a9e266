"""
Query file processing for the search engine.
Reads one query per line, searches the index, and keeps one result list per normalized query.
"""
import logging
import threading

from search_engine.common import json_writer
from search_engine.common.text_processor import new_stemmer, unique_stems

logger = logging.getLogger(__name__)


def query_key(stems):
    """Join sorted unique stems into the key used for the result map."""
    return ' '.join(stems)


class QueryFileParser:
    """Runs the queries of a file one line at a time."""
    def __init__(self, index):
        self.index = index
        # query key -> sorted list of SearchResult
        self.results = {}

    def query_file(self, path, exact=False):
        """
        Search for every line of a UTF-8 query file.

        Raises OSError if the file cannot be read and UnicodeDecodeError if it
        is not UTF-8. Lines already scheduled are still waited for.
        """
        logger.info(f"Processing queries from {path} ({'exact' if exact else 'partial'} search)")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                for line in f:
                    self.parse_query_line(line, exact)
        finally:
            self._wait()
        logger.info(f"Processed queries from {path}, {self.num_queries()} unique queries")

    def _wait(self):
        pass

    def parse_query_line(self, line, exact=False):
        """Search for a single query line unless the same query was already run."""
        stems = unique_stems(line, new_stemmer())
        key = query_key(stems)
        if key and key not in self.results:
            self.results[key] = self.index.search(stems, exact)

    def num_queries(self):
        return len(self.results)

    def results_to_json(self, path):
        """Write all results as pretty JSON, ordered by query key."""
        json_writer.write_search(dict(sorted(self.results.items())), path)
        logger.info(f"Wrote results for {len(self.results)} queries to {path}")


class ThreadedQueryFileParser(QueryFileParser):
    """
    Runs each query line as a work queue task.

    The result map lock is held only to check and store results, never
    during the search itself. Each query key is searched at most once.
    """
    def __init__(self, index, queue):
        super().__init__(index)
        self.queue = queue
        self.lock = threading.Lock()
        # Keys whose search is running but not yet stored
        self.in_progress = set()

    def _wait(self):
        self.queue.finish()

    def parse_query_line(self, line, exact=False):
        self.queue.execute(lambda: self._search_line(line, exact))

    def _search_line(self, line, exact):
        stems = unique_stems(line, new_stemmer())
        key = query_key(stems)
        if not key:
            return

        with self.lock:
            if key in self.results or key in self.in_progress:
                return
            self.in_progress.add(key)

        try:
            results = self.index.search(stems, exact)
            with self.lock:
                self.results.setdefault(key, results)
        finally:
            with self.lock:
                self.in_progress.discard(key)

    def num_queries(self):
        with self.lock:
            return len(self.results)

    def results_to_json(self, path):
        with self.lock:
            super().results_to_json(path)
