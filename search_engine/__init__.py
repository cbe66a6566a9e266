"""
Multi-position inverted index search engine.
Indexes text files or crawled web pages and answers ranked queries.
"""
from .indexer.inverted_index import InvertedIndex, SearchResult
from .indexer.thread_safe_index import ThreadSafeInvertedIndex
from .common.work_queue import WorkQueue

__all__ = [
    "InvertedIndex",
    "SearchResult",
    "ThreadSafeInvertedIndex",
    "WorkQueue",
]
