"""
Index builder for the search engine.
Walks a directory tree of text files and adds every stemmed word to an inverted index.
"""
import logging
import os

from search_engine.common.text_processor import list_file_stems
from search_engine.common.utils import is_text_file
from search_engine.indexer.inverted_index import InvertedIndex

logger = logging.getLogger(__name__)


def add_file(path, index):
    """
    Stem a UTF-8 text file line by line into an index.

    Positions count every word of the file, starting at 1 on the first word.
    The file path as given is used as the location.
    """
    stems = list_file_stems(path)
    index.add_all(stems, str(path))
    return len(stems)


class IndexBuilder:
    """Builds an index one file at a time on the calling thread."""
    def __init__(self, index):
        self.index = index
        self.files_seen = 0

    def build(self, path):
        """
        Index a text file, or every .txt/.text file under a directory.

        A file given directly is indexed whatever its extension.
        Raises FileNotFoundError if the path does not exist.
        """
        path = str(path)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Path {path} does not exist")

        logger.info(f"Building index from {path}")
        self.files_seen = 0
        try:
            if os.path.isdir(path):
                self._traverse(path)
            else:
                self._schedule(path)
        finally:
            # Files already scheduled must land before the caller moves on
            self._wait()
        logger.info(f"Finished building index from {path} ({self.files_seen} files)")

    def _traverse(self, directory):
        with os.scandir(directory) as listing:
            entries = sorted(listing, key=lambda entry: entry.name)

        for entry in entries:
            child = os.path.join(directory, entry.name)
            if entry.is_dir():
                try:
                    self._traverse(child)
                except OSError as e:
                    logger.warning(f"Skipping directory {child}: {e}")
            elif entry.is_file() and is_text_file(entry.name):
                self._schedule(child)

    def _schedule(self, path):
        self.files_seen += 1
        self.add_path(path)

    def _wait(self):
        pass

    def add_path(self, path):
        """
        Index one file through a private local index, then merge it.

        A file that cannot be read or decoded is logged and skipped, leaving
        the shared index untouched.
        """
        local = InvertedIndex()
        try:
            words = add_file(path, local)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping {path}: {e}")
            return

        self.index.merge(local)
        logger.debug(f"Indexed {words} words from {path}")


class ThreadedIndexBuilder(IndexBuilder):
    """
    Builds an index with one work queue task per file.

    Each task stems its file into a private local index and merges it into
    the shared index once, so the write lock is taken once per file.
    """
    def __init__(self, index, queue):
        super().__init__(index)
        self.queue = queue

    def _schedule(self, path):
        self.files_seen += 1
        self.queue.execute(lambda: self.add_path(path))

    def _wait(self):
        self.queue.finish()
