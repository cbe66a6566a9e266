"""
Inverted index for the search engine.
Maps each stemmed word to the locations it appears in and the positions within each location.
"""
import bisect
import logging

from search_engine.common import json_writer

logger = logging.getLogger(__name__)


class SearchResult:
    """A single search hit: where it was found, how often and how relevant."""
    def __init__(self, where, count=0, score=0.0):
        self.where = where
        self.count = count
        self.score = score

    def sort_key(self):
        # Score descending, then count descending, then location ignoring case
        return (-self.score, -self.count, self.where.lower(), self.where)

    def __lt__(self, other):
        return self.sort_key() < other.sort_key()

    def __eq__(self, other):
        if not isinstance(other, SearchResult):
            return NotImplemented
        return (self.where, self.count, self.score) == (other.where, other.count, other.score)

    def to_dict(self):
        return {'where': self.where, 'count': self.count, 'score': self.score}

    def __repr__(self):
        return f"SearchResult(where={self.where!r}, count={self.count}, score={self.score})"


class InvertedIndex:
    """
    Multi-position inverted index with a per-location word count register.

    The count register holds the largest position seen for each location,
    which is the number of words in that location.
    """
    def __init__(self):
        # word -> {location -> set of positions}
        self.index = {}
        # location -> word count
        self.counts = {}
        # Sorted list of every word in the index, for prefix search
        self.words = []

    def add(self, word, location, position):
        """Add a word found at the given 1-based position of a location."""
        locations = self.index.get(word)
        if locations is None:
            locations = self.index[word] = {}
            bisect.insort(self.words, word)

        positions = locations.get(location)
        if positions is None:
            positions = locations[location] = set()
        positions.add(position)

        if self.counts.get(location, 0) < position:
            self.counts[location] = position

    def add_all(self, words, location, start=1):
        """
        Add words in order, numbering positions from start.

        Returns:
            The position that the next word of this location would take
        """
        position = start
        for word in words:
            self.add(word, location, position)
            position += 1
        return position

    def merge(self, other):
        """Fold another index into this one. Positions are copied, never shared."""
        if other is self:
            return

        for word, other_locations in other.index.items():
            locations = self.index.get(word)
            if locations is None:
                locations = self.index[word] = {}
                bisect.insort(self.words, word)

            for location, other_positions in other_locations.items():
                positions = locations.get(location)
                if positions is None:
                    locations[location] = set(other_positions)
                else:
                    positions.update(other_positions)

        for location, count in other.counts.items():
            if self.counts.get(location, 0) < count:
                self.counts[location] = count

    def contains(self, word, location=None, position=None):
        """Check for a word, a word at a location, or a word at a position of a location."""
        locations = self.index.get(word)
        if locations is None:
            return False
        if location is None:
            return True

        positions = locations.get(location)
        if positions is None:
            return False
        if position is None:
            return True
        return position in positions

    def get_words(self):
        return tuple(self.words)

    def get_locations(self, word):
        """Return the sorted locations of a word, or an empty tuple."""
        return tuple(sorted(self.index.get(word, ())))

    def get_positions(self, word, location):
        """Return the sorted positions of a word at a location, or an empty tuple."""
        return tuple(sorted(self.index.get(word, {}).get(location, ())))

    def get_counts(self):
        """Return a sorted copy of the count register."""
        return dict(sorted(self.counts.items()))

    def num_location(self, word):
        return len(self.index.get(word, ()))

    def num_position(self, word, location):
        return len(self.index.get(word, {}).get(location, ()))

    def num_counts(self):
        return len(self.counts)

    def size(self):
        """Return the number of distinct words."""
        return len(self.index)

    def exact_search(self, queries):
        """Search for locations containing any of the query stems exactly."""
        matched = sorted(query for query in set(queries) if query in self.index)
        return self._score(matched)

    def partial_search(self, queries):
        """Search for locations containing any word starting with one of the query stems."""
        matched = set()
        for query in set(queries):
            i = bisect.bisect_left(self.words, query)
            while i < len(self.words) and self.words[i].startswith(query):
                matched.add(self.words[i])
                i += 1
        return self._score(sorted(matched))

    def search(self, queries, exact=False):
        """Run an exact or partial search."""
        if exact:
            return self.exact_search(queries)
        return self.partial_search(queries)

    def _score(self, words):
        # Each matched word contributes once, so count never exceeds the word count
        totals = {}
        for word in words:
            for location, positions in self.index[word].items():
                result = totals.get(location)
                if result is None:
                    result = totals[location] = SearchResult(location)
                result.count += len(positions)

        for location, result in totals.items():
            result.score = result.count / self.counts[location]

        return sorted(totals.values())

    def as_dict(self):
        """Return the index as nested sorted dicts and lists."""
        return self._ordered_index()

    def _ordered_index(self):
        return {
            word: {
                location: sorted(positions)
                for location, positions in sorted(self.index[word].items())
            }
            for word in self.words
        }

    def to_json(self, path):
        """Write the index as pretty JSON."""
        json_writer.write_index(self._ordered_index(), path)
        logger.info(f"Wrote index with {len(self.index)} words to {path}")

    def counts_to_json(self, path):
        """Write the count register as pretty JSON."""
        json_writer.write_object(dict(sorted(self.counts.items())), path)
        logger.info(f"Wrote counts for {len(self.counts)} locations to {path}")

    def __str__(self):
        return f"InvertedIndex(words={len(self.index)}, locations={len(self.counts)})"
