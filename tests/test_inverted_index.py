"""
Tests for the inverted index data structure and its searches.
"""
import json
import os
import tempfile
import unittest

from search_engine.indexer.inverted_index import InvertedIndex, SearchResult


def build_sample():
    """a.txt = "hello world", b.txt = "hello hello"."""
    index = InvertedIndex()
    index.add_all(["hello", "world"], "a.txt")
    index.add_all(["hello", "hello"], "b.txt")
    return index


class TestInvertedIndex(unittest.TestCase):
    def test_add_and_contains(self):
        index = InvertedIndex()
        index.add("hello", "a.txt", 3)

        self.assertTrue(index.contains("hello"))
        self.assertTrue(index.contains("hello", "a.txt"))
        self.assertTrue(index.contains("hello", "a.txt", 3))
        self.assertFalse(index.contains("hello", "a.txt", 1))
        self.assertFalse(index.contains("hello", "b.txt"))
        self.assertFalse(index.contains("world"))
        self.assertEqual(index.get_counts(), {"a.txt": 3})

    def test_views_of_missing_keys_are_empty(self):
        index = InvertedIndex()
        self.assertEqual(index.get_locations("missing"), ())
        self.assertEqual(index.get_positions("missing", "a.txt"), ())
        self.assertEqual(index.num_location("missing"), 0)
        self.assertEqual(index.num_position("missing", "a.txt"), 0)
        self.assertEqual(index.size(), 0)

    def test_positions_sorted_without_duplicates(self):
        index = InvertedIndex()
        for position in (5, 2, 9, 2):
            index.add("word", "doc", position)
        self.assertEqual(index.get_positions("word", "doc"), (2, 5, 9))
        self.assertEqual(index.num_position("word", "doc"), 3)

    def test_counts_never_decrease(self):
        index = InvertedIndex()
        index.add("a", "doc", 7)
        index.add("b", "doc", 2)
        self.assertEqual(index.get_counts()["doc"], 7)

    def test_counts_cover_every_position(self):
        index = build_sample()
        counts = index.get_counts()
        for word in index.get_words():
            for location in index.get_locations(word):
                for position in index.get_positions(word, location):
                    self.assertGreater(position, 0)
                    self.assertGreaterEqual(counts[location], position)

    def test_scenario_build(self):
        index = build_sample()
        self.assertEqual(index.as_dict(), {
            "hello": {"a.txt": [1], "b.txt": [1, 2]},
            "world": {"a.txt": [2]},
        })
        self.assertEqual(index.get_counts(), {"a.txt": 2, "b.txt": 2})
        self.assertEqual(index.get_words(), ("hello", "world"))
        self.assertEqual(index.size(), 2)
        self.assertEqual(index.num_location("hello"), 2)

    def test_exact_search(self):
        results = build_sample().exact_search(["hello"])
        self.assertEqual(results, [
            SearchResult("b.txt", 2, 1.0),
            SearchResult("a.txt", 1, 0.5),
        ])

    def test_partial_search_matches_prefix(self):
        index = build_sample()
        self.assertEqual(index.partial_search(["hel"]), index.exact_search(["hello"]))
        self.assertEqual(index.exact_search(["hel"]), [])

    def test_tie_broken_by_location_ignoring_case(self):
        results = build_sample().exact_search(["world", "hello"])
        self.assertEqual([r.where for r in results], ["a.txt", "b.txt"])
        self.assertEqual([r.count for r in results], [2, 2])
        self.assertEqual([r.score for r in results], [1.0, 1.0])

        index = InvertedIndex()
        index.add("x", "B.txt", 1)
        index.add("x", "a.txt", 1)
        self.assertEqual([r.where for r in index.exact_search(["x"])], ["a.txt", "B.txt"])

    def test_tie_broken_by_count(self):
        index = InvertedIndex()
        index.add_all(["x", "y"], "short")
        index.add_all(["x", "x", "y", "y"], "long")
        results = index.exact_search(["x"])
        self.assertEqual([r.where for r in results], ["long", "short"])
        self.assertEqual([r.score for r in results], [0.5, 0.5])

    def test_partial_search_counts_each_word_once(self):
        index = InvertedIndex()
        index.add_all(["hello", "help", "world"], "doc")
        results = index.partial_search(["hel", "hello"])
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0].count, 2)
        self.assertAlmostEqual(results[0].score, 2 / 3)

    def test_partial_search_stops_at_prefix_boundary(self):
        index = InvertedIndex()
        index.add_all(["apple", "applesauce", "apply", "banana"], "doc")
        results = index.partial_search(["appl"])
        self.assertEqual(results[0].count, 3)
        self.assertEqual(index.partial_search(["b"])[0].count, 1)
        self.assertEqual(index.partial_search(["c"]), [])

    def test_scores_within_bounds(self):
        index = build_sample()
        for queries in (["hello"], ["world"], ["h", "w"], ["hello", "world"]):
            for results in (index.exact_search(queries), index.partial_search(queries)):
                for result in results:
                    self.assertGreaterEqual(result.count, 1)
                    self.assertGreater(result.score, 0)
                    self.assertLessEqual(result.score, 1)

    def test_exact_locations_subset_of_partial(self):
        index = build_sample()
        for queries in (["hello"], ["wor", "world"], ["missing"]):
            exact = {r.where for r in index.exact_search(queries)}
            partial = {r.where for r in index.partial_search(queries)}
            self.assertTrue(exact <= partial)

    def test_search_dispatch(self):
        index = build_sample()
        self.assertEqual(index.search(["hel"], exact=True), [])
        self.assertEqual(len(index.search(["hel"], exact=False)), 2)

    def test_merge(self):
        shared = InvertedIndex()
        shared.add_all(["hello", "world"], "a.txt")

        local = InvertedIndex()
        local.add_all(["hello", "hello", "again"], "b.txt")
        local.add("hello", "a.txt", 5)

        shared.merge(local)
        self.assertEqual(shared.get_positions("hello", "a.txt"), (1, 5))
        self.assertEqual(shared.get_positions("hello", "b.txt"), (1, 2))
        self.assertEqual(shared.get_words(), ("again", "hello", "world"))
        self.assertEqual(shared.get_counts(), {"a.txt": 5, "b.txt": 3})

    def test_merge_does_not_share_positions(self):
        shared = InvertedIndex()
        local = InvertedIndex()
        local.add("hello", "a.txt", 1)
        shared.merge(local)

        local.add("hello", "a.txt", 2)
        self.assertEqual(shared.get_positions("hello", "a.txt"), (1,))

    def test_merge_empty_and_self(self):
        index = build_sample()
        before = index.as_dict()
        counts = index.get_counts()

        index.merge(InvertedIndex())
        self.assertEqual(index.as_dict(), before)

        index.merge(index)
        self.assertEqual(index.as_dict(), before)
        self.assertEqual(index.get_counts(), counts)

    def test_merge_order_does_not_matter(self):
        locals_ = []
        for name, words in (("a", ["x", "y", "x"]), ("b", ["y", "z"]), ("c", ["z", "x"])):
            local = InvertedIndex()
            local.add_all(words, name)
            locals_.append(local)

        first = InvertedIndex()
        second = InvertedIndex()
        for local in locals_:
            first.merge(local)
        for local in reversed(locals_):
            second.merge(local)

        self.assertEqual(first.as_dict(), second.as_dict())
        self.assertEqual(first.get_words(), second.get_words())
        self.assertEqual(first.get_counts(), second.get_counts())

    def test_json_round_trip_is_byte_identical(self):
        index = InvertedIndex()
        index.add_all(["caf\u00e9", "hello", "world", "hello"], "docs/A.txt")
        index.add_all(["world", "zebra"], "docs/b.txt", start=4)
        index.add_all(["hello"], "https://example.com/page?q=1")

        with tempfile.TemporaryDirectory() as tmp:
            first_index = os.path.join(tmp, "index1.json")
            first_counts = os.path.join(tmp, "counts1.json")
            index.to_json(first_index)
            index.counts_to_json(first_counts)

            with open(first_index, encoding="utf-8") as f:
                loaded = json.load(f)
            rebuilt = InvertedIndex()
            for word, locations in loaded.items():
                for location, positions in locations.items():
                    for position in positions:
                        rebuilt.add(word, location, position)

            second_index = os.path.join(tmp, "index2.json")
            second_counts = os.path.join(tmp, "counts2.json")
            rebuilt.to_json(second_index)
            rebuilt.counts_to_json(second_counts)

            with open(first_counts, encoding="utf-8") as f:
                self.assertEqual(json.load(f), rebuilt.get_counts())
            for first, second in ((first_index, second_index), (first_counts, second_counts)):
                with open(first, "rb") as a, open(second, "rb") as b:
                    self.assertEqual(a.read(), b.read())


if __name__ == "__main__":
    unittest.main()
