"""
Pretty JSON output for the search engine.
Tab-indented, key order taken from the (already sorted) input.
"""
import json


def _indent(level):
    return '\t' * level


def _quote(text):
    return json.dumps(text, ensure_ascii=False)


def format_score(score):
    """Format a score with exactly eight fractional digits."""
    return f"{score:.8f}"


def as_array(elements, level=0):
    """Format a collection of integers as an array."""
    lines = [_indent(level + 1) + str(element) for element in elements]
    if not lines:
        return "[\n" + _indent(level) + "]"
    return "[\n" + ",\n".join(lines) + "\n" + _indent(level) + "]"


def as_object(elements, level=0):
    """Format a mapping of string keys to integers as an object."""
    lines = [f"{_indent(level + 1)}{_quote(key)}: {value}" for key, value in elements.items()]
    if not lines:
        return "{\n" + _indent(level) + "}"
    return "{\n" + ",\n".join(lines) + "\n" + _indent(level) + "}"


def as_nested_array(elements, level=0):
    """Format a mapping of string keys to integer collections as an object of arrays."""
    lines = [
        f"{_indent(level + 1)}{_quote(key)}: {as_array(values, level + 1)}"
        for key, values in elements.items()
    ]
    if not lines:
        return "{\n" + _indent(level) + "}"
    return "{\n" + ",\n".join(lines) + "\n" + _indent(level) + "}"


def as_index(index, level=0):
    """
    Format an inverted index as nested objects.

    Args:
        index: Mapping word -> (mapping location -> positions), already in output order
        level: Starting indentation level

    Returns:
        JSON text of the form {"word": {"location": [1, 2], ...}, ...}
    """
    lines = [
        f"{_indent(level + 1)}{_quote(word)}: {as_nested_array(locations, level + 1)}"
        for word, locations in index.items()
    ]
    if not lines:
        return "{\n" + _indent(level) + "}"
    return "{\n" + ",\n".join(lines) + "\n" + _indent(level) + "}"


def as_result(result, level=0):
    """Format a single search result as an object with where, count and score."""
    inner = _indent(level + 1)
    return (
        _indent(level) + "{\n"
        + f"{inner}\"where\": {_quote(result.where)},\n"
        + f"{inner}\"count\": {result.count},\n"
        + f"{inner}\"score\": {format_score(result.score)}\n"
        + _indent(level) + "}"
    )


def as_result_list(results, level=0):
    """Format a list of search results as an array of objects."""
    items = [as_result(result, level + 1) for result in results]
    if not items:
        return "[\n" + _indent(level) + "]"
    return "[\n" + ",\n".join(items) + "\n" + _indent(level) + "]"


def as_search(results, level=0):
    """Format query results: {"query": [results...], ...}."""
    lines = [
        f"{_indent(level + 1)}{_quote(query)}: {as_result_list(result_list, level + 1)}"
        for query, result_list in results.items()
    ]
    if not lines:
        return "{\n" + _indent(level) + "}"
    return "{\n" + ",\n".join(lines) + "\n" + _indent(level) + "}"


def _write(text, path):
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)


def write_object(elements, path):
    _write(as_object(elements), path)


def write_index(index, path):
    _write(as_index(index), path)


def write_search(results, path):
    _write(as_search(results), path)
