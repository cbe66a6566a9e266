"""
Utility functions for the search engine.
HTML cleaning, link extraction and small helpers shared by the crawler and driver.
"""
from urllib.parse import urljoin, urlparse, urlunparse
import re

from bs4 import BeautifulSoup
import psutil

from search_engine.common.config import TEXT_EXTENSIONS

BLOCK_ELEMENTS = ('head', 'style', 'script', 'noscript', 'svg')

COMMENT_REGEX = re.compile(r'<!--.*?-->', re.DOTALL)
TAG_REGEX = re.compile(r'<[^<>]*>?')
ENTITY_REGEX = re.compile(r'&[^\s;&]+;')


def _blank(match):
    # Keep line structure when a removed block spans lines
    text = match.group(0)
    return ' ' if '\n' in text or '\r' in text else ''


def strip_comments(html):
    """Remove HTML comments."""
    return COMMENT_REGEX.sub(_blank, html)


def strip_element(html, name):
    """Remove every <name>...</name> element, including its content."""
    regex = re.compile(r'<' + name + r'\b.+?' + name + r'\s*?>', re.IGNORECASE | re.DOTALL | re.MULTILINE)
    return regex.sub(_blank, html)


def strip_block_elements(html):
    """Remove comments and the head, style, script, noscript and svg elements."""
    html = strip_comments(html)
    for name in BLOCK_ELEMENTS:
        html = strip_element(html, name)
    return html


def strip_tags(html):
    """Remove any remaining HTML tags."""
    return TAG_REGEX.sub('', html)


def strip_entities(html):
    """Remove HTML entities such as &amp; or &#169;."""
    return ENTITY_REGEX.sub('', html)


def normalize_url(url):
    """Normalize a URL by removing its fragment. Returns None for non-HTTP URLs."""
    if not url:
        return None

    parsed = urlparse(url.strip())
    if parsed.scheme.lower() not in ('http', 'https') or not parsed.netloc:
        return None

    # Remove fragment
    parsed = parsed._replace(fragment='')
    return urlunparse(parsed)


def get_links(base_url, html):
    """
    Extract absolute links from anchor href attributes.

    Args:
        base_url: URL the HTML was fetched from, used to resolve relative links
        html: HTML with block elements already removed

    Returns:
        List of normalized absolute URLs in document order, without duplicates
    """
    soup = BeautifulSoup(html, 'html.parser')
    links = []
    seen = set()
    for anchor in soup.find_all('a', href=True):
        url = normalize_url(urljoin(base_url, anchor['href']))
        if url and url not in seen:
            seen.add(url)
            links.append(url)
    return links


def is_text_file(path):
    """Check whether a path names a .txt or .text file, ignoring case."""
    return str(path).lower().endswith(TEXT_EXTENSIONS)


def get_memory_usage():
    """Get current memory usage of the process in MB."""
    try:
        process = psutil.Process()
        return process.memory_info().rss / 1024 / 1024
    except psutil.Error:
        return 0
