"""
Web crawler for the search engine.
Fetches HTML pages starting from a seed URL, follows their links up to a fixed
number of pages, and indexes the text of every page fetched.
"""
import logging
import threading
from urllib.parse import urljoin

import requests

from search_engine.common.config import FETCH_TIMEOUT, MAX_REDIRECTS, USER_AGENT
from search_engine.common.text_processor import list_stems, new_stemmer
from search_engine.common.utils import (
    get_links, normalize_url, strip_block_elements, strip_entities, strip_tags
)
from search_engine.indexer.inverted_index import InvertedIndex

logger = logging.getLogger(__name__)

REDIRECT_CODES = (301, 302, 303, 307, 308)


class HtmlFetcher:
    """Fetches HTML over HTTP(S), following a limited number of redirects."""
    def __init__(self, redirects=MAX_REDIRECTS, timeout=FETCH_TIMEOUT, user_agent=USER_AGENT):
        self.redirects = redirects
        self.timeout = timeout
        self.headers = {'User-Agent': user_agent}

    def fetch(self, url):
        """
        Fetch a page.

        Returns:
            The HTML body, or None if the final response is not a 200 HTML page
            or the request failed
        """
        redirects = self.redirects
        try:
            while True:
                response = requests.get(
                    url,
                    headers=self.headers,
                    timeout=self.timeout,
                    allow_redirects=False
                )

                location = response.headers.get('Location')
                if response.status_code in REDIRECT_CODES and location:
                    if redirects <= 0:
                        logger.warning(f"Too many redirects fetching {url}")
                        return None
                    redirects -= 1
                    url = urljoin(url, location)
                    logger.debug(f"Following redirect to {url}")
                    continue

                if response.status_code != 200:
                    logger.warning(f"Got status {response.status_code} for {url}")
                    return None

                content_type = response.headers.get('Content-Type', '')
                if not content_type.lower().startswith('text/html'):
                    logger.debug(f"Skipping non-HTML content at {url}: {content_type}")
                    return None

                return response.text
        except requests.RequestException as e:
            logger.warning(f"Error fetching {url}: {e}")
            return None


class WebCrawler:
    """
    Crawls the web from a seed URL into a shared inverted index.

    The set of visited URLs never grows beyond max_urls, which bounds the
    number of fetch tasks and guarantees the crawl terminates.
    """
    def __init__(self, index, queue, max_urls=1, fetcher=None):
        self.index = index
        self.queue = queue
        self.max_urls = max_urls
        self.fetcher = fetcher or HtmlFetcher()

        self.visited = set()
        self.lock = threading.Lock()

    def crawl(self, seed):
        """Crawl from the seed URL and wait until every admitted page is indexed."""
        url = normalize_url(seed)
        if not url:
            logger.error(f"Invalid seed URL: {seed}")
            return

        logger.info(f"Crawling from {url} (max {self.max_urls} URLs)")
        self._admit([url])
        self.queue.finish()
        logger.info(f"Finished crawl, visited {len(self.visited)} URLs")

    def get_visited(self):
        with self.lock:
            return sorted(self.visited)

    def _admit(self, urls):
        """Add unseen URLs to the visited set while there is room, scheduling each one."""
        admitted = []
        with self.lock:
            for url in urls:
                if len(self.visited) >= self.max_urls:
                    break
                if url not in self.visited:
                    self.visited.add(url)
                    admitted.append(url)

        for url in admitted:
            self.queue.execute(lambda url=url: self.process(url))

    def process(self, url):
        """Fetch a page, schedule its links, and index its text."""
        html = self.fetcher.fetch(url)
        if html is None:
            return

        html = strip_block_elements(html)
        self._admit(get_links(url, html))

        text = strip_entities(strip_tags(html))
        local = InvertedIndex()
        words = local.add_all(list_stems(text, new_stemmer()), url) - 1
        self.index.merge(local)
        logger.debug(f"Indexed {words} words from {url}")
