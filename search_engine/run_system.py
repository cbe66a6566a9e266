"""
Main script to run the search engine.
Builds the index from files or a web crawl, writes the requested outputs,
answers a query file, and optionally serves the index over HTTP.
"""
import argparse
import logging
import sys
import time
import traceback

from search_engine.common.config import (
    DEFAULT_COUNTS_PATH, DEFAULT_INDEX_PATH, DEFAULT_MAX_URLS, DEFAULT_PORT,
    DEFAULT_RESULTS_PATH, DEFAULT_THREADS, LOG_FILE, LOG_FORMAT
)
from search_engine.common.utils import get_memory_usage
from search_engine.common.work_queue import WorkQueue
from search_engine.crawler.web_crawler import WebCrawler
from search_engine.indexer.index_builder import IndexBuilder, ThreadedIndexBuilder
from search_engine.indexer.inverted_index import InvertedIndex
from search_engine.indexer.thread_safe_index import ThreadSafeInvertedIndex
from search_engine.search.query_parser import QueryFileParser, ThreadedQueryFileParser
from search_engine.search.search import start_web_interface

logger = logging.getLogger(__name__)


def setup_logging():
    """Configure logging for the whole program."""
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(LOG_FILE)
        ]
    )


def build_parser():
    """Create the argument parser. Every flag is optional and may be given without a value."""
    parser = argparse.ArgumentParser(
        description='Build and search an inverted index of text files or web pages',
        allow_abbrev=False
    )
    parser.add_argument('-path', nargs='?', help='File or directory of text files to index')
    parser.add_argument('-index', nargs='?', const=DEFAULT_INDEX_PATH, help='Write the index as JSON')
    parser.add_argument('-counts', nargs='?', const=DEFAULT_COUNTS_PATH, help='Write word counts as JSON')
    parser.add_argument('-queries', nargs='?', help='File with one query per line')
    parser.add_argument('-exact', action='store_true', help='Use exact search instead of partial search')
    parser.add_argument('-results', nargs='?', const=DEFAULT_RESULTS_PATH, help='Write search results as JSON')
    parser.add_argument('-threads', nargs='?', const=str(DEFAULT_THREADS), help='Number of worker threads')
    parser.add_argument('-url', nargs='?', help='Seed URL to crawl')
    parser.add_argument('-max', nargs='?', const=str(DEFAULT_MAX_URLS), help='Maximum number of URLs to crawl')
    parser.add_argument('-server', nargs='?', const=str(DEFAULT_PORT), help='Serve the index on this port')
    return parser


def parse_positive_int(value, default):
    """Parse a flag value as a positive integer, falling back to the default."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def main(argv=None):
    """Run the search engine. Returns the process exit code."""
    start_time = time.time()
    setup_logging()

    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    if unknown:
        logger.warning(f"Ignoring unrecognized arguments: {' '.join(unknown)}")

    queue = None
    threaded = args.threads is not None or args.url is not None or args.server is not None

    if threaded:
        threads = parse_positive_int(args.threads, DEFAULT_THREADS)
        logger.info(f"Running with {threads} worker threads")
        queue = WorkQueue(threads)
        index = ThreadSafeInvertedIndex()
        builder = ThreadedIndexBuilder(index, queue)
        query_parser = ThreadedQueryFileParser(index, queue)
    else:
        index = InvertedIndex()
        builder = IndexBuilder(index)
        query_parser = QueryFileParser(index)

    try:
        if args.url:
            max_urls = parse_positive_int(args.max, DEFAULT_MAX_URLS)
            crawler = WebCrawler(index, queue, max_urls)
            crawler.crawl(args.url)

        if args.path:
            try:
                builder.build(args.path)
            except (OSError, UnicodeDecodeError) as e:
                print(f"Unable to build the inverted index from path {args.path}")
                logger.error(f"Error building index from {args.path}: {e}")

        if args.index:
            try:
                index.to_json(args.index)
            except OSError as e:
                print(f"Unable to write the inverted index to {args.index}")
                logger.error(f"Error writing index to {args.index}: {e}")

        if args.counts:
            try:
                index.counts_to_json(args.counts)
            except OSError as e:
                print(f"Unable to write the word counts to {args.counts}")
                logger.error(f"Error writing counts to {args.counts}: {e}")

        if args.queries:
            try:
                query_parser.query_file(args.queries, args.exact)
            except (OSError, UnicodeDecodeError) as e:
                print(f"Unable to search the queries from {args.queries}")
                logger.error(f"Error reading queries from {args.queries}: {e}")

        if args.results:
            try:
                query_parser.results_to_json(args.results)
            except OSError as e:
                print(f"Unable to write the search results to {args.results}")
                logger.error(f"Error writing results to {args.results}: {e}")

        if args.server is not None:
            port = parse_positive_int(args.server, DEFAULT_PORT)
            try:
                start_web_interface(index, port)
            except KeyboardInterrupt:
                logger.info("Received keyboard interrupt, stopping web interface")
            except OSError as e:
                print(f"Unable to start the web interface on port {port}")
                logger.error(f"Error starting web interface: {e}")
                logger.error(traceback.format_exc())
    finally:
        if queue is not None:
            queue.shutdown()

    logger.info(f"Memory usage: {get_memory_usage():.1f}MB")
    elapsed = time.time() - start_time
    print(f"Elapsed: {elapsed:f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
