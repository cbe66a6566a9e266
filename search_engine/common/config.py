"""
Configuration settings for the search engine.
"""

# Worker pool settings
DEFAULT_THREADS = 5  # used when -threads is bare or invalid

# Crawler settings
DEFAULT_MAX_URLS = 1  # seed only
MAX_REDIRECTS = 3
FETCH_TIMEOUT = 10  # seconds
USER_AGENT = "SearchEngineCrawler/1.0"

# Output files used when a flag is given without a value
DEFAULT_INDEX_PATH = "index.json"
DEFAULT_COUNTS_PATH = "counts.json"
DEFAULT_RESULTS_PATH = "results.json"

# Web interface settings
DEFAULT_PORT = 8080
SERVER_TITLE = "Search Engine"

# Text files eligible for indexing when traversing a directory
TEXT_EXTENSIONS = ('.txt', '.text')

# Logging
LOG_FORMAT = '%(asctime)s [%(levelname)s] [Search] %(message)s'
LOG_FILE = 'search_engine.log'
