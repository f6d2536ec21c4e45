from .crawler import Crawler, CrawlState, CrawlStats, PageResult, MAX_PARALLELISM
from .errors import CrawlerError, ConfigurationError, LockError, FetchError, InvalidURL
from .fetch import FetchClient, TIMEOUT
from .frontier import Frontier
from .url import URL, resolve, normalize_slashes
from .utils import extract_attribute, uniquify
from .worker import Worker

__all__ = [
    "Crawler", "CrawlState", "CrawlStats", "PageResult", "MAX_PARALLELISM",
    "CrawlerError", "ConfigurationError", "LockError", "FetchError", "InvalidURL",
    "FetchClient", "TIMEOUT", "Frontier", "URL", "resolve", "normalize_slashes",
    "extract_attribute", "uniquify", "Worker",
]
