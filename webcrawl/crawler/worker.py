from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from typing import Callable, Optional
import logging
import threading
import warnings

from .fetch import FetchClient
from .url import URL, resolve
from .utils import extract_attribute

warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

PARSER = "lxml"


class Worker:
    """Fetches one page and reports the absolute URLs it links to."""

    def __init__(self, id: int = 0, client_factory: Callable[[], FetchClient] = FetchClient, parser: str = PARSER):
        self.id = id
        self.parser = parser
        self.client = client_factory()
        self.final_url: Optional[URL] = None

    def run(self, url: URL) -> set[URL]:
        """Fetch `url` and return the set of resolved links. Raises FetchError."""
        thread_id = threading.current_thread().ident
        logging.info(f"[Thread {thread_id}]: Crawling {url}")

        final_url, body = self.client.fetch(url)
        self.final_url = final_url
        html = body.decode("utf-8", errors="replace")
        soup = BeautifulSoup(html, self.parser)

        urls = set()
        for href in extract_attribute(soup, "href"):
            href = href.strip()
            if href.startswith('#'): continue
            link = resolve(final_url, href)
            if link is None: continue
            logging.debug(f"To crawl {self.id}: {link}")
            urls.add(link)

        logging.debug(f"[Thread {thread_id}]: Finished worker {self.id}, {len(urls)} links from {final_url}")
        return urls

    def close(self):
        self.client.close()
