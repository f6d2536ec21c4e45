import logging
import random
import threading

import requests

from .errors import FetchError, InvalidURL
from .url import URL

TIMEOUT = 5

default_user_agents = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    " (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/14.1.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/92.0.4515.107 Safari/537.36",
]


class FetchClient:
    """
    Blocking HTTP(S) client owned by a single worker.

    `fetch` follows redirects and returns the final URL together with the
    raw body. Every transport problem (connection, TLS, timeout, HTTP error
    status) is reported as a FetchError.
    """

    def __init__(self, timeout: float = TIMEOUT, user_agents: list = default_user_agents):
        self.timeout = timeout
        self.user_agents = user_agents
        self.session = requests.Session()

    def get_random_headers(self):
        return {
            'User-Agent': random.choice(self.user_agents),
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        }

    def fetch(self, url: URL) -> tuple[URL, bytes]:
        thread_id = threading.current_thread().ident
        logging.debug(f"[Thread {thread_id}]: GET {url}")
        try:
            resp = self.session.get(str(url), headers=self.get_random_headers(), timeout=self.timeout)
            resp.raise_for_status()
            body = resp.content
        except requests.RequestException as e:
            raise FetchError(url, e) from e

        try: final_url = URL.parse(resp.url)
        except InvalidURL: final_url = url
        return final_url, body

    def close(self):
        self.session.close()
