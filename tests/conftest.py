"""
Test configuration and fixtures for crawler tests

Pages are served by an in-memory FakeSite instead of the network.
"""

import logging
import threading
import time

import pytest

from webcrawl.crawler import FetchError, URL


def page(*hrefs):
    """HTML document linking to each of `hrefs`."""
    links = "".join(f'<a href="{href}">link</a>' for href in hrefs)
    return f"<html><head><title>t</title></head><body>{links}</body></html>"


class FakeSite:
    """Maps canonical URL strings to page bodies and records how it is fetched."""

    def __init__(self, pages, redirects=None, delay=0.0, errors=None):
        self.pages = pages
        self.redirects = redirects or {}
        self.errors = errors or {}
        self.delay = delay
        self.fetched = []
        self.active = 0
        self.peak = 0
        self.clients = 0
        self.closed = 0
        self._lock = threading.Lock()

    def client(self, *args, **kwargs):
        with self._lock:
            self.clients += 1
        return FakeClient(self)


class FakeClient:
    def __init__(self, site):
        self.site = site

    def fetch(self, url):
        site = self.site
        key = str(url)
        with site._lock:
            site.active += 1
            site.peak = max(site.peak, site.active)
            site.fetched.append(key)
        try:
            if site.delay:
                time.sleep(site.delay)
            if key in site.errors:
                raise site.errors[key]
            if key not in site.pages:
                raise FetchError(url, "404 Client Error: Not Found")
            body = site.pages[key]
            if isinstance(body, str):
                body = body.encode("utf-8")
            return URL.parse(site.redirects.get(key, key)), body
        finally:
            with site._lock:
                site.active -= 1

    def close(self):
        with self.site._lock:
            self.site.closed += 1


@pytest.fixture
def make_site():
    return FakeSite


@pytest.fixture
def restore_logging():
    yield
    logging.disable(logging.NOTSET)
