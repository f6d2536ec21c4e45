class InvalidURL(ValueError):
    """Raised by URL.parse for text that is not an absolute, parseable URL."""


class CrawlerError(Exception):
    pass


class ConfigurationError(CrawlerError):
    """The seed URL is missing or unusable; nothing was crawled."""


class LockError(CrawlerError):
    """The shared frontier was left in an unknown state by a failed operation."""


class FetchError(CrawlerError):
    def __init__(self, url, reason):
        self.url = url
        self.reason = reason
        super().__init__(f"Cannot fetch {url}: {reason}")
