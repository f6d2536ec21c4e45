from concurrent.futures import as_completed
from dataclasses import dataclass, asdict
from enum import Enum
from termcolor import colored
from typing import Callable, Optional, Union
import logging

from .errors import ConfigurationError, FetchError, InvalidURL
from .fetch import FetchClient
from .frontier import Frontier
from .url import URL
from .utils import TrackingThreadPoolExecutor
from .worker import Worker


logging.basicConfig(
    format='%(asctime)s %(levelname)s: %(message)s',
    level=logging.INFO
)

MAX_PARALLELISM = 10
CRAWLABLE_SCHEMES = ("http", "https")


class CrawlState(Enum):
    IDLE = "idle"
    SEEDING = "seeding"
    BATCH_RUNNING = "batch_running"
    BATCH_MERGING = "batch_merging"
    DONE = "done"


@dataclass
class PageResult:
    url: str
    final_url: Optional[str] = None
    links: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CrawlStats:
    batches: int = 0
    pages_fetched: int = 0
    fetch_failures: int = 0
    discovered: int = 0
    frontier: int = 0


class Crawler:
    """
    Breadth-first crawler that works through the frontier in batches.

    Each round drains at most `max_parallelism` URLs, crawls all of them
    concurrently (one Worker with its own fetch client per URL), waits for
    the whole batch and only then merges the discovered links back into
    the frontier. The crawl ends when the frontier is empty after a merge.
    """

    def __init__(self,
                 max_parallelism: int = MAX_PARALLELISM,
                 client_factory: Callable[[], FetchClient] = FetchClient):
        if max_parallelism < 1:
            raise ConfigurationError(f"max_parallelism must be at least 1, got {max_parallelism}")
        self.max_parallelism = max_parallelism
        self.client_factory = client_factory

        self.frontier = Frontier()
        self.state = CrawlState.IDLE
        self.stats = CrawlStats()
        self.results: list[PageResult] = []
        self.peak_active = 0

    def _validate_seed(self, seed: Union[URL, str, None]) -> URL:
        if seed is None or seed == "":
            raise ConfigurationError("No seed URL given")
        if isinstance(seed, URL):
            url = seed
        else:
            try: url = URL.parse(seed)
            except InvalidURL as e:
                raise ConfigurationError(f"The argument is not an absolute url: {e}") from e
        if url.scheme not in CRAWLABLE_SCHEMES:
            raise ConfigurationError(f"Unsupported scheme {url.scheme!r} in seed {url}")
        return url

    def crawl(self, seed: Union[URL, str]) -> CrawlStats:
        """Crawl everything reachable from `seed`. Raises ConfigurationError or LockError."""
        self.frontier = Frontier()
        self.stats = CrawlStats()
        self.results = []
        self.peak_active = 0

        self.state = CrawlState.SEEDING
        try:
            seed = self._validate_seed(seed)
        except ConfigurationError:
            self.state = CrawlState.IDLE
            raise
        self.frontier.try_add(seed)
        logging.info(colored(f"Starting crawl from {seed} with up to {self.max_parallelism} workers", 'green'))

        with TrackingThreadPoolExecutor(max_workers=self.max_parallelism,
                                        thread_name_prefix="crawl-worker") as executor:
            try:
                while not self.frontier.is_empty():
                    number = min(len(self.frontier), self.max_parallelism)
                    batch = self.frontier.drain_batch(number)

                    self.state = CrawlState.BATCH_RUNNING
                    outcomes = self._run_batch(executor, batch)

                    self.state = CrawlState.BATCH_MERGING
                    added = self._merge(outcomes)
                    self.stats.batches += 1
                    logging.info(colored(f'Batch {self.stats.batches}: crawled {len(batch)}, '
                                         f'added {added} new URLs, {self.get_crawling_stats()}', 'green'))
            finally:
                self.peak_active = executor.peak_count

        self.state = CrawlState.DONE
        self.stats.discovered = self.frontier.visited_count()
        self.stats.frontier = len(self.frontier)
        logging.info(f"Crawl finished. Final stats: {asdict(self.stats)}")
        return self.stats

    def _run_batch(self, executor: TrackingThreadPoolExecutor, batch: list[URL]):
        """Run one worker per URL and collect (PageResult, links) in completion order."""
        futures = [executor.submit(self._crawl_one, id, url) for id, url in enumerate(batch)]
        return [future.result() for future in as_completed(futures)]

    def _crawl_one(self, id: int, url: URL) -> tuple[PageResult, set[URL]]:
        worker = None
        try:
            worker = Worker(id, client_factory=self.client_factory)
            links = worker.run(url)
        except FetchError as e:
            logging.warning(colored(f"Error crawling {url}: {e.reason}", 'red'))
            return PageResult(url=str(url), error=str(e.reason)), set()
        except Exception as e:
            logging.exception(f"Unexpected error crawling {url}")
            return PageResult(url=str(url), error=repr(e)), set()
        finally:
            if worker is not None: worker.close()
        return PageResult(url=str(url), final_url=str(worker.final_url), links=len(links)), links

    def _merge(self, outcomes) -> int:
        added = 0
        for result, links in outcomes:
            self.results.append(result)
            if result.ok: self.stats.pages_fetched += 1
            else: self.stats.fetch_failures += 1
            for link in links:
                if self.frontier.try_add(link): added += 1
        return added

    def get_crawling_stats(self) -> dict:
        """Get statistics about the crawling session."""
        stats = asdict(self.stats)
        stats['discovered'] = self.frontier.visited_count()
        stats['frontier'] = len(self.frontier)
        return stats
