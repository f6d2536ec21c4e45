from functools import partial
from termcolor import colored
import argparse
import json
import logging
import sys

import validators

from .crawler import Crawler, CrawlerError, FetchClient, MAX_PARALLELISM, TIMEOUT, uniquify


def absolute_url(value: str) -> str:
    if not validators.url(value, simple_host=True):
        raise argparse.ArgumentTypeError(f"{value!r} is not an absolute url")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="webcrawl", description="Breadth-first crawl of a website")
    parser.add_argument("url", type=absolute_url, help="Absolute URL to start crawling from")
    parser.add_argument("--max-parallelism", type=int, default=MAX_PARALLELISM,
                        help="Pages fetched concurrently per batch")
    parser.add_argument("--timeout", type=float, default=TIMEOUT, help="Per request timeout in seconds")
    parser.add_argument("--output", help="Write one JSON line per crawled page to this file")
    parser.add_argument("--verbose", help="Log every discovered link", action='store_true')
    parser.add_argument("--no_logging", help="Disable logging", action='store_true')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.no_logging:
        logging.disable()
    elif args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        crawler = Crawler(max_parallelism=args.max_parallelism,
                          client_factory=partial(FetchClient, timeout=args.timeout))
        crawler.crawl(args.url)
    except CrawlerError as e:
        print(colored(f"Crawl aborted: {e}", 'red'), file=sys.stderr)
        return 1

    if args.output:
        path = uniquify(args.output)
        with open(path, 'w', encoding='utf-8') as f:
            for result in crawler.results:
                f.write(json.dumps(result.to_dict()) + "\n")
        logging.info(f"Wrote {len(crawler.results)} page results to {path}")

    print(crawler.get_crawling_stats())
    return 0


if __name__ == "__main__":
    sys.exit(main())
