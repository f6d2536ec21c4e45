from dataclasses import dataclass, replace
from typing import Optional
from urllib.parse import urlsplit, urlunsplit, quote
import re

from .errors import InvalidURL

DEFAULT_PORTS = {"http": 80, "https": 443}
NON_CRAWLABLE = ("javascript", "mailto:", "tel:", "data:")

_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?"
_SLASHES = re.compile(r"/{2,}")


def remove_dot_segments(path: str) -> str:
    """Drop '.' segments and let '..' remove its parent (RFC 3986 5.2.4). Never climbs above the root."""
    segments = path.split("/")
    output = []
    for segment in segments:
        if segment == ".":
            continue
        if segment == "..":
            if len(output) > 1: output.pop()
            continue
        output.append(segment)
    # "/a/b/.." names the directory /a/
    if segments[-1] in (".", ".."):
        output.append("")
    return "/".join(output)


def _quote_path(path: str) -> str:
    return quote(remove_dot_segments(path), safe=_PATH_SAFE) or "/"


def _quote_query(query: str) -> str:
    return quote(query, safe=_QUERY_SAFE)


@dataclass(frozen=True)
class URL:
    """
    Absolute URL in canonical form.

    Two URLs naming the same resource compare (and hash) equal: scheme and
    host are lower-cased, default ports and fragments are dropped, the path
    is never empty and path/query are percent-encoded.
    """
    scheme: str
    netloc: str
    path: str = "/"
    query: str = ""

    @classmethod
    def parse(cls, text: str) -> "URL":
        if not isinstance(text, str):
            raise InvalidURL(f"Expected a string, got {type(text).__name__}")
        text = text.strip()
        try:
            parts = urlsplit(text)
            host = parts.hostname
            port = parts.port
        except ValueError as e:
            raise InvalidURL(f"Cannot parse {text!r}: {e}") from e
        if not parts.scheme or not host:
            raise InvalidURL(f"Not an absolute URL: {text!r}")

        scheme = parts.scheme.lower()
        if not host.isascii():
            try: host = host.encode("idna").decode("ascii")
            except UnicodeError as e:
                raise InvalidURL(f"Invalid host in {text!r}: {e}") from e
        if ":" in host: host = f"[{host}]"  # IPv6 literal

        netloc = host
        if port is not None and port != DEFAULT_PORTS.get(scheme):
            netloc = f"{host}:{port}"
        if "@" in parts.netloc:
            userinfo = parts.netloc.rpartition("@")[0]
            netloc = f"{userinfo}@{netloc}"

        return cls(scheme=scheme, netloc=netloc,
                   path=_quote_path(parts.path), query=_quote_query(parts.query))

    def with_path(self, path: str, query: str = "") -> "URL":
        """Copy of this URL with the path and query replaced."""
        return replace(self, path=_quote_path(path), query=_quote_query(query))

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query, ""))


def normalize_slashes(s: str) -> str:
    """Collapse every run of consecutive '/' into one. Idempotent."""
    return _SLASHES.sub("/", s)


def _parse_or_none(text: str) -> Optional[URL]:
    try: return URL.parse(text)
    except InvalidURL: return None


def _split_href(href: str) -> tuple[str, str]:
    path = href.split("#", 1)[0]
    path, _, query = path.partition("?")
    return path, query


def resolve(base: URL, href: str) -> Optional[URL]:
    """
    Turn a raw href found on the page at `base` into an absolute URL.

    Returns None for anything that is not a crawlable link (fragments,
    javascript/mailto/tel/data pseudo links, malformed absolute URLs,
    relative links that point back at the current path).
    """
    if href.startswith("#"):
        return None

    # protocol relative: //cdn.example.com/a.js
    if href.startswith("//"):
        return _parse_or_none(f"{base.scheme}:{href}")

    if href.startswith("https") or href.startswith("http://"):
        return _parse_or_none(href)

    # root relative: path replaced verbatim
    if href.startswith("/"):
        return base.with_path(*_split_href(href))

    if href.lower().startswith(NON_CRAWLABLE):
        return None

    if base.path.endswith(href):
        return None
    path, query = _split_href(href)
    return base.with_path(normalize_slashes(f"{base.path}/{path}"), query)
