from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from urllib import parse as urlparse

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

MAX_SUBLINKS = 5

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

_TEXT_CONTENT_TYPES = ("text/", "application/xhtml+xml", "application/xml")
_HIDDEN_TAGS = "script, style, noscript, template"


class CrawlError(RuntimeError):
    pass


@dataclass(frozen=True)
class CrawlResult:
    root_url: str
    root_text: str
    links: dict[str, str] = field(default_factory=dict)
    failed_links: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "main_url": self.root_url,
            "main_text": self.root_text,
            "sublinks": dict(self.links),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


class Crawler:
    """Depth-one crawler: the root page plus its first few outbound links.

    A sublink that cannot be fetched is recorded as an error string under its own
    key and never interrupts the rest of the crawl. Only a failure on the root
    page raises.
    """

    def __init__(self, *, timeout_seconds: int = 10, max_links: int = MAX_SUBLINKS) -> None:
        self._timeout_seconds = max(1, int(timeout_seconds))
        self._max_links = max(0, min(MAX_SUBLINKS, int(max_links)))

    def crawl(self, root_url: str) -> CrawlResult:
        root_url = (root_url or "").strip()
        if not root_url:
            raise CrawlError("url must not be empty")

        logger.info("Crawling %s", root_url)
        try:
            page = self._fetch_html(root_url)
        except Exception as exc:
            raise CrawlError(str(exc) or exc.__class__.__name__) from exc

        soup = BeautifulSoup(page, "html.parser")
        _strip_hidden(soup)
        hrefs = [
            anchor.get("href", "")
            for anchor in soup.select("a[href]")[: self._max_links]
        ]
        root_text = _visible_text(soup)

        links: dict[str, str] = {}
        failed: dict[str, bool] = {}
        for href in hrefs:
            link_url = urlparse.urljoin(root_url, href.strip())
            try:
                links[link_url] = _visible_text(
                    BeautifulSoup(self._fetch_html(link_url), "html.parser")
                )
                failed[link_url] = False
            except Exception as exc:
                logger.warning("Sublink %s failed: %s", link_url, exc)
                links[link_url] = f"Error fetching sublink: {exc}"
                failed[link_url] = True

        failed_links = tuple(url for url, is_failed in failed.items() if is_failed)
        logger.info(
            "Crawled %s: %s sublinks, %s failed", root_url, len(links), len(failed_links)
        )
        return CrawlResult(
            root_url=root_url,
            root_text=root_text,
            links=links,
            failed_links=failed_links,
        )

    def _fetch_html(self, url: str) -> str:
        parsed = urlparse.urlparse(url)
        if parsed.scheme.lower() not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"unsupported URL '{url}'")

        response = requests.get(
            url,
            headers={
                "User-Agent": DEFAULT_USER_AGENT,
                "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.5",
                "Accept-Language": "en-US,en;q=0.8",
            },
            timeout=self._timeout_seconds,
        )
        if not response.ok:
            raise RuntimeError(f"Request failed: {response.status_code} - {response.reason or 'error'}")

        content_type = (response.headers.get("Content-Type") or "").lower()
        if content_type and not content_type.startswith(_TEXT_CONTENT_TYPES):
            raise RuntimeError(f"unsupported content type '{content_type.split(';', 1)[0]}'")
        return response.text


def _strip_hidden(soup: BeautifulSoup) -> None:
    for tag in soup.select(_HIDDEN_TAGS):
        tag.decompose()


def _visible_text(soup: BeautifulSoup) -> str:
    _strip_hidden(soup)
    root = soup.body or soup
    text = root.get_text(" ")
    return re.sub(r"\s+", " ", text).strip()
