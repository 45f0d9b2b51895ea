"""
Page fetching on top of requests + BeautifulSoup.

This is the narrow capability the sessions and adapters work with:

    browser.fetch(url, method, form)  -> Page
    page.find_one(selector)           -> Node | None
    page.find_all(selector)           -> list[Node]
    node.text() / node.click()
    page.refresh()                    -> Page

Selectors are CSS (BeautifulSoup's `select`). One Browser keeps one
requests.Session, so cookies from the login carry over to every page.
It is not meant to be shared between threads.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup, NavigableString, Tag

from omnivox.config import Settings
from omnivox.errors import NavigationError


logger = logging.getLogger(__name__)


class Node:
    """One element of a fetched page."""

    def __init__(self, tag: Tag, page: "Page") -> None:
        self.tag = tag
        self.page = page

    def find_one(self, selector: str) -> Optional["Node"]:
        found = self.tag.select_one(selector)
        return Node(found, self.page) if found is not None else None

    def find_all(self, selector: str) -> List["Node"]:
        return [Node(t, self.page) for t in self.tag.select(selector)]

    def text(self) -> str:
        """All text below this element."""
        return self.tag.get_text()

    def own_text(self) -> str:
        """Only the text nodes that are direct children of this element."""
        return "".join(str(c) for c in self.tag.children if isinstance(c, NavigableString))

    def attr(self, name: str, default: str = "") -> str:
        value = self.tag.get(name)
        if value is None:
            return default
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def click(self) -> "Page":
        """
        Follow the link of this element.

        Raises NavigationError when the element has no usable href.
        """
        href = self.attr("href").strip()
        if not href or href.startswith("javascript:") or href == "#":
            raise NavigationError(f"Element <{self.tag.name}> on {self.page.url} is not a link")
        return self.page.browser.fetch(urljoin(self.page.url, href))

    def __repr__(self) -> str:
        return f"Node(<{self.tag.name}>)"


class Page:
    """A fetched and parsed HTML page."""

    def __init__(
        self,
        browser: "Browser",
        url: str,
        html: str,
        method: str = "GET",
        form: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.browser = browser
        self.url = url
        self.html = html
        self.method = method
        self.form = dict(form) if form else None
        self.soup = BeautifulSoup(html, "html.parser")

    def find_one(self, selector: str) -> Optional[Node]:
        found = self.soup.select_one(selector)
        return Node(found, self) if found is not None else None

    def find_all(self, selector: str) -> List[Node]:
        return [Node(t, self) for t in self.soup.select(selector)]

    def refresh(self) -> "Page":
        """Re-fetch this page with a plain GET."""
        return self.browser.fetch(self.url)

    def __repr__(self) -> str:
        return f"Page({self.url!r})"


class Browser:
    """
    Fetches pages through one requests.Session.

    `session` can be any object with the `requests.Session.request`
    signature, which is how the tests plug in canned responses.
    """

    def __init__(self, settings: Optional[Settings] = None, session: Any = None) -> None:
        self.settings = settings or Settings()
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = self.settings.user_agent
        self.session = session

    def fetch(self, url: str, method: str = "GET", form: Optional[Mapping[str, str]] = None) -> Page:
        """
        Request `url` and return the parsed page.

        Any requests failure (connection, timeout, HTTP status) is raised
        as NavigationError.
        """
        method = method.upper()
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method,
                url,
                data=dict(form) if form else None,
                timeout=self.settings.timeout,
                verify=self.settings.verify_tls,
                allow_redirects=True,
            )
            resp.raise_for_status()
        except requests.Timeout as exc:
            raise NavigationError(f"Timed out after {self.settings.timeout}s: {method} {url}") from exc
        except requests.RequestException as exc:
            raise NavigationError(f"Request failed: {method} {url}: {exc}") from exc

        final_url = getattr(resp, "url", None) or url
        return Page(self, final_url, resp.text, method=method, form=form)
