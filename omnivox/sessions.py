"""
Authenticated navigation through an institution's portal.

A session walks through three states:

    UNAUTHENTICATED --login()--> AUTHENTICATED --load_course_list()--> COURSE_LIST_LOADED

and then hands out one sub-page per course (documents or assignments).
Navigation failures for one course do not stop the others: the slot comes
back as a PageResult carrying the error instead of a page.
"""

from __future__ import annotations

import enum
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional
from urllib.parse import urljoin

from omnivox.adapters import clean_text
from omnivox.browser import Browser, Page
from omnivox.errors import AuthenticationError, NavigationError


logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    COURSE_LIST_LOADED = "course-list-loaded"


@dataclass(frozen=True)
class PageResult:
    """Outcome of navigating to one course's sub-page."""

    course_index: int
    page: Optional[Page] = None
    error: Optional[NavigationError] = None

    @property
    def ok(self) -> bool:
        return self.page is not None


class NavigationSession(ABC):
    """Interface every institution's navigation logic must implement."""

    institution = ""

    def __init__(self, browser: Optional[Browser] = None, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.browser = browser or Browser()
        self.clock = clock or datetime.now
        self.state = SessionState.UNAUTHENTICATED
        self.home_page: Optional[Page] = None
        self.course_list_page: Optional[Page] = None

    def _require_state(self, *states: SessionState) -> None:
        if self.state not in states:
            wanted = " or ".join(s.value for s in states)
            raise RuntimeError(f"{self.institution}: session is {self.state.value}, expected {wanted}")

    @abstractmethod
    def login(self, username: str, password: str) -> Page:
        """Log in and return the landing (home) page. Raises AuthenticationError."""

    @abstractmethod
    def load_course_list(self) -> Page:
        """Go from the home page to the course list. Raises NavigationError."""

    @abstractmethod
    def get_document_pages(self) -> List[PageResult]: ...

    @abstractmethod
    def get_assignment_pages(self) -> List[PageResult]: ...

    def request_calendar_view_change(self, home_page: Page) -> Page:
        """
        Switch the home page calendar to day view and return the refreshed page.

        Not every portal has this; the default only reports that.
        """
        raise NavigationError(f"{self.institution or type(self).__name__} cannot change the calendar view")

    def whats_new(self) -> List[str]:
        """Lines of the home page news widget (empty when there is none)."""
        return []


# ---------------------------------------------------------------------------
# Omnivox
# ---------------------------------------------------------------------------

LOGIN_URL_RE = re.compile(r"https://(.+?)\.omnivox\.ca/intr/Module/Identification/Login/Login\.aspx")


class OmnivoxSession(NavigationSession):
    """
    Login and navigation shared by every Omnivox portal.

    Institutions set LOGIN_URL and the selectors leading from the home page
    to the Léa course list and from each course card to its sub-pages.
    """

    LOGIN_URL = ""

    LOGIN_FORM_SELECTOR = "form[name='formLogin']"
    TOKEN_SELECTOR = "input[name='k']"

    COURSE_LIST_LINK_SELECTOR = ""
    COURSE_CARD_SELECTOR = ".card-panel.section-spacing"
    DOCUMENT_LINK_SELECTOR = ""
    ASSIGNMENT_LINK_SELECTOR = ""
    WHATS_NEW_SELECTOR = "#qdn-sans-bouton-wrapper > a > div:nth-of-type(2)"

    # the view toggle is not clickable without JavaScript, so it is posted directly
    CALENDAR_VIEW_ENDPOINT = "UI/WebParts/Intraflex_CalendrierScolaire/Webpart_Affichage_Selector.ashx"

    def __init__(
        self,
        browser: Optional[Browser] = None,
        login_url: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        super().__init__(browser=browser, clock=clock)
        url = login_url or self.LOGIN_URL
        if not LOGIN_URL_RE.fullmatch(url):
            raise ValueError(
                f"Invalid login url {url!r}; expected "
                "https://<name>.omnivox.ca/intr/Module/Identification/Login/Login.aspx"
            )
        self.login_url = url

    def _auth_error(self, message: str, stage: str) -> AuthenticationError:
        return AuthenticationError(message, institution=self.institution, stage=stage)

    def login(self, username: str, password: str) -> Page:
        try:
            login_page = self.browser.fetch(self.login_url)
        except NavigationError as exc:
            raise self._auth_error(str(exc), "login-page") from exc

        form = login_page.find_one(self.LOGIN_FORM_SELECTOR)
        if form is None:
            raise self._auth_error(f"No login form on {login_page.url}", "login-page")

        token = form.find_one(self.TOKEN_SELECTOR)
        if token is None or not token.attr("value"):
            raise self._auth_error("Login form has no session token", "token")

        payload = {
            "NoDA": username,
            "PasswordEtu": password,
            "TypeIdentification": "Etudiant",
            "TypeLogin": "PostSolutionLogin",
            "k": token.attr("value"),
        }
        try:
            home = self.browser.fetch(self.login_url, method="POST", form=payload)
        except NavigationError as exc:
            raise self._auth_error(str(exc), "submit") from exc

        if home.find_one(self.LOGIN_FORM_SELECTOR) is not None:
            raise self._auth_error("Login rejected (still on the login form)", "landing")

        logger.info("%s: logged in as %s", self.institution, username)
        self.home_page = home
        self.course_list_page = None
        self.state = SessionState.AUTHENTICATED
        return home

    def load_course_list(self) -> Page:
        self._require_state(SessionState.AUTHENTICATED, SessionState.COURSE_LIST_LOADED)
        assert self.home_page is not None

        link = self.home_page.find_one(self.COURSE_LIST_LINK_SELECTOR)
        if link is None:
            raise NavigationError(f"No course list link ({self.COURSE_LIST_LINK_SELECTOR}) on the home page")

        self.course_list_page = link.click()
        self.state = SessionState.COURSE_LIST_LOADED
        return self.course_list_page

    def _course_pages(self, link_selector: str, kind: str) -> List[PageResult]:
        self._require_state(SessionState.COURSE_LIST_LOADED)
        assert self.course_list_page is not None

        results: List[PageResult] = []
        for i, card in enumerate(self.course_list_page.find_all(self.COURSE_CARD_SELECTOR)):
            link = card.find_one(link_selector)
            try:
                if link is None:
                    raise NavigationError(f"Course #{i + 1} has no {kind} link")
                results.append(PageResult(i, page=link.click()))
            except NavigationError as exc:
                logger.warning("%s: %s page of course #%d unavailable: %s", self.institution, kind, i + 1, exc)
                results.append(PageResult(i, error=exc))
        return results

    def get_document_pages(self) -> List[PageResult]:
        return self._course_pages(self.DOCUMENT_LINK_SELECTOR, "document")

    def get_assignment_pages(self) -> List[PageResult]:
        return self._course_pages(self.ASSIGNMENT_LINK_SELECTOR, "assignment")

    def request_calendar_view_change(self, home_page: Page) -> Page:
        stamp = int(self.clock().timestamp() * 1000)
        url = f"{urljoin(home_page.url, self.CALENDAR_VIEW_ENDPOINT)}?t={stamp}"
        logger.info("%s: switching the calendar to day view", self.institution)

        self.browser.fetch(url, method="POST", form={"isModeVueParJour": "true"})
        refreshed = home_page.refresh()
        self.home_page = refreshed
        return refreshed

    def whats_new(self) -> List[str]:
        if self.home_page is None:
            return []
        return [clean_text(n.text()) for n in self.home_page.find_all(self.WHATS_NEW_SELECTOR)]


class ChamplainSession(OmnivoxSession):
    institution = "Champlain"

    LOGIN_URL = "https://champlaincollege-st-lambert.omnivox.ca/intr/Module/Identification/Login/Login.aspx"

    COURSE_LIST_LINK_SELECTOR = "#region-raccourcis-services-skytech > a:nth-of-type(1)"
    DOCUMENT_LINK_SELECTOR = ":scope > div:nth-of-type(2) > a:nth-of-type(1)"
    ASSIGNMENT_LINK_SELECTOR = ":scope > div:nth-of-type(2) > a:nth-of-type(2)"


class MaisonneuveSession(OmnivoxSession):
    """Léa is linked by URL rather than by position in the shortcut bar."""

    institution = "Maisonneuve"

    LOGIN_URL = "https://cmaisonneuve.omnivox.ca/intr/Module/Identification/Login/Login.aspx"

    COURSE_LIST_LINK_SELECTOR = "#region-raccourcis-services-skytech a[href*='lea' i]"
    DOCUMENT_LINK_SELECTOR = "a[href*='Documents' i]"
    ASSIGNMENT_LINK_SELECTOR = "a[href*='Travaux' i]"
