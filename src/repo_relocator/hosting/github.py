"""GitHub REST API client for repository discovery and commit listing."""

import threading
from collections.abc import Callable
from typing import Any

import requests

from repo_relocator.logging import get_logger
from repo_relocator.models import CommitFetchResult

logger = get_logger("github")

DEFAULT_API_URL = "https://api.github.com"
PER_PAGE = 100


class GitHubError(Exception):
    """Raised when the GitHub API cannot be queried."""


def select_clone_url(item: dict[str, Any], protocol: str) -> str:
    """Pick the clone URL of a repository item for the given protocol."""
    if protocol == "ssh":
        return item["ssh_url"]
    return item["clone_url"]


class GitHubClient:
    """Reads repositories and commit histories of one GitHub account.

    Requests are sent anonymously when no token is given, in which case
    private repositories are not visible. Commit histories are fetched from
    worker threads, so every thread gets its own session from
    session_factory; requests does not guarantee a Session is thread-safe.
    """

    def __init__(
        self,
        username: str,
        token: str | None = None,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: int = 30,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ) -> None:
        self._username = username
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout_seconds
        self._session_factory = session_factory
        self._headers = {"Accept": "application/vnd.github+json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._local = threading.local()

    @property
    def username(self) -> str:
        return self._username

    @property
    def session(self) -> requests.Session:
        """The calling thread's session, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._session_factory()
            session.headers.update(self._headers)
            self._local.session = session
        return session

    def _get_pages(self, url: str, params: dict[str, Any] | None = None) -> list[Any]:
        """GET every page of a paginated endpoint, following Link headers.

        Raises:
            requests.RequestException: On transport or HTTP errors
        """
        session = self.session
        pages = []
        next_url: str | None = url
        while next_url:
            response = session.get(next_url, params=params, timeout=self._timeout)
            response.raise_for_status()
            pages.append(response.json())
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            params = None
        return pages

    def list_repositories(self) -> list[dict[str, Any]]:
        """List the account's non-archived repositories.

        Raises:
            GitHubError: If the search request fails or returns an error payload
        """
        url = f"{self._api_url}/search/repositories"
        params = {"q": f"user:{self._username}", "per_page": PER_PAGE}
        try:
            pages = self._get_pages(url, params)
        except requests.RequestException as e:
            raise GitHubError(f"Failed to fetch GitHub repos via API: {e}") from e

        items: list[dict[str, Any]] = []
        for page in pages:
            if not isinstance(page, dict) or not isinstance(page.get("items"), list):
                raise GitHubError(f"Unexpected repository search response: {page!r}")
            items.extend(page["items"])

        repos = [item for item in items if not item.get("archived")]
        logger.info(
            "Listed repositories: user=%s found=%d archived_skipped=%d",
            self._username,
            len(repos),
            len(items) - len(repos),
        )
        return repos

    def fetch_commits(self, repo_name: str) -> CommitFetchResult:
        """Fetch the full commit listing of one repository.

        Never raises; transport errors, HTTP errors and payloads that are not
        a commit list (e.g. {"message": "Git Repository is empty."}) all come
        back as a failed result.
        """
        url = f"{self._api_url}/repos/{self._username}/{repo_name}/commits"
        try:
            pages = self._get_pages(url, {"per_page": PER_PAGE})
        except (requests.RequestException, ValueError) as e:
            return CommitFetchResult.failure(str(e))

        commits: list[dict[str, Any]] = []
        for page in pages:
            if not isinstance(page, list):
                message = page.get("message") if isinstance(page, dict) else None
                return CommitFetchResult.failure(message or f"unexpected payload: {page!r}")
            commits.extend(page)

        logger.debug("Fetched commits: repo=%s count=%d", repo_name, len(commits))
        return CommitFetchResult.success(commits)
