# src/repo_dashboard/github_client.py
import logging
import time
from datetime import datetime, timezone

import requests

from .exceptions import (
    GithubAuthError,
    GithubRateLimitError,
    GithubRequestError,
    GithubRetryableError,
)

API_URL = "https://api.github.com"
USER_AGENT = "repo-dashboard/1.0"

logger = logging.getLogger(__name__)


def _retry_after_seconds(response, default=60.0):
    retry_after = response.headers.get("Retry-After")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            pass
    reset = response.headers.get("X-RateLimit-Reset")
    if reset:
        try:
            return max(float(reset) - time.time(), 1.0)
        except ValueError:
            pass
    return default


def _is_rate_limited(response):
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    if response.headers.get("X-RateLimit-Remaining") == "0":
        return True
    return "rate limit" in response.text.lower()


def raise_for_github_status(response):
    """Translate an unsuccessful GitHub response into a GithubError."""
    if response.ok:
        return
    status = response.status_code
    try:
        message = response.json().get("message") or response.reason
    except ValueError:
        message = response.reason

    if _is_rate_limited(response):
        raise GithubRateLimitError(f"GitHub rate limit reached: {message}", retry_after=_retry_after_seconds(response))
    if status == 401:
        raise GithubAuthError(f"GitHub authentication failed: {message}")
    if status >= 500:
        raise GithubRetryableError(f"GitHub server error {status}: {message}")
    raise GithubRequestError(f"GitHub request failed with {status}: {message}", status_code=status)


def request_with_backoff(func, retries=3, base_delay=1.0, max_delay=60.0, sleep=time.sleep):
    """
    Call func, retrying transient GitHub failures with exponential backoff.

    A rate limit whose reset lies further away than max_delay is raised
    straight away instead of blocking the caller.
    """
    attempt = 0
    while True:
        try:
            return func()
        except GithubRetryableError as e:
            if attempt >= retries:
                raise
            delay = base_delay * (2 ** attempt)
            if isinstance(e, GithubRateLimitError) and e.retry_after is not None:
                if e.retry_after > max_delay:
                    raise
                delay = max(delay, e.retry_after)
            delay = min(delay, max_delay)
            attempt += 1
            logger.warning("GitHub request failed (%s), retry %d/%d in %.1fs", e, attempt, retries, delay)
            sleep(delay)


class GitHubClient:
    def __init__(self, token, api_url=API_URL, timeout=30.0, session=None):
        if not token:
            raise GithubAuthError("A GitHub access token is required")
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": USER_AGENT,
        })

    @classmethod
    def from_settings(cls, settings, token=None):
        return cls(token or settings.GITHUB_TOKEN, api_url=settings.GITHUB_API_URL, timeout=settings.GITHUB_TIMEOUT)

    def _url(self, path):
        if path.startswith("http"):
            return path
        return f"{self.api_url}/{path.lstrip('/')}"

    def _request(self, method, path, **kwargs):
        try:
            response = self.session.request(method, self._url(path), timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise GithubRetryableError(f"Could not reach GitHub: {e}") from e
        raise_for_github_status(response)
        return response

    def _paginate(self, path, params=None):
        url = path
        while url:
            response = self._request("GET", url, params=params)
            yield from response.json()
            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

    def get_authenticated_user(self):
        return self._request("GET", "/user").json()

    def list_user_repositories(self):
        params = {
            "visibility": "all",
            "affiliation": "owner,collaborator,organization_member",
            "sort": "updated",
            "per_page": 100,
        }
        repos = list(self._paginate("/user/repos", params))
        logger.info("Fetched %d repositories from GitHub", len(repos))
        return repos

    def get_repository_topics(self, owner, repo):
        return self._request("GET", f"/repos/{owner}/{repo}/topics").json().get("names", [])

    def replace_repository_topics(self, owner, repo, names):
        response = self._request("PUT", f"/repos/{owner}/{repo}/topics", json={"names": list(names)})
        return response.json().get("names", [])

    def archive_repository(self, owner, repo):
        self._request("PATCH", f"/repos/{owner}/{repo}", json={"archived": True})
        logger.info("Archived %s/%s", owner, repo)

    def delete_repository(self, owner, repo):
        self._request("DELETE", f"/repos/{owner}/{repo}")
        logger.info("Deleted %s/%s", owner, repo)

    def get_rate_limit(self):
        core = self._request("GET", "/rate_limit").json()["resources"]["core"]
        return {
            "remaining": core["remaining"],
            "limit": core["limit"],
            "reset_at": datetime.fromtimestamp(core["reset"], tz=timezone.utc),
        }
