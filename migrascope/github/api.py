"""Minimal GitHub REST client with retry and rate limit handling."""
from __future__ import annotations

import logging
import time

import requests

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
API_VERSION = "2022-11-28"

# Rate limit thresholds
RATE_LIMIT_FLOOR = 5          # sleep when remaining < this
MAX_RETRIES = 3
RETRY_BACKOFF = [2, 10, 30]   # seconds
TIMEOUT_SECONDS = 30


class GitHubAPIError(RuntimeError):
    """Raised when the GitHub API does not answer with HTTP 200."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


def _rate_limit_sleep(response: requests.Response) -> int:
    """Seconds to wait before the next call, 0 if the budget is fine."""
    remaining = response.headers.get("X-RateLimit-Remaining")
    reset_at = response.headers.get("X-RateLimit-Reset")
    if remaining is None or reset_at is None:
        return 0
    if int(remaining) >= RATE_LIMIT_FLOOR:
        return 0
    return max(int(reset_at) - int(time.time()) + 1, 1)


class GitHubClient:
    """Read-only access to the endpoints the action needs."""

    def __init__(self, token: str, api_url: str = GITHUB_API,
                 session: requests.Session | None = None) -> None:
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": "migrascope",
        })

    def get(self, path: str, params: dict | None = None) -> dict:
        """GET an API path and return the decoded JSON body."""
        url = f"{self.api_url}/{path.lstrip('/')}"

        for attempt in range(MAX_RETRIES):
            try:
                resp = self.session.get(url, params=params, timeout=TIMEOUT_SECONDS)
            except requests.exceptions.RequestException as e:
                if attempt == MAX_RETRIES - 1:
                    raise GitHubAPIError(f"Request to {url} failed: {e}") from e
                backoff = RETRY_BACKOFF[min(attempt, len(RETRY_BACKOFF) - 1)]
                logger.warning(
                    "Request error (attempt %d/%d): %s, retrying in %ds",
                    attempt + 1, MAX_RETRIES, e, backoff,
                )
                time.sleep(backoff)
                continue

            if resp.status_code == 403 and "rate limit" in resp.text.lower():
                wait = _rate_limit_sleep(resp) or RETRY_BACKOFF[-1]
                if attempt < MAX_RETRIES - 1:
                    logger.warning("Rate limited (403), sleeping %ds", wait)
                    time.sleep(wait)
                    continue

            if resp.status_code != 200:
                raise GitHubAPIError(
                    f"The GitHub API returned {resp.status_code} for {url}, expected 200.",
                    status=resp.status_code,
                )

            wait = _rate_limit_sleep(resp)
            if wait:
                logger.info("Rate limit nearly exhausted, sleeping %ds", wait)
                time.sleep(wait)
            return resp.json()

        raise GitHubAPIError(f"Max retries exceeded for {url}")

    def get_commit(self, owner: str, repo: str, ref: str) -> dict:
        return self.get(f"repos/{owner}/{repo}/commits/{ref}")

    def compare_commits(self, owner: str, repo: str, base: str, head: str) -> dict:
        # https://docs.github.com/rest/commits/commits#compare-two-commits
        return self.get(f"repos/{owner}/{repo}/compare/{base}...{head}")
