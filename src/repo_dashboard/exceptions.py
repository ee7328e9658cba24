# src/repo_dashboard/exceptions.py
"""Errors raised at the GitHub and configuration boundaries."""


class GithubError(Exception):
    """Base exception for GitHub API failures."""


class GithubAuthError(GithubError):
    """Raised when the access token is missing, invalid or expired."""


class GithubRequestError(GithubError):
    """Raised for non-retryable HTTP failures (404, 422, ...)."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class GithubRetryableError(GithubError):
    """Raised for transient issues where retrying later may succeed."""


class GithubRateLimitError(GithubRetryableError):
    """Raised when GitHub enforces its primary or secondary rate limit."""

    def __init__(self, message, retry_after=None):
        super().__init__(message)
        self.retry_after = retry_after


class PatternTableError(Exception):
    """Raised when an external pattern table cannot be loaded."""
