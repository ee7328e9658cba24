# src/repo_dashboard/status.py
import math

from .models import RepoStatus

ACTIVE_DAYS = 7
MAINTAINED_DAYS = 30
STALE_DAYS = 90

STATUS_DESCRIPTIONS = {
    RepoStatus.ACTIVE: "Updated within the last 7 days",
    RepoStatus.MAINTAINED: "Updated within the last 30 days",
    RepoStatus.STALE: "No updates in 30-90 days",
    RepoStatus.ABANDONED: "No updates in 90+ days",
    RepoStatus.ARCHIVED: "Archived on GitHub",
    RepoStatus.DEPRECATED: "Marked for archive/deletion",
}


def days_since(moment, now):
    """Whole days elapsed between moment and now. A missing moment is infinitely old."""
    if moment is None:
        return math.inf
    return math.floor((now - moment).total_seconds() / 86400)


def get_status_metrics(record, now):
    return {
        "days_since_last_push": days_since(record.pushed_at, now),
        "days_since_last_update": days_since(record.updated_at, now),
        "is_archived": record.is_archived,
    }


def classify_status(record, now):
    """
    Derive the lifecycle status of a repository.

    - archived: archived on GitHub, regardless of activity
    - active: pushed within the last 7 days
    - maintained: pushed within the last 30 days
    - stale: pushed within the last 90 days
    - abandoned: anything older, or never pushed
    """
    if record.is_archived:
        return RepoStatus.ARCHIVED

    days = days_since(record.pushed_at, now)
    if days <= ACTIVE_DAYS:
        return RepoStatus.ACTIVE
    if days <= MAINTAINED_DAYS:
        return RepoStatus.MAINTAINED
    if days <= STALE_DAYS:
        return RepoStatus.STALE
    return RepoStatus.ABANDONED


def get_status_description(status):
    return STATUS_DESCRIPTIONS.get(status, "Unknown status")
