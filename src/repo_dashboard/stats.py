# src/repo_dashboard/stats.py
from datetime import datetime, timezone

from .models import RepoStatus
from .scoring import round_half_up

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

_DISTRIBUTION_STATUSES = (
    RepoStatus.ACTIVE,
    RepoStatus.MAINTAINED,
    RepoStatus.STALE,
    RepoStatus.ABANDONED,
    RepoStatus.ARCHIVED,
)


def compute_dashboard_stats(records, last_sync_at=None):
    """Summary numbers and short lists for the dashboard overview."""
    total = len(records)
    status_counts = {status: 0 for status in RepoStatus.ALL}
    for record in records:
        status_counts[record.effective_status] = status_counts.get(record.effective_status, 0) + 1

    stats = {
        "total_repos": total,
        "active_repos": status_counts[RepoStatus.ACTIVE],
        "maintained_repos": status_counts[RepoStatus.MAINTAINED],
        "stale_repos": status_counts[RepoStatus.STALE],
        "abandoned_repos": status_counts[RepoStatus.ABANDONED],
        "archived_repos": status_counts[RepoStatus.ARCHIVED],
        "deprecated_repos": status_counts[RepoStatus.DEPRECATED],
        "public_repos": len([r for r in records if not r.is_private]),
        "private_repos": len([r for r in records if r.is_private]),
        "forked_repos": len([r for r in records if r.is_fork]),
        "total_stars": sum(r.stargazers_count for r in records),
        "total_forks": sum(r.forks_count for r in records),
        "total_open_issues": sum(r.open_issues_count for r in records),
        "last_sync_at": last_sync_at,
    }

    status_distribution = [
        {
            "status": status,
            "count": status_counts[status],
            "percentage": round_half_up(status_counts[status] / total * 100) if total else 0,
        }
        for status in _DISTRIBUTION_STATUSES
        if status_counts[status] > 0
    ]

    language_counts = {}
    for record in records:
        if record.language:
            language_counts[record.language] = language_counts.get(record.language, 0) + 1
    language_distribution = sorted(
        ({"language": language, "count": count} for language, count in language_counts.items()),
        key=lambda item: -item["count"],
    )[:10]

    top_priority = sorted(
        (r for r in records if r.effective_status != RepoStatus.ARCHIVED),
        key=lambda r: -r.priority_score,
    )[:5]

    active_projects = sorted(
        (r for r in records if r.effective_status in (RepoStatus.ACTIVE, RepoStatus.MAINTAINED)),
        key=lambda r: r.pushed_at or _EPOCH,
        reverse=True,
    )[:8]

    return {
        "stats": stats,
        "status_distribution": status_distribution,
        "language_distribution": language_distribution,
        "top_priority_repos": top_priority,
        "active_projects": active_projects,
    }
