# src/repo_dashboard/scoring.py
import math

from .models import RepoStatus
from .status import days_since

PRIORITY_WEIGHTS = {
    "activity": 0.3,
    "popularity": 0.2,
    "maintenance": 0.3,
    "ownership": 0.2,
}

# Both "currently worked on" and "needs a decision" rank high.
ACTIVITY_SCORES = {
    RepoStatus.ACTIVE: 90,
    RepoStatus.MAINTAINED: 60,
    RepoStatus.STALE: 80,
    RepoStatus.ABANDONED: 70,
    RepoStatus.ARCHIVED: 10,
    RepoStatus.DEPRECATED: 20,
}

HEALTH_DEDUCTIONS = {
    RepoStatus.ACTIVE: 0,
    RepoStatus.MAINTAINED: 10,
    RepoStatus.STALE: 30,
    RepoStatus.ABANDONED: 50,
    RepoStatus.ARCHIVED: 40,
    RepoStatus.DEPRECATED: 60,
}

ACTIVE_FORK_DAYS = 30


def round_half_up(value):
    return int(math.floor(value + 0.5))


def clamp_score(value):
    return max(0, min(100, round_half_up(value)))


def calculate_activity_score(status):
    return ACTIVITY_SCORES.get(status, 0)


def calculate_popularity_score(record):
    # Logarithmic so a handful of popular repos don't dominate
    score_stars = min(50, math.log10(record.stargazers_count + 1) * 20)
    score_forks = min(30, math.log10(record.forks_count + 1) * 15)
    score_watchers = min(20, math.log10(record.watchers_count + 1) * 10)
    return round_half_up(score_stars + score_forks + score_watchers)


def calculate_maintenance_score(record):
    issues = record.open_issues_count
    if issues == 0:
        return 20
    elif issues <= 5:
        return 50
    elif issues <= 10:
        return 70
    elif issues <= 25:
        return 85
    return 100


def calculate_ownership_score(record, now):
    if record.is_fork:
        if days_since(record.pushed_at, now) <= ACTIVE_FORK_DAYS:
            return 50
        return 20
    return 80


def calculate_priority_factors(record, status, now):
    return {
        "activity": calculate_activity_score(status),
        "popularity": calculate_popularity_score(record),
        "maintenance": calculate_maintenance_score(record),
        "ownership": calculate_ownership_score(record, now),
    }


def calculate_priority_score(record, status, now):
    """Overall priority (0-100). Higher means the repository needs more attention."""
    factors = calculate_priority_factors(record, status, now)
    score = sum(PRIORITY_WEIGHTS[name] * value for name, value in factors.items())
    return clamp_score(score)


def calculate_health_score(record, status):
    """Overall health (0-100). Higher means a healthier repository."""
    score = 100
    score -= HEALTH_DEDUCTIONS.get(status, 0)

    if record.open_issues_count > 0:
        issue_ratio = min(record.open_issues_count / 10, 1)
        score -= round_half_up(issue_ratio * 20)

    if record.stargazers_count > 10:
        score += min(10, math.log10(record.stargazers_count) * 5)

    if record.is_template:
        score -= 5

    return clamp_score(score)
