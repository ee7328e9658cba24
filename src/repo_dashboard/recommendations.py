# src/repo_dashboard/recommendations.py
"""
Cleanup recommendations for a user's repositories.

Every rule is evaluated against every repository that is not already archived
on GitHub. The matching rule with the highest confidence decides the action;
on a confidence tie the rule listed first in RULES wins. The reasons shown are
those of every matching rule that shares the winning action.
"""
from dataclasses import dataclass
from typing import Callable

from .models import Recommendation, RecommendationAction, RepoStatus

HIGH_CONFIDENCE = 80

DEPRECATION_MARKERS = ("deprecated", "unmaintained", "no longer maintained", "archived")


@dataclass(frozen=True)
class RecommendationRule:
    name: str
    check: Callable
    action: str
    confidence: int
    reason: str
    priority: int


def _description_deprecated(repo):
    description = (repo.description or "").lower()
    return any(marker in description for marker in DEPRECATION_MARKERS)


RULES = (
    # Archive, high confidence
    RecommendationRule(
        name="abandoned-no-engagement",
        check=lambda repo: (
            repo.effective_status == RepoStatus.ABANDONED
            and repo.stargazers_count == 0
            and repo.forks_count == 0
            and not repo.is_fork
        ),
        action=RecommendationAction.ARCHIVE,
        confidence=90,
        reason="Abandoned for 90+ days with no community engagement",
        priority=4,
    ),
    RecommendationRule(
        name="description-deprecated",
        check=_description_deprecated,
        action=RecommendationAction.ARCHIVE,
        confidence=85,
        reason="Description indicates project is deprecated or unmaintained",
        priority=5,
    ),

    # Delete unused forks
    RecommendationRule(
        name="unused-fork-abandoned",
        check=lambda repo: (
            repo.is_fork
            and repo.effective_status == RepoStatus.ABANDONED
            and repo.stargazers_count == 0
        ),
        action=RecommendationAction.DELETE,
        confidence=80,
        reason="Unused fork with no activity in 90+ days",
        priority=3,
    ),
    RecommendationRule(
        name="unused-fork-stale",
        check=lambda repo: (
            repo.is_fork
            and repo.effective_status == RepoStatus.STALE
            and repo.stargazers_count == 0
            and repo.forks_count == 0
        ),
        action=RecommendationAction.DELETE,
        confidence=70,
        reason="Stale fork with no downstream activity",
        priority=2,
    ),

    # Review
    RecommendationRule(
        name="stale-with-issues",
        check=lambda repo: repo.effective_status == RepoStatus.STALE and repo.open_issues_count > 5,
        action=RecommendationAction.REVIEW,
        confidence=75,
        reason="Stale repository with open issues that need attention",
        priority=4,
    ),
    RecommendationRule(
        name="abandoned-with-stars",
        check=lambda repo: repo.effective_status == RepoStatus.ABANDONED and repo.stargazers_count >= 10,
        action=RecommendationAction.REVIEW,
        confidence=80,
        reason="Abandoned repository that still has community interest",
        priority=4,
    ),
    RecommendationRule(
        name="stale-private",
        check=lambda repo: repo.effective_status == RepoStatus.STALE and repo.is_private,
        action=RecommendationAction.REVIEW,
        confidence=65,
        reason="Private repository that may no longer be needed",
        priority=3,
    ),

    # Archive
    RecommendationRule(
        name="abandoned-private",
        check=lambda repo: repo.effective_status == RepoStatus.ABANDONED and repo.is_private,
        action=RecommendationAction.ARCHIVE,
        confidence=75,
        reason="Private repository abandoned for 90+ days",
        priority=3,
    ),
    RecommendationRule(
        name="template-abandoned",
        check=lambda repo: repo.is_template and repo.effective_status == RepoStatus.ABANDONED,
        action=RecommendationAction.ARCHIVE,
        confidence=70,
        reason="Template repository that hasn't been updated in 90+ days",
        priority=2,
    ),

    # Keep
    RecommendationRule(
        name="active-repo",
        check=lambda repo: repo.effective_status == RepoStatus.ACTIVE,
        action=RecommendationAction.KEEP,
        confidence=95,
        reason="Repository is actively maintained",
        priority=1,
    ),
    RecommendationRule(
        name="maintained-repo",
        check=lambda repo: repo.effective_status == RepoStatus.MAINTAINED,
        action=RecommendationAction.KEEP,
        confidence=85,
        reason="Repository is maintained and stable",
        priority=1,
    ),
)


def matching_rules(record, rules=RULES):
    return [rule for rule in rules if rule.check(record)]


def recommend(record, rules=RULES):
    """Recommendation for a single repository, or None when no rule applies."""
    if record.is_archived:
        return None

    matches = matching_rules(record, rules)
    if not matches:
        return None

    # max() keeps the first of equally confident rules
    best = max(matches, key=lambda rule: rule.confidence)
    reasons = []
    for rule in matches:
        if rule.action == best.action and rule.reason not in reasons:
            reasons.append(rule.reason)

    return Recommendation(
        repository=record,
        action=best.action,
        confidence=best.confidence,
        reasons=reasons,
        priority=best.priority,
    )


def generate_recommendations(records, rules=RULES):
    recommendations = [r for r in (recommend(record, rules) for record in records) if r is not None]
    return sorted(recommendations, key=lambda r: (-r.priority, -r.confidence))


def group_recommendations_by_action(recommendations):
    return {
        action: [r for r in recommendations if r.action == action]
        for action in RecommendationAction.ALL
    }


def get_recommendation_stats(recommendations):
    grouped = group_recommendations_by_action(recommendations)
    archive = len(grouped[RecommendationAction.ARCHIVE])
    delete = len(grouped[RecommendationAction.DELETE])
    review = len(grouped[RecommendationAction.REVIEW])

    return {
        "total": len(recommendations),
        "to_archive": archive,
        "to_delete": delete,
        "to_review": review,
        "to_keep": len(grouped[RecommendationAction.KEEP]),
        "action_needed": archive + delete + review,
        "high_confidence": len([r for r in recommendations if r.confidence >= HIGH_CONFIDENCE]),
    }
