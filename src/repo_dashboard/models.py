# src/repo_dashboard/models.py
from dataclasses import dataclass, field, fields, asdict
from datetime import datetime, timezone
from typing import List, Optional


class RepoStatus:
    ACTIVE = "active"
    MAINTAINED = "maintained"
    STALE = "stale"
    ABANDONED = "abandoned"
    ARCHIVED = "archived"
    DEPRECATED = "deprecated"

    ALL = (ACTIVE, MAINTAINED, STALE, ABANDONED, ARCHIVED, DEPRECATED)


class RecommendationAction:
    ARCHIVE = "archive"
    DELETE = "delete"
    REVIEW = "review"
    KEEP = "keep"

    ALL = (ARCHIVE, DELETE, REVIEW, KEEP)


TECH_CATEGORIES = ("language", "framework", "database", "platform", "tool", "other")
THEME_CATEGORIES = ("technical", "application")

_DATETIME_FIELDS = ("created_at", "updated_at", "pushed_at", "last_sync_at")


def parse_timestamp(value):
    """Parse a GitHub ISO-8601 timestamp into an aware UTC datetime."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class RepositoryRecord:
    """A user's repository as synced from GitHub, plus the derived fields."""

    id: int
    user_id: int
    name: str
    full_name: str
    description: Optional[str] = None
    html_url: str = ""
    homepage: Optional[str] = None
    language: Optional[str] = None
    topics: List[str] = field(default_factory=list)
    is_private: bool = False
    is_fork: bool = False
    is_archived: bool = False
    is_template: bool = False
    stargazers_count: int = 0
    watchers_count: int = 0
    forks_count: int = 0
    open_issues_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    pushed_at: Optional[datetime] = None
    status: str = RepoStatus.ACTIVE
    priority_score: int = 50
    health_score: int = 50
    user_status: Optional[str] = None
    planned_action: Optional[str] = None
    last_sync_at: Optional[datetime] = None
    sync_error: Optional[str] = None

    @property
    def owner(self):
        return self.full_name.split("/", 1)[0]

    @property
    def effective_status(self):
        # Archived on GitHub wins over any user-assigned status
        if self.is_archived:
            return RepoStatus.ARCHIVED
        return self.user_status or self.status

    @classmethod
    def from_github(cls, payload, user_id):
        return cls(
            id=payload["id"],
            user_id=user_id,
            name=payload["name"],
            full_name=payload.get("full_name") or payload["name"],
            description=payload.get("description"),
            html_url=payload.get("html_url") or "",
            homepage=payload.get("homepage") or None,
            language=payload.get("language"),
            topics=list(payload.get("topics") or []),
            is_private=bool(payload.get("private", False)),
            is_fork=bool(payload.get("fork", False)),
            is_archived=bool(payload.get("archived", False)),
            is_template=bool(payload.get("is_template", False)),
            stargazers_count=payload.get("stargazers_count") or 0,
            watchers_count=payload.get("watchers_count") or 0,
            forks_count=payload.get("forks_count") or 0,
            open_issues_count=payload.get("open_issues_count") or 0,
            created_at=parse_timestamp(payload.get("created_at")),
            updated_at=parse_timestamp(payload.get("updated_at")),
            pushed_at=parse_timestamp(payload.get("pushed_at")),
        )

    def to_dict(self):
        data = asdict(self)
        for key in _DATETIME_FIELDS:
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data

    @classmethod
    def from_dict(cls, data):
        # Keys written by other versions of the store are dropped
        known = {f.name for f in fields(cls)}
        data = {key: value for key, value in data.items() if key in known}
        for key in _DATETIME_FIELDS:
            data[key] = parse_timestamp(data.get(key))
        return cls(**data)


@dataclass
class TechStackItem:
    name: str
    category: str
    repositories: List[RepositoryRecord] = field(default_factory=list)

    @property
    def count(self):
        return len(self.repositories)


@dataclass
class ThemeCluster:
    name: str
    description: str
    category: str
    repositories: List[RepositoryRecord] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)


@dataclass
class LanguageGroup:
    language: str
    count: int
    percentage: int
    repositories: List[RepositoryRecord]
    total_stars: int
    avg_health: int


@dataclass
class TopicGroup:
    topic: str
    count: int
    repositories: List[RepositoryRecord]


@dataclass
class RepoFeature:
    repo_id: int
    repo_name: str
    full_name: str
    language: Optional[str]
    has_issues: bool
    is_private: bool
    is_fork: bool
    is_archived: bool
    is_template: bool
    has_topics: bool
    has_description: bool
    stars: int
    forks: int
    open_issues: int
    status: str
    health_score: int
    priority_score: int


@dataclass
class Recommendation:
    repository: RepositoryRecord
    action: str
    confidence: int
    reasons: List[str]
    priority: int

    @property
    def repository_id(self):
        return self.repository.id


@dataclass
class SyncResult:
    success: bool
    total_repos: int = 0
    new_repos: int = 0
    updated_repos: int = 0
    error: Optional[str] = None


@dataclass
class TopicResult:
    repo_id: int
    repo_name: str
    full_name: str
    suggested_topics: List[str]
    applied: bool = False
    error: Optional[str] = None
