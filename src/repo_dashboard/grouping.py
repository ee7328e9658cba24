# src/repo_dashboard/grouping.py
from .models import (
    LanguageGroup,
    RepoFeature,
    TECH_CATEGORIES,
    TechStackItem,
    ThemeCluster,
    TopicGroup,
)
from .patterns import TECH_PATTERNS, THEME_PATTERNS, keyword_for
from .scoring import round_half_up

MAX_THEME_KEYWORDS = 5


def search_text(record):
    """Name, description and topics joined into one string for pattern matching."""
    return " ".join([record.name, record.description or "", *(record.topics or [])])


def group_by_language(records):
    groups = {}
    for record in records:
        groups.setdefault(record.language or "Unknown", []).append(record)

    total = len(records)
    result = [
        LanguageGroup(
            language=language,
            count=len(repos),
            percentage=round_half_up(len(repos) / total * 100) if total else 0,
            repositories=repos,
            total_stars=sum(r.stargazers_count for r in repos),
            avg_health=round_half_up(sum(r.health_score for r in repos) / len(repos)),
        )
        for language, repos in groups.items()
    ]
    return sorted(result, key=lambda g: -g.count)


def group_by_topics(records):
    groups = {}
    for record in records:
        for topic in record.topics or []:
            groups.setdefault(topic, []).append(record)

    result = [TopicGroup(topic=topic, count=len(repos), repositories=repos) for topic, repos in groups.items()]
    return sorted(result, key=lambda g: -g.count)


def detect_tech_stack(records, table=None):
    """
    Tag technologies across all repositories.

    The primary language of each repository always counts as a language item.
    Other items come from matching the pattern table against name, description
    and topics. A repository can belong to any number of items.
    """
    table = TECH_PATTERNS if table is None else table
    items = {}
    seen = {}

    def register(name, category, index, record):
        if name not in items:
            items[name] = TechStackItem(name=name, category=category)
            seen[name] = set()
        if index not in seen[name]:
            seen[name].add(index)
            items[name].repositories.append(record)

    for index, record in enumerate(records):
        text = search_text(record)
        if record.language:
            register(record.language, "language", index, record)
        for entry in table:
            if any(p.search(text) for p in entry.patterns):
                register(entry.label, entry.category, index, record)

    return sorted(items.values(), key=lambda item: -item.count)


def detect_themes(records, table=None):
    """Cluster repositories into technical and application themes."""
    table = THEME_PATTERNS if table is None else table
    texts = [search_text(record) for record in records]
    themes = []

    for entry in table:
        matching = []
        keywords = []
        for record, text in zip(records, texts):
            matched = False
            for pattern in entry.patterns:
                if pattern.search(text):
                    matched = True
                    keyword = keyword_for(pattern)
                    if keyword not in keywords and len(keywords) < MAX_THEME_KEYWORDS:
                        keywords.append(keyword)
            if matched:
                matching.append(record)

        if matching:
            themes.append(ThemeCluster(
                name=entry.label,
                description=entry.description,
                category=entry.category,
                repositories=matching,
                keywords=keywords,
            ))

    return sorted(themes, key=lambda theme: -len(theme.repositories))


def get_themes_by_category(themes):
    return {
        "technical": [t for t in themes if t.category == "technical"],
        "application": [t for t in themes if t.category == "application"],
    }


def get_tech_stack_by_category(tech_stack):
    categories = {category: [] for category in TECH_CATEGORIES}
    for item in tech_stack:
        categories.get(item.category, categories["other"]).append(item)
    return categories


def generate_feature_audit(records):
    return [
        RepoFeature(
            repo_id=r.id,
            repo_name=r.name,
            full_name=r.full_name,
            language=r.language,
            has_issues=r.open_issues_count > 0,
            is_private=r.is_private,
            is_fork=r.is_fork,
            is_archived=r.is_archived,
            is_template=r.is_template,
            has_topics=bool(r.topics),
            has_description=bool(r.description),
            stars=r.stargazers_count,
            forks=r.forks_count,
            open_issues=r.open_issues_count,
            status=r.effective_status or "unknown",
            health_score=r.health_score,
            priority_score=r.priority_score,
        )
        for r in records
    ]


def analyze_repositories(records, tech_table=None, theme_table=None):
    """Build the full analysis payload for a user's repositories."""
    if not records:
        return {
            "language_groups": [],
            "topic_groups": [],
            "tech_stack": [],
            "tech_stack_by_category": {},
            "themes": [],
            "themes_by_category": {"technical": [], "application": []},
            "feature_audit": [],
            "summary": {
                "total_repos": 0,
                "languages": 0,
                "topics": 0,
                "technologies": 0,
                "themes": 0,
                "app_themes": 0,
            },
        }

    language_groups = group_by_language(records)
    topic_groups = group_by_topics(records)
    tech_stack = detect_tech_stack(records, tech_table)
    themes = detect_themes(records, theme_table)
    themes_by_category = get_themes_by_category(themes)

    return {
        "language_groups": language_groups[:15],
        "topic_groups": topic_groups[:20],
        "tech_stack": tech_stack[:30],
        "tech_stack_by_category": get_tech_stack_by_category(tech_stack),
        "themes": themes,
        "themes_by_category": themes_by_category,
        "feature_audit": generate_feature_audit(records),
        "summary": {
            "total_repos": len(records),
            "languages": len([g for g in language_groups if g.language != "Unknown"]),
            "topics": len(topic_groups),
            "technologies": len(tech_stack),
            "themes": len(themes),
            "app_themes": len(themes_by_category["application"]),
        },
    }
