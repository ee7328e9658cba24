from conftest import make_record
from repo_dashboard.grouping import (
    analyze_repositories,
    detect_tech_stack,
    detect_themes,
    generate_feature_audit,
    get_tech_stack_by_category,
    get_themes_by_category,
    group_by_language,
    group_by_topics,
    search_text,
)
from repo_dashboard.patterns import PatternEntry


def _records():
    return [
        make_record(id=1, name="chat-api", description="A REST api for chat rooms",
                    language="Python", topics=["fastapi"], health_score=80, stargazers_count=4),
        make_record(id=2, name="budget-tracker", description="Track money",
                    language="Python", topics=["finance"], health_score=60, stargazers_count=1),
        make_record(id=3, name="dotfiles", description=None, language=None, health_score=50),
    ]


def test_search_text_joins_name_description_topics():
    record = make_record(name="x", description=None, topics=["a", "b"])
    assert search_text(record) == "x  a b"


def test_tech_stack_counts_and_order():
    stack = detect_tech_stack(_records())
    names = [item.name for item in stack]
    assert names == ["Python", "FastAPI", "REST", "API"]
    python = stack[0]
    assert python.category == "language"
    assert python.count == 2
    assert [r.id for r in python.repositories] == [1, 2]


def test_primary_language_and_pattern_match_counted_once():
    record = make_record(name="py-tools", description="python helpers", language="Python")
    stack = detect_tech_stack([record])
    assert [(item.name, item.count) for item in stack] == [("Python", 1)]


def test_record_belongs_to_several_clusters():
    records = _records()
    themes = {theme.name: theme for theme in detect_themes(records)}
    stack = {item.name: item for item in detect_tech_stack(records)}

    assert records[0] in themes["APIs & Services"].repositories
    assert records[0] in themes["Social & Communication"].repositories
    assert records[0] in stack["API"].repositories


def test_themes_keep_table_order_on_ties():
    themes = detect_themes(_records()[:1])
    assert [t.name for t in themes] == ["APIs & Services", "Social & Communication"]


def test_theme_keywords_and_dedup():
    themes = detect_themes(_records())
    finance = next(t for t in themes if t.name == "Finance & Budgeting")
    assert finance.category == "application"
    assert finance.keywords == ["finance", "budget", "money"]
    assert len(finance.repositories) == 1


def test_theme_keywords_capped_at_five():
    record = make_record(description="finance budget expense money invoice accounting bank")
    finance = detect_themes([record])[0]
    assert finance.keywords == ["finance", "budget", "expense", "money", "invoice"]


def test_themes_sorted_by_repository_count():
    records = [
        make_record(id=1, name="chat-bot"),
        make_record(id=2, name="chat-server"),
        make_record(id=3, name="recipe-book"),
    ]
    themes = detect_themes(records)
    assert themes[0].name == "Social & Communication"
    assert len(themes[0].repositories) == 2


def test_custom_table_is_used():
    table = [PatternEntry.build("Terraform", r"\bterraform\b", "platform")]
    record = make_record(description="Terraform modules")
    stack = detect_tech_stack([record], table=table)
    assert [(i.name, i.category) for i in stack] == [("Terraform", "platform")]


def test_detection_is_repeatable():
    records = _records()
    first = [(t.name, [r.id for r in t.repositories], t.keywords) for t in detect_themes(records)]
    second = [(t.name, [r.id for r in t.repositories], t.keywords) for t in detect_themes(records)]
    assert first == second


def test_group_by_language():
    groups = group_by_language(_records())
    assert [(g.language, g.count, g.percentage) for g in groups] == [("Python", 2, 67), ("Unknown", 1, 33)]
    assert groups[0].total_stars == 5
    assert groups[0].avg_health == 70


def test_group_by_topics():
    groups = group_by_topics(_records())
    assert [(g.topic, g.count) for g in groups] == [("fastapi", 1), ("finance", 1)]


def test_category_views():
    stack = detect_tech_stack(_records())
    by_category = get_tech_stack_by_category(stack)
    assert [i.name for i in by_category["framework"]] == ["FastAPI"]
    assert [i.name for i in by_category["tool"]] == ["REST", "API"]
    assert by_category["database"] == []

    themes = get_themes_by_category(detect_themes(_records()))
    assert [t.name for t in themes["technical"]] == ["APIs & Services"]


def test_feature_audit():
    audit = generate_feature_audit(_records())
    assert audit[0].has_topics is True
    assert audit[2].has_description is False
    assert audit[2].language is None


def test_empty_input():
    assert detect_tech_stack([]) == []
    assert detect_themes([]) == []
    assert group_by_language([]) == []
    assert group_by_topics([]) == []
    analysis = analyze_repositories([])
    assert analysis["summary"]["total_repos"] == 0
    assert analysis["themes_by_category"] == {"technical": [], "application": []}


def test_analysis_summary():
    summary = analyze_repositories(_records())["summary"]
    assert summary == {
        "total_repos": 3,
        "languages": 1,
        "topics": 2,
        "technologies": 4,
        "themes": 3,
        "app_themes": 2,
    }
