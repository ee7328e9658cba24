from conftest import make_record
from repo_dashboard.topics import generate_topics_for_repo, sanitize_topics


def test_sanitize_example():
    assert sanitize_topics(["C++", "Node.js!!", ""]) == ["c", "node-js"]


def test_sanitize_rules():
    assert sanitize_topics(["  Machine Learning  "]) == ["machine-learning"]
    assert sanitize_topics(["--a--b--"]) == ["a-b"]
    assert sanitize_topics(["x" * 50, "y" * 51]) == ["x" * 50]
    assert sanitize_topics(["!!!"]) == []


def test_sanitize_caps_at_twenty():
    topics = [f"topic-{i}" for i in range(30)]
    assert sanitize_topics(topics) == topics[:20]


def test_generated_order_follows_categories():
    record = make_record(
        name="shop-api",
        description="Django backend with postgres, deployed with docker",
        language="Python",
        is_template=True,
        is_fork=True,
    )
    assert generate_topics_for_repo(record) == [
        "python", "django", "postgresql", "api", "ecommerce", "docker", "template", "fork",
    ]


def test_language_is_cleaned():
    assert generate_topics_for_repo(make_record(name="x", language="C++")) == ["c"]
    assert generate_topics_for_repo(make_record(name="x", language="Jupyter Notebook")) == ["jupyternotebook"]


def test_topics_are_unique():
    record = make_record(name="starter-template", is_template=True)
    topics = generate_topics_for_repo(record)
    assert topics.count("template") == 1


def test_no_signals_gives_nothing():
    assert generate_topics_for_repo(make_record(name="x", description=None)) == []


def test_generated_topics_capped_at_twenty():
    description = (
        "react vue angular svelte express django flask fastapi rails laravel spring "
        "postgres mongo mysql redis sqlite prisma drizzle api cli webapp library bot"
    )
    topics = generate_topics_for_repo(make_record(name="everything", description=description, language="Go"))
    assert len(topics) == 20
    assert topics[0] == "go"
