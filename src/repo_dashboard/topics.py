# src/repo_dashboard/topics.py
import re

from .patterns import TOPIC_TABLES

MAX_TOPICS = 20
MAX_TOPIC_LENGTH = 50


def generate_topics_for_repo(record):
    """Suggest GitHub topics for a repository from its language, name and description."""
    topics = {}
    combined = f"{record.name} {record.description or ''}".lower()

    if record.language:
        language = re.sub(r"[^a-z0-9-]", "", record.language.lower())
        if language:
            topics[language] = None

    for table in TOPIC_TABLES:
        for topic, keywords in table.items():
            if any(keyword in combined for keyword in keywords):
                topics[topic] = None

    if record.is_template:
        topics["template"] = None
    if record.is_fork:
        topics["fork"] = None

    return list(topics)[:MAX_TOPICS]


def sanitize_topics(topics):
    """
    Clean topic names for GitHub: lowercase letters, digits and single hyphens,
    at most 50 characters each and 20 in total.
    """
    cleaned = []
    for topic in topics:
        topic = re.sub(r"[^a-z0-9-]", "-", topic.lower())
        topic = re.sub(r"-+", "-", topic).strip("-")
        if 0 < len(topic) <= MAX_TOPIC_LENGTH and topic not in cleaned:
            cleaned.append(topic)
    return cleaned[:MAX_TOPICS]
