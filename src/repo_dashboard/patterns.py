# src/repo_dashboard/patterns.py
"""
Keyword tables used to tag repositories with technologies, themes and topics.

The tables are plain data. Extra entries can be supplied as YAML:

    Terraform:
      category: platform
      patterns: ['\\bterraform\\b', '\\bhcl\\b']

    Music Production:
      category: application
      description: DAWs, synths and audio tools
      patterns: ['\\bsynth\\b', '\\baudio\\b']

An entry whose label already exists replaces the built-in one.
"""
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Pattern

import yaml

from .exceptions import PatternTableError

logger = logging.getLogger(__name__)


@dataclass
class PatternEntry:
    label: str
    patterns: List[Pattern]
    category: str
    description: str = ""

    @classmethod
    def build(cls, label, patterns, category, description=""):
        if isinstance(patterns, str):
            patterns = [patterns]
        try:
            compiled = [re.compile(p, re.IGNORECASE) for p in patterns]
        except re.error as e:
            raise PatternTableError(f"Invalid pattern for '{label}': {e}") from e
        return cls(label=label, patterns=compiled, category=category, description=description)


def keyword_for(pattern):
    """Display form of a pattern: the regex source without word boundaries or optional marks."""
    return pattern.pattern.replace(r"\b", "").replace("?", "")


def _table(spec):
    return [PatternEntry.build(label, *args) for label, *args in spec]


TECH_PATTERNS = _table([
    # Languages (beyond the primary language)
    ("TypeScript", r"typescript|\.ts$", "language"),
    ("JavaScript", r"javascript|\.js$", "language"),
    ("Python", r"python|\.py$", "language"),
    ("Go", r"\bgolang\b|\bgo\b", "language"),
    ("Rust", r"\brust\b", "language"),

    # Frontend frameworks
    ("React", r"\breact\b|reactjs", "framework"),
    ("Next.js", r"\bnextjs\b|\bnext\.js\b|\bnext-", "framework"),
    ("Vue", r"\bvue\b|vuejs", "framework"),
    ("Angular", r"\bangular\b", "framework"),
    ("Svelte", r"\bsvelte\b", "framework"),

    # Backend frameworks
    ("Express", r"\bexpress\b", "framework"),
    ("Node.js", r"\bnodejs\b|\bnode\b", "framework"),
    ("Django", r"\bdjango\b", "framework"),
    ("Flask", r"\bflask\b", "framework"),
    ("FastAPI", r"\bfastapi\b", "framework"),
    ("Rails", r"\brails\b|\bruby.on.rails\b", "framework"),

    # Databases
    ("PostgreSQL", r"\bpostgres\b|\bpostgresql\b", "database"),
    ("MongoDB", r"\bmongo\b|\bmongodb\b", "database"),
    ("MySQL", r"\bmysql\b", "database"),
    ("Redis", r"\bredis\b", "database"),
    ("SQLite", r"\bsqlite\b", "database"),

    # Platforms
    ("Docker", r"\bdocker\b", "platform"),
    ("Kubernetes", r"\bk8s\b|\bkubernetes\b", "platform"),
    ("AWS", r"\baws\b|\bamazon", "platform"),
    ("Vercel", r"\bvercel\b", "platform"),
    ("Netlify", r"\bnetlify\b", "platform"),

    # Tools
    ("GraphQL", r"\bgraphql\b", "tool"),
    ("REST", r"\brest\b|\brestful\b", "tool"),
    ("CLI", r"\bcli\b|\bcommand.line\b", "tool"),
    ("API", r"\bapi\b", "tool"),
    ("Testing", r"\btest\b|\bjest\b|\bmocha\b|\bpytest\b", "tool"),
])


def _words(*words):
    return [rf"\b{w}\b" for w in words]


THEME_PATTERNS = _table([
    # Technical themes
    ("Web Applications", _words("web", "website", "frontend", "full.?stack"),
     "technical", "Web-based applications and sites"),
    ("CLI Tools", _words("cli", "command.?line", "terminal", "console"),
     "technical", "Command-line interfaces and tools"),
    ("Libraries & Packages", _words("lib", "library", "package", "module", "sdk"),
     "technical", "Reusable libraries and packages"),
    ("APIs & Services", _words("api", "service", "microservice", "backend"),
     "technical", "API services and backends"),
    ("Data & Analytics", _words("data", "analytics", "ml", "machine.?learning", "ai"),
     "technical", "Data processing and analytics"),
    ("DevOps & Infrastructure", _words("devops", "infra", "deploy", "ci", "cd", "docker"),
     "technical", "DevOps and infrastructure tooling"),
    ("Learning & Experiments", _words("learn", "tutorial", "experiment", "playground", "demo"),
     "technical", "Learning projects and experiments"),
    ("Templates & Starters", _words("template", "starter", "boilerplate", "scaffold"),
     "technical", "Project templates and starters"),
    ("Mobile Apps", _words("mobile", "ios", "android", "react.?native", "flutter", "app"),
     "technical", "Mobile applications for iOS and Android"),
    ("Browser Extensions", _words("extension", "chrome", "firefox", "browser", "addon"),
     "technical", "Browser extensions and add-ons"),
    ("Games", _words("game", "gaming", "unity", "godot", "pygame", "phaser"),
     "technical", "Games and game engines"),

    # Application domains
    ("Finance & Budgeting",
     _words("finance", "budget", "expense", "money", "invoice", "accounting", "bank",
            "payment", "crypto", "trading", "stock", "invest"),
     "application", "Finance, budgeting, and money management apps"),
    ("Food & Meal Planning",
     _words("meal", "recipe", "food", "cooking", "kitchen", "diet", "nutrition", "grocery",
            "restaurant", "menu"),
     "application", "Meal planning, recipes, and food-related apps"),
    ("Resume & Career",
     _words("resume", "cv", "portfolio", "job", "career", "hiring", "recruit", "interview",
            "linkedin"),
     "application", "Resume builders, portfolios, and career tools"),
    ("Health & Fitness",
     _words("health", "fitness", "workout", "exercise", "gym", "medical", "wellness", "sleep",
            "meditation", "yoga", "calorie"),
     "application", "Health tracking, fitness, and wellness apps"),
    ("Productivity & Tasks",
     _words("todo", "task", "productivity", "pomodoro", "kanban", "project.?management",
            "trello", "notes?", "reminder", "calendar", "schedule"),
     "application", "Task management and productivity tools"),
    ("E-commerce & Shopping",
     _words("ecommerce", "e-commerce", "shop", "store", "cart", "checkout", "product",
            "inventory", "marketplace"),
     "application", "E-commerce platforms and shopping apps"),
    ("Social & Communication",
     _words("social", "chat", "messag", "forum", "community", "twitter", "discord", "slack",
            "feed", "post"),
     "application", "Social networks and communication tools"),
    ("Education & Learning",
     _words("educat", "course", "quiz", "flashcard", "study", "school", "student", "teach",
            "lms", "elearning"),
     "application", "Educational platforms and learning tools"),
    ("Media & Entertainment",
     _words("media", "video", "music", "podcast", "stream", "player", "playlist", "spotify",
            "youtube", "netflix"),
     "application", "Media streaming and entertainment apps"),
    ("Travel & Location",
     _words("travel", "map", "location", "geo", "gps", "weather", "flight", "hotel",
            "booking", "tourism"),
     "application", "Travel planning and location-based apps"),
    ("Real Estate & Property",
     _words("real.?estate", "property", "housing", "rent", "mortgage", "listing",
            "apartment", "home"),
     "application", "Real estate and property management"),
    ("CRM & Sales",
     _words("crm", "sales", "customer", "lead", "pipeline", "contact", "deal", "prospect"),
     "application", "Customer relationship and sales management"),
    ("Content & Blogging",
     _words("blog", "cms", "content", "markdown", "writing", "article", "publish", "wordpress"),
     "application", "Blogging and content management systems"),
    ("Authentication & Security",
     _words("auth", "login", "password", "security", "oauth", "jwt", "encrypt", "2fa", "sso"),
     "application", "Authentication and security tools"),
    ("Automation & Bots",
     _words("bot", "automation", "scraper", "crawler", "workflow", "zapier", "scheduler", "cron"),
     "application", "Automation tools and bots"),
    ("Dashboard & Admin",
     _words("dashboard", "admin", "panel", "backoffice", "management", "monitor", "metric"),
     "application", "Admin panels and dashboards"),
    ("File & Document",
     _words("file", "document", "pdf", "upload", "storage", "dropbox", "drive", "convert"),
     "application", "File management and document tools"),
    ("Booking & Scheduling",
     _words("booking", "appointment", "reservation", "schedule", "calendly", "availability",
            "slot"),
     "application", "Booking and appointment scheduling"),
    ("Survey & Forms",
     _words("survey", "form", "questionnaire", "poll", "feedback", "response", "typeform"),
     "application", "Surveys, forms, and feedback collection"),
    ("Email & Newsletter",
     _words("email", "mail", "newsletter", "inbox", "smtp", "mailchimp", "subscrib"),
     "application", "Email clients and newsletter tools"),
])

# Topic generation uses plain substring matching on "name description".
TOPIC_FRAMEWORKS = {
    "react": ["react", "reactjs", "react-"],
    "nextjs": ["next", "nextjs", "next-"],
    "vue": ["vue", "vuejs", "vue-"],
    "angular": ["angular"],
    "svelte": ["svelte", "sveltekit"],
    "express": ["express"],
    "nodejs": ["node", "nodejs"],
    "django": ["django"],
    "flask": ["flask"],
    "fastapi": ["fastapi"],
    "rails": ["rails", "ruby-on-rails"],
    "laravel": ["laravel"],
    "spring-boot": ["spring", "springboot"],
}

TOPIC_DATABASES = {
    "postgresql": ["postgres", "postgresql", "psql"],
    "mongodb": ["mongo", "mongodb"],
    "mysql": ["mysql"],
    "redis": ["redis"],
    "sqlite": ["sqlite"],
    "prisma": ["prisma"],
    "drizzle": ["drizzle"],
}

TOPIC_PROJECT_TYPES = {
    "api": ["api", "rest", "graphql", "backend"],
    "cli": ["cli", "command-line", "terminal"],
    "webapp": ["webapp", "web-app", "frontend", "dashboard"],
    "library": ["lib", "library", "package", "sdk"],
    "bot": ["bot", "discord", "slack", "telegram"],
    "automation": ["automation", "script", "scraper", "crawler"],
    "template": ["template", "boilerplate", "starter", "scaffold"],
    "game": ["game", "gaming", "unity", "godot"],
    "mobile": ["mobile", "ios", "android", "react-native", "flutter"],
    "extension": ["extension", "chrome", "firefox", "addon"],
}

TOPIC_DOMAINS = {
    "finance": ["finance", "budget", "money", "payment", "invoice", "accounting"],
    "ecommerce": ["shop", "store", "cart", "ecommerce", "e-commerce", "checkout"],
    "education": ["learn", "course", "tutorial", "education", "school", "quiz"],
    "healthcare": ["health", "medical", "fitness", "workout", "wellness"],
    "social": ["social", "chat", "messaging", "community", "forum"],
    "productivity": ["todo", "task", "productivity", "kanban", "notes"],
    "media": ["video", "music", "podcast", "stream", "player"],
    "devtools": ["devtools", "developer", "dev-tools", "debugging"],
}

TOPIC_PLATFORMS = {
    "docker": ["docker"],
    "kubernetes": ["kubernetes", "k8s"],
    "aws": ["aws", "amazon"],
    "vercel": ["vercel"],
    "netlify": ["netlify"],
}

TOPIC_TABLES = [TOPIC_FRAMEWORKS, TOPIC_DATABASES, TOPIC_PROJECT_TYPES, TOPIC_DOMAINS, TOPIC_PLATFORMS]


def load_pattern_table(path, default_category="other"):
    """Read a YAML pattern table into a list of PatternEntry."""
    path = Path(path)
    try:
        content = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise PatternTableError(f"Could not read pattern table {path}: {e}") from e

    if content is None:
        return []
    if not isinstance(content, dict):
        raise PatternTableError(f"Pattern table {path} must map labels to entries")

    entries = []
    for label, spec in content.items():
        if isinstance(spec, (str, list)):
            spec = {"patterns": spec}
        if not isinstance(spec, dict) or not spec.get("patterns"):
            raise PatternTableError(f"Entry '{label}' in {path} has no patterns")
        entries.append(PatternEntry.build(
            str(label),
            spec["patterns"],
            spec.get("category", default_category),
            spec.get("description", ""),
        ))
    logger.info("Loaded %d pattern entries from %s", len(entries), path)
    return entries


def merge_tables(base, extra):
    """Replace entries of base that share a label with extra; append the rest."""
    overrides = {entry.label: entry for entry in extra}
    merged = [overrides.pop(entry.label, entry) for entry in base]
    merged.extend(overrides.values())
    return merged


def get_tech_patterns(settings=None):
    if settings is None or settings.TECH_PATTERNS_FILE is None:
        return TECH_PATTERNS
    return merge_tables(TECH_PATTERNS, load_pattern_table(settings.TECH_PATTERNS_FILE))


def get_theme_patterns(settings=None):
    if settings is None or settings.THEME_PATTERNS_FILE is None:
        return THEME_PATTERNS
    extra = load_pattern_table(settings.THEME_PATTERNS_FILE, default_category="application")
    return merge_tables(THEME_PATTERNS, extra)
