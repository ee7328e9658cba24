# src/repo_dashboard/cli.py
import argparse
import sys
from pathlib import Path

import pandas as pd

from .config import get_settings
from .exceptions import GithubError, PatternTableError
from .github_client import GitHubClient
from .grouping import analyze_repositories
from .logging_config import setup_logging
from .models import RecommendationAction, RepoStatus
from .patterns import get_tech_patterns, get_theme_patterns
from .recommendations import generate_recommendations, get_recommendation_stats
from .stats import compute_dashboard_stats
from .store import RepositoryStore
from .sync import apply_topics, preview_topics, sync_repositories


def _client(args, settings):
    return GitHubClient.from_settings(settings, token=args.token)


def _resolve_user_id(args, store, settings):
    if args.user_id is not None:
        return args.user_id
    known = store.user_ids()
    if len(known) == 1:
        return known[0]
    return _client(args, settings).get_authenticated_user()["id"]


def _print_table(rows, columns):
    if not rows:
        print("(none)")
        return
    print(pd.DataFrame(rows, columns=columns).to_string(index=False))


def cmd_sync(args, settings, store):
    client = _client(args, settings)
    user_id = args.user_id if args.user_id is not None else client.get_authenticated_user()["id"]
    result = sync_repositories(user_id, client, store, retries=settings.GITHUB_MAX_RETRIES)
    if not result.success:
        print(f"Error: Sync failed. Details: {result.error}")
        return 1
    print(f"✅ Synced {result.total_repos} repositories ({result.new_repos} new, {result.updated_repos} updated).")
    return 0


def cmd_stats(args, settings, store):
    user_id = _resolve_user_id(args, store, settings)
    dashboard = compute_dashboard_stats(store.list_for_user(user_id), store.last_sync_at(user_id))
    for key, value in dashboard["stats"].items():
        print(f"{key.replace('_', ' ').title():<20} {value if value is not None else 'never'}")

    print("\nStatus distribution:")
    _print_table(dashboard["status_distribution"], ["status", "count", "percentage"])
    print("\nTop priority:")
    _print_table(
        [(r.full_name, r.effective_status, r.priority_score, r.open_issues_count) for r in dashboard["top_priority_repos"]],
        ["repository", "status", "priority", "open issues"],
    )
    return 0


def cmd_analyze(args, settings, store):
    user_id = _resolve_user_id(args, store, settings)
    analysis = analyze_repositories(
        store.list_for_user(user_id),
        tech_table=get_tech_patterns(settings),
        theme_table=get_theme_patterns(settings),
    )
    summary = analysis["summary"]
    print(
        f"{summary['total_repos']} repositories, {summary['languages']} languages, "
        f"{summary['technologies']} technologies, {summary['themes']} themes "
        f"({summary['app_themes']} application themes)"
    )
    print("\nTech stack:")
    _print_table([(t.name, t.category, t.count) for t in analysis["tech_stack"]], ["name", "category", "repos"])
    print("\nThemes:")
    _print_table(
        [(t.name, t.category, len(t.repositories), ", ".join(t.keywords)) for t in analysis["themes"]],
        ["theme", "category", "repos", "keywords"],
    )
    return 0


def cmd_recommend(args, settings, store):
    user_id = _resolve_user_id(args, store, settings)
    recommendations = generate_recommendations(store.list_for_user(user_id))
    if args.action:
        recommendations = [r for r in recommendations if r.action == args.action]

    df = pd.DataFrame(
        [
            {
                "repository": r.repository.full_name,
                "action": r.action,
                "confidence": r.confidence,
                "priority": r.priority,
                "reasons": "; ".join(r.reasons),
            }
            for r in recommendations
        ],
        columns=["repository", "action", "confidence", "priority", "reasons"],
    )
    if args.csv:
        try:
            output_path = Path(args.csv)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            df.to_csv(output_path, index=False)
            print(f"✅ Recommendations written to {output_path.resolve()}")
        except IOError as e:
            print(f"Error: Could not write to file {args.csv}. Details: {e}")
            return 1
    else:
        print(df.to_string(index=False) if not df.empty else "(none)")

    stats = get_recommendation_stats(recommendations)
    print(f"\n{stats['action_needed']} need action, {stats['high_confidence']} with high confidence.")
    return 0


def cmd_topics(args, settings, store):
    user_id = _resolve_user_id(args, store, settings)
    if args.apply:
        results = apply_topics(user_id, _client(args, settings), store, repo_ids=args.repo,
                               retries=settings.GITHUB_MAX_RETRIES)
    else:
        results = preview_topics(user_id, store, repo_ids=args.repo)

    _print_table(
        [(r.full_name, ", ".join(r.suggested_topics), r.applied, r.error or "") for r in results],
        ["repository", "topics", "applied", "error"],
    )
    return 1 if any(r.error for r in results) else 0


def _split_full_name(full_name):
    owner, _, name = full_name.partition("/")
    if not owner or not name:
        raise ValueError(f"Expected OWNER/NAME, got '{full_name}'")
    return owner, name


def cmd_archive(args, settings, store):
    owner, name = _split_full_name(args.full_name)
    _client(args, settings).archive_repository(owner, name)
    print(f"✅ Archived {owner}/{name}. Run 'sync' to refresh local data.")
    return 0


def cmd_delete(args, settings, store):
    owner, name = _split_full_name(args.full_name)
    if not args.yes:
        print(f"Error: Deleting {owner}/{name} cannot be undone. Pass --yes to confirm.")
        return 1
    _client(args, settings).delete_repository(owner, name)
    print(f"✅ Deleted {owner}/{name}.")
    return 0


def cmd_deprecate(args, settings, store):
    user_id = _resolve_user_id(args, store, settings)
    if store.get(user_id, args.repo_id) is None:
        print(f"Error: Repository {args.repo_id} not found. Run 'sync' first.")
        return 1
    status = None if args.clear else RepoStatus.DEPRECATED
    record = store.set_user_status(user_id, args.repo_id, status)
    print(f"✅ {record.full_name} is now {record.effective_status}.")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="repo-dashboard",
        description="Sync, score and clean up your GitHub repositories."
    )
    parser.add_argument(
        "--token",
        help="GitHub Personal Access Token. Can also be set via the GITHUB_TOKEN environment variable.",
        default=None
    )
    parser.add_argument("--user-id", type=int, default=None, help="Local user id (defaults to the token's GitHub user).")
    parser.add_argument("--log-level", default=None, help="Logging level, e.g. DEBUG or WARNING.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("sync", help="Fetch repositories from GitHub and score them.").set_defaults(func=cmd_sync)
    sub.add_parser("stats", help="Show dashboard statistics.").set_defaults(func=cmd_stats)
    sub.add_parser("analyze", help="Detect tech stack and themes.").set_defaults(func=cmd_analyze)

    recommend = sub.add_parser("recommend", help="Suggest repositories to archive, delete or review.")
    recommend.add_argument("--action", choices=RecommendationAction.ALL, default=None)
    recommend.add_argument("--csv", default=None, help="Write the recommendations to a CSV file.")
    recommend.set_defaults(func=cmd_recommend)

    topics = sub.add_parser("topics", help="Preview or apply generated topics.")
    topics.add_argument("--apply", action="store_true", help="Replace the topics on GitHub.")
    topics.add_argument("--repo", type=int, nargs="+", default=None, help="Only these repository ids.")
    topics.set_defaults(func=cmd_topics)

    archive = sub.add_parser("archive", help="Archive a repository on GitHub.")
    archive.add_argument("full_name", help="OWNER/NAME")
    archive.set_defaults(func=cmd_archive)

    delete = sub.add_parser("delete", help="Delete a repository on GitHub.")
    delete.add_argument("full_name", help="OWNER/NAME")
    delete.add_argument("--yes", action="store_true", help="Confirm the deletion.")
    delete.set_defaults(func=cmd_delete)

    deprecate = sub.add_parser("deprecate", help="Mark a repository as deprecated.")
    deprecate.add_argument("repo_id", type=int)
    deprecate.add_argument("--clear", action="store_true", help="Remove the deprecated mark.")
    deprecate.set_defaults(func=cmd_deprecate)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.log_level or settings.LOG_LEVEL, settings.LOG_FORMAT)
    store = RepositoryStore(settings.store_path)

    try:
        return args.func(args, settings, store)
    except (GithubError, PatternTableError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
