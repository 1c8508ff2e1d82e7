"""Migration orchestration: discovery, author review, rewrite and push.

Each repository is processed independently; a failure in one repository
is logged and the run moves on to the next.
"""

import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any

from repo_relocator.authors import merge_all, roster_for, sort_roster
from repo_relocator.config import Config
from repo_relocator.hosting.github import GitHubClient, select_clone_url
from repo_relocator.logging import get_logger
from repo_relocator.migrate import git_ops
from repo_relocator.models import AuthorRecord, Repository, RewritePlan
from repo_relocator.rewrite import compile_plan, unsafe_literals

logger = get_logger("orchestrator")

REPO_DETAILS_FILE = "repo-details.json"
AUTHORS_FILE = "authors.json"
AUTHOR_CALLBACK_FILE = "author-callback.py"
EXPRESSIONS_FILE = "expressions.txt"


def target_url(repo_name: str, source_url: str, target_owner: str | None, protocol: str) -> str:
    """Remote URL the rewritten repository is pushed to."""
    if not target_owner:
        return source_url
    if protocol == "ssh":
        return f"git@github.com:{target_owner}/{repo_name}.git"
    return f"https://github.com/{target_owner}/{repo_name}.git"


def discover_repositories(client: GitHubClient, config: Config) -> list[Repository]:
    """List the source account's repositories and lay out their local paths."""
    repos = []
    for item in client.list_repositories():
        repos.append(
            Repository(
                name=item["name"],
                url=select_clone_url(item, config.protocol),
                branch=item.get("default_branch") or "main",
                archived=bool(item.get("archived")),
                path=config.repos_path / item["name"],
                backup_path=config.backups_path / item["name"],
            )
        )
    return repos


def _fetch_roster(client: GitHubClient, repo: Repository) -> list[AuthorRecord]:
    try:
        result = client.fetch_commits(repo.name)
        if not result.ok:
            logger.warning("Could not list commits, treating as empty: repo=%s reason=%s", repo.name, result.reason)
        return roster_for(result)
    except Exception:
        logger.exception("Error collecting authors, treating as empty: repo=%s", repo.name)
        return []


def collect_authors(
    client: GitHubClient,
    repos: list[Repository],
    jobs: int = 8,
) -> dict[str, list[AuthorRecord]]:
    """Fetch and aggregate every repository's author roster concurrently.

    Returns:
        Mapping of repository name -> roster
    """
    rosters: dict[str, list[AuthorRecord]] = {}
    with ThreadPoolExecutor(max_workers=max(1, jobs)) as ex:
        futs = {ex.submit(_fetch_roster, client, repo): repo for repo in repos}
        for i, fut in enumerate(as_completed(futs), start=1):
            repo = futs[fut]
            rosters[repo.name] = fut.result()
            if i % 10 == 0 or i == len(futs):
                logger.info("Collected authors: %d/%d repositories", i, len(futs))
    return rosters


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=4, ensure_ascii=False) + "\n", encoding="utf-8")


def run_get_authors(client: GitHubClient, config: Config, repos: list[Repository]) -> dict[str, int]:
    """Write repo-details.json and authors.json for operator review."""
    rosters = collect_authors(client, repos, config.jobs)

    details = []
    for repo in repos:
        roster = sorted(rosters.get(repo.name, []), key=lambda r: r.email)
        details.append({**repo.to_dict(), "authors": [r.to_dict() for r in roster]})

    global_roster = sort_roster(merge_all((repo.name, rosters.get(repo.name, [])) for repo in repos))

    _write_json(config.repos_path / REPO_DETAILS_FILE, details)
    _write_json(config.repos_path / AUTHORS_FILE, [r.to_dict() for r in global_roster])

    logger.info(
        "Wrote author review files: repos=%d authors=%d dir=%s",
        len(repos),
        len(global_roster),
        config.repos_path,
    )
    return {"repos": len(repos), "authors": len(global_roster)}


def write_plan_files(plan: RewritePlan, repos_path: Path) -> tuple[Path | None, Path | None]:
    """Write the non-empty halves of a plan next to the clones.

    Returns:
        (callback path, expressions path), None for each skipped half
    """
    repos_path.mkdir(parents=True, exist_ok=True)
    callback_path = None
    expressions_path = None
    if plan.has_author_rewrite:
        callback_path = repos_path / AUTHOR_CALLBACK_FILE
        callback_path.write_text(plan.author_callback, encoding="utf-8")
    if plan.has_text_replacements:
        expressions_path = repos_path / EXPRESSIONS_FILE
        expressions_path.write_text(plan.text_replacements, encoding="utf-8")
    return callback_path, expressions_path


def rewrite_repository(
    repo: Repository,
    plan: RewritePlan,
    expressions_path: Path | None,
    config: Config,
) -> None:
    """Clone, back up and rewrite one repository, then point it at its target."""
    git_ops.clone(repo.url, repo.path)

    if config.create_backups:
        git_ops.backup_copy(repo.path, repo.backup_path)

    if plan.has_author_rewrite:
        git_ops.apply_author_callback(repo.path, plan.author_callback)

    if expressions_path is not None:
        git_ops.apply_text_replacements(repo.path, expressions_path)

    git_ops.add_remote(
        repo.path,
        target_url(repo.name, repo.url, config.target_owner, config.protocol),
    )


def run_rewrite(config: Config, repos: list[Repository]) -> list[Repository]:
    """Clone and rewrite every repository locally without pushing.

    Returns:
        The repositories that were rewritten successfully
    """
    rewritten = []

    for value in unsafe_literals(config.rewrite):
        logger.warning("Rewrite value is embedded unescaped and may break the callback: value=%r", value)

    plan = compile_plan(config.rewrite)
    if plan.is_empty:
        logger.warning("Rewrite plan is empty; repositories will only be cloned")
    _, expressions_path = write_plan_files(plan, config.repos_path)
    config.backups_path.mkdir(parents=True, exist_ok=True)

    for repo in repos:
        try:
            rewrite_repository(repo, plan, expressions_path, config)
            rewritten.append(repo)
            logger.info("Rewrote repository: repo=%s", repo.name)
        except Exception:
            logger.exception("Error rewriting repository: repo=%s", repo.name)

    return rewritten


def run_push(repos: list[Repository]) -> dict[str, int]:
    """Force-push every rewritten repository's default branch.

    Repositories without a local clone are skipped.
    """
    totals = {"pushed": 0, "skipped": 0, "failed": 0}
    for repo in repos:
        if not repo.path.exists():
            totals["skipped"] += 1
            logger.warning("No local clone, skipping push: repo=%s path=%s", repo.name, repo.path)
            continue
        try:
            git_ops.push(repo.path, repo.branch)
            totals["pushed"] += 1
            logger.info("Pushed repository: repo=%s branch=%s", repo.name, repo.branch)
        except Exception:
            totals["failed"] += 1
            logger.exception("Error pushing repository: repo=%s", repo.name)
    return totals


def run_migration(config: Config, client: GitHubClient | None = None) -> dict[str, int]:
    """Run the configured mode end to end.

    Returns:
        Dict with counts: {"repos", "authors", "rewritten", "pushed", "skipped", "failed"}
    """
    if client is None:
        client = GitHubClient(config.github_username, config.github_token, api_url=config.api_url)

    if not config.github_token:
        logger.warning("No GitHub token configured; private repositories will not be included")

    logger.info(
        "Starting migration: mode=%s user=%s target=%s workdir=%s",
        config.mode,
        config.github_username,
        config.target_owner or config.github_username,
        config.working_directory,
    )

    repos = discover_repositories(client, config)
    totals = {"repos": len(repos), "authors": 0, "rewritten": 0, "pushed": 0, "skipped": 0, "failed": 0}

    if config.mode == "get-authors":
        totals["authors"] = run_get_authors(client, config, repos)["authors"]
        return totals

    to_push = repos
    if config.mode in ("dry", "yolo"):
        # Only successfully rewritten clones may be pushed
        to_push = run_rewrite(config, repos)
        totals["rewritten"] = len(to_push)
        totals["failed"] += len(repos) - len(to_push)

    if config.mode in ("apply", "yolo"):
        result = run_push(to_push)
        totals["pushed"] = result["pushed"]
        totals["skipped"] = result["skipped"]
        totals["failed"] += result["failed"]

    logger.info(
        "Migration complete: repos=%d rewritten=%d pushed=%d skipped=%d failed=%d",
        totals["repos"],
        totals["rewritten"],
        totals["pushed"],
        totals["skipped"],
        totals["failed"],
    )
    return totals
