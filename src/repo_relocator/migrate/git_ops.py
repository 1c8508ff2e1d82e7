"""Git and git filter-repo command wrappers."""

import shutil
import subprocess
from pathlib import Path

from repo_relocator.logging import get_logger

logger = get_logger("git")


class GitCommandError(Exception):
    """Raised when a git command exits with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stderr: str) -> None:
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"git {' '.join(args)} failed with exit code {returncode}: {stderr.strip()}")


def run_git(args: list[str], cwd: Path, timeout_s: int = 3600) -> str:
    """Run a git command and return its stdout.

    Raises:
        GitCommandError: If git exits with a non-zero status
    """
    logger.debug("Running git: cwd=%s args=%s", cwd, args[:2])
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        timeout=timeout_s,
        check=False,
    )
    if proc.returncode != 0:
        raise GitCommandError(args, proc.returncode, proc.stderr)
    return proc.stdout


def clone(url: str, dest: Path) -> None:
    """Clone a repository into dest, which must not exist yet."""
    if dest.exists():
        raise FileExistsError(f"Clone destination already exists: {dest}")
    dest.parent.mkdir(parents=True, exist_ok=True)
    run_git(["clone", url, str(dest)], cwd=dest.parent)


def backup_copy(repo_path: Path, backup_path: Path) -> None:
    """Copy a freshly cloned repository before its history is rewritten."""
    if backup_path.exists():
        raise FileExistsError(f"Backup destination already exists: {backup_path}")
    backup_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(repo_path, backup_path, symlinks=True)


def apply_author_callback(repo_path: Path, callback: str) -> None:
    """Rewrite commit authorship with a filter-repo commit callback."""
    run_git(["filter-repo", "--force", "--commit-callback", callback], cwd=repo_path)


def apply_text_replacements(repo_path: Path, expressions_file: Path) -> None:
    """Scrub text from every blob with a filter-repo replace-text file."""
    run_git(
        ["filter-repo", "--force", "--replace-text", str(expressions_file)],
        cwd=repo_path,
    )


def add_remote(repo_path: Path, url: str, name: str = "origin") -> None:
    """Add a remote, replacing it if it is still configured.

    filter-repo drops the origin remote after rewriting, so it has to be
    re-added before pushing.
    """
    remotes = run_git(["remote"], cwd=repo_path).split()
    if name in remotes:
        run_git(["remote", "remove", name], cwd=repo_path)
    run_git(["remote", "add", name, url], cwd=repo_path)


def push(repo_path: Path, branch: str, remote: str = "origin") -> None:
    """Force-push a branch and set it as upstream."""
    run_git(["push", "-u", remote, branch, "--force"], cwd=repo_path)
