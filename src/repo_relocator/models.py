"""Data models for author rosters, rewrite plans and repositories."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class CommitIdentity:
    """An author or committer identity observed on a single commit."""

    email: str
    name: str


@dataclass
class AuthorRecord:
    """One email address as seen across a single repository's history.

    Commit hashes are kept as a set so a commit whose author and committer
    share an email is only counted once.
    """

    email: str
    names: set[str] = field(default_factory=set)
    commit_hashes: set[str] = field(default_factory=set)

    @property
    def commit_count(self) -> int:
        """Number of distinct commits this email appears on."""
        return len(self.commit_hashes)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON roster format."""
        return {
            "email": self.email,
            "names": sorted(self.names),
            "commitCount": self.commit_count,
        }


@dataclass
class GlobalAuthorRecord:
    """An email address merged across every repository in a run."""

    email: str
    names: set[str] = field(default_factory=set)
    commit_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON roster format."""
        return {
            "email": self.email,
            "names": sorted(self.names),
            "commitCount": self.commit_count,
        }


@dataclass
class RewriteIntent:
    """Operator-supplied description of which identities and text to rewrite."""

    old_author_emails: list[str] = field(default_factory=list)
    old_author_names: list[str] = field(default_factory=list)
    new_author_name: str | None = None
    new_author_email: str | None = None
    text_replacements: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RewritePlan:
    """Compiled artifacts handed to git filter-repo.

    Either part may be an empty string, meaning that step is skipped.
    """

    author_callback: str = ""
    text_replacements: str = ""

    @property
    def has_author_rewrite(self) -> bool:
        return bool(self.author_callback)

    @property
    def has_text_replacements(self) -> bool:
        return bool(self.text_replacements)

    @property
    def is_empty(self) -> bool:
        return not (self.has_author_rewrite or self.has_text_replacements)


@dataclass
class Repository:
    """A repository selected for migration."""

    name: str
    url: str
    branch: str
    path: Path
    backup_path: Path
    archived: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "branch": self.branch,
            "archived": self.archived,
            "path": str(self.path),
            "backupPath": str(self.backup_path),
        }


@dataclass
class CommitFetchResult:
    """Outcome of listing one repository's commits.

    A failed fetch carries a reason and no commits, so callers never have to
    inspect the raw payload shape.
    """

    ok: bool
    commits: list[dict[str, Any]] = field(default_factory=list)
    reason: str | None = None

    @classmethod
    def success(cls, commits: list[dict[str, Any]]) -> "CommitFetchResult":
        return cls(ok=True, commits=list(commits))

    @classmethod
    def failure(cls, reason: str) -> "CommitFetchResult":
        return cls(ok=False, reason=reason)
