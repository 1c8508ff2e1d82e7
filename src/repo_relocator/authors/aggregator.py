"""Per-repository author roster aggregation.

Turns a commit listing from the hosting API into one AuthorRecord per
distinct email address. Emails are compared exactly; differently cased
addresses are separate identities.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from repo_relocator.models import AuthorRecord, CommitFetchResult, CommitIdentity


def _identity(field: Any) -> CommitIdentity | None:
    if not isinstance(field, Mapping):
        return None
    email = field.get("email")
    if email is None:
        return None
    return CommitIdentity(email=str(email), name=str(field.get("name") or ""))


def identities_from_commit(commit: Mapping[str, Any]) -> list[CommitIdentity]:
    """Extract the author and committer identities of one commit entry.

    Args:
        commit: Commit entry shaped like the GitHub commits endpoint
            ({"sha": ..., "commit": {"author": {...}, "committer": {...}}})

    Returns:
        Zero to two identities, author first
    """
    details = commit.get("commit")
    if not isinstance(details, Mapping):
        return []
    identities = []
    for role in ("author", "committer"):
        identity = _identity(details.get(role))
        if identity is not None:
            identities.append(identity)
    return identities


def collect_identities(
    commits: Iterable[Mapping[str, Any]],
    roster: dict[str, AuthorRecord] | None = None,
) -> dict[str, AuthorRecord]:
    """Fold commit identities into an email-keyed roster.

    Args:
        commits: Commit entries to observe
        roster: Existing roster to extend (a new one is created if None)

    Returns:
        The roster mapping email -> AuthorRecord
    """
    if roster is None:
        roster = {}

    for commit in commits:
        if not isinstance(commit, Mapping):
            continue
        sha = commit.get("sha")
        if not sha or not isinstance(sha, str):
            continue
        for identity in identities_from_commit(commit):
            record = roster.get(identity.email)
            if record is None:
                record = roster[identity.email] = AuthorRecord(email=identity.email)
            record.names.add(identity.name)
            record.commit_hashes.add(sha)

    return roster


def aggregate(commits: Iterable[Mapping[str, Any]]) -> list[AuthorRecord]:
    """Build the deduplicated author roster for one repository."""
    return list(collect_identities(commits).values())


def roster_for(result: CommitFetchResult) -> list[AuthorRecord]:
    """Roster for a fetch result; failed fetches contribute nobody."""
    if not result.ok:
        return []
    return aggregate(result.commits)
