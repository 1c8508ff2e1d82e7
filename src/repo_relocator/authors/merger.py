"""Cross-repository author roster merging."""

from collections.abc import Iterable

from repo_relocator.models import AuthorRecord, GlobalAuthorRecord


def merge_all(
    per_repo_rosters: Iterable[tuple[str, list[AuthorRecord]]],
) -> list[GlobalAuthorRecord]:
    """Merge per-repository rosters into one global roster keyed by email.

    Names are unioned and commit counts summed. Commits in different
    repositories are never collapsed, even if their hashes match.

    Args:
        per_repo_rosters: (repository name, roster) pairs

    Returns:
        One GlobalAuthorRecord per email, in no particular order
    """
    merged: dict[str, GlobalAuthorRecord] = {}
    for _repo, roster in per_repo_rosters:
        for record in roster:
            entry = merged.get(record.email)
            if entry is None:
                entry = merged[record.email] = GlobalAuthorRecord(email=record.email)
            entry.names |= record.names
            entry.commit_count += record.commit_count
    return list(merged.values())


def sort_roster(records: Iterable[GlobalAuthorRecord]) -> list[GlobalAuthorRecord]:
    """Sort by email for stable output."""
    return sorted(records, key=lambda r: r.email)
