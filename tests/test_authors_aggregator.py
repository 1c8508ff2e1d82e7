"""Tests for the per-repository author aggregator."""

from typing import Any

from repo_relocator.authors.aggregator import (
    aggregate,
    collect_identities,
    identities_from_commit,
    roster_for,
)
from repo_relocator.authors.merger import merge_all
from repo_relocator.models import CommitFetchResult, CommitIdentity


def make_commit(
    sha: str,
    author: tuple[str, str],
    committer: tuple[str, str] | None = None,
) -> dict[str, Any]:
    """Build a commit entry shaped like the GitHub commits endpoint."""
    committer = committer or author
    return {
        "sha": sha,
        "commit": {
            "author": {"name": author[0], "email": author[1], "date": "2024-01-01T00:00:00Z"},
            "committer": {"name": committer[0], "email": committer[1], "date": "2024-01-01T00:00:00Z"},
        },
    }


def by_email(records: list) -> dict:
    return {r.email: r for r in records}


class TestIdentitiesFromCommit:
    """Tests for identities_from_commit function."""

    def test_returns_author_then_committer(self) -> None:
        """Should yield the author identity before the committer identity."""
        commit = make_commit("a1", ("Alice", "alice@example.com"), ("GitHub", "noreply@github.com"))

        assert identities_from_commit(commit) == [
            CommitIdentity(email="alice@example.com", name="Alice"),
            CommitIdentity(email="noreply@github.com", name="GitHub"),
        ]

    def test_skips_missing_fields(self) -> None:
        """Should ignore author/committer fields that are absent or malformed."""
        commit = {"sha": "a1", "commit": {"author": None, "committer": {"name": "Bob", "email": "bob@example.com"}}}

        assert identities_from_commit(commit) == [CommitIdentity(email="bob@example.com", name="Bob")]

    def test_returns_empty_without_commit_details(self) -> None:
        """Should return nothing when the commit details are missing."""
        assert identities_from_commit({"sha": "a1"}) == []


class TestAggregate:
    """Tests for aggregate function."""

    def test_author_and_committer_same_email_counted_once(self) -> None:
        """A commit with one email as both author and committer counts once."""
        commits = [make_commit("a1", ("Alice", "alice@example.com"), ("Alice Smith", "alice@example.com"))]

        roster = aggregate(commits)

        assert len(roster) == 1
        assert roster[0].commit_count == 1
        assert roster[0].names == {"Alice", "Alice Smith"}

    def test_groups_by_exact_email(self) -> None:
        """Emails differing only in case stay separate identities."""
        commits = [
            make_commit("a1", ("Alice", "alice@example.com")),
            make_commit("a2", ("Alice", "Alice@Example.com")),
        ]

        records = by_email(aggregate(commits))

        assert set(records) == {"alice@example.com", "Alice@Example.com"}
        assert records["alice@example.com"].commit_count == 1
        assert records["Alice@Example.com"].commit_count == 1

    def test_counts_distinct_commits_per_email(self) -> None:
        """Should count every distinct commit an email appears on."""
        commits = [
            make_commit("a1", ("Alice", "alice@example.com"), ("GitHub", "noreply@github.com")),
            make_commit("a2", ("Alice", "alice@example.com"), ("GitHub", "noreply@github.com")),
            make_commit("a3", ("Bob", "bob@example.com")),
        ]

        records = by_email(aggregate(commits))

        assert records["alice@example.com"].commit_count == 2
        assert records["noreply@github.com"].commit_count == 2
        assert records["bob@example.com"].commit_count == 1
        assert records["noreply@github.com"].commit_hashes == {"a1", "a2"}

    def test_empty_commit_list_yields_empty_roster(self) -> None:
        """Should produce no records without observations."""
        assert aggregate([]) == []

    def test_skips_commits_without_sha(self) -> None:
        """Commits without a hash cannot be counted and are ignored."""
        commit = make_commit("", ("Alice", "alice@example.com"))

        assert aggregate([commit]) == []

    def test_skips_malformed_entries(self) -> None:
        """Entries that are not commit objects, or carry odd hashes, are ignored."""
        bad_sha = make_commit("a0", ("Mallory", "mallory@example.com"))
        bad_sha["sha"] = ["not", "hashable"]
        commits = ["oops", None, 42, bad_sha, make_commit("a1", ("Alice", "alice@example.com"))]

        roster = aggregate(commits)

        assert [(r.email, r.commit_count) for r in roster] == [("alice@example.com", 1)]

    def test_reaggregation_does_not_double_count(self) -> None:
        """Folding the same commits twice leaves commit counts unchanged."""
        commits = [
            make_commit("a1", ("Alice", "alice@example.com")),
            make_commit("a2", ("Alice", "alice@example.com"), ("Bob", "bob@example.com")),
        ]

        once = by_email(aggregate(commits))
        twice = by_email(list(collect_identities(commits, collect_identities(commits)).values()))

        assert {e: r.commit_count for e, r in once.items()} == {e: r.commit_count for e, r in twice.items()}


class TestCollectIdentities:
    """Tests for collect_identities function."""

    def test_extends_existing_roster(self) -> None:
        """Should add observations to a roster passed in."""
        roster = collect_identities([make_commit("a1", ("Alice", "alice@example.com"))])
        result = collect_identities([make_commit("a2", ("Ali", "alice@example.com"))], roster)

        assert result is roster
        assert roster["alice@example.com"].commit_hashes == {"a1", "a2"}
        assert roster["alice@example.com"].names == {"Alice", "Ali"}

    def test_fresh_roster_per_call(self) -> None:
        """Separate calls must not share state."""
        first = collect_identities([make_commit("a1", ("Alice", "alice@example.com"))])
        second = collect_identities([make_commit("b1", ("Bob", "bob@example.com"))])

        assert set(first) == {"alice@example.com"}
        assert set(second) == {"bob@example.com"}


class TestRosterFor:
    """Tests for roster_for function."""

    def test_failed_fetch_yields_empty_roster(self) -> None:
        """A failed fetch contributes no authors."""
        assert roster_for(CommitFetchResult.failure("Git Repository is empty.")) == []

    def test_successful_fetch_is_aggregated(self) -> None:
        """A successful fetch is aggregated normally."""
        result = CommitFetchResult.success([make_commit("a1", ("Alice", "alice@example.com"))])

        roster = roster_for(result)

        assert [r.email for r in roster] == ["alice@example.com"]

    def test_merged_roster_matches_single_aggregation(self) -> None:
        """Merging a roster with an empty one keeps its counts."""
        roster = roster_for(CommitFetchResult.success([make_commit("a1", ("Alice", "alice@example.com"))]))
        empty = roster_for(CommitFetchResult.failure("boom"))

        merged = merge_all([("repo", roster), ("broken", empty)])

        assert [(r.email, r.commit_count) for r in merged] == [("alice@example.com", 1)]
