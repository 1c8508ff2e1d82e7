"""Author identity aggregation across repository histories."""

from .aggregator import aggregate, collect_identities, identities_from_commit, roster_for
from .merger import merge_all, sort_roster

__all__ = [
    "aggregate",
    "collect_identities",
    "identities_from_commit",
    "merge_all",
    "roster_for",
    "sort_roster",
]
