# repo_stats/services/commit_reconciler.py
"""
Merges commit histories fetched per branch ref.

A commit reachable from several branches shows up once per branch.
Two nodes are the same commit only when every field matches, so a
node sharing an ``oid`` but differing elsewhere is kept.
"""

import json
import logging
from typing import Iterable, List

from repo_stats.models.repository import CommitRecord, RepositoryCommitStats

logger = logging.getLogger(__name__)


def _history_nodes(branch: dict) -> list:
    # Non-commit targets (e.g. a ref pointing at a tag object) have no history
    history = ((branch or {}).get('target') or {}).get('history') or {}
    return history.get('nodes') or []


def _structural_key(node: dict) -> str:
    return json.dumps(node, sort_keys=True, separators=(',', ':'))


def dedupe_commits(branches: Iterable[dict]) -> List[dict]:
    """
    Flatten branch histories and drop structurally identical nodes.

    Survivors keep their first-seen order.
    """
    unique = {}
    total = 0
    for branch in branches:
        for node in _history_nodes(branch):
            total += 1
            unique.setdefault(_structural_key(node), node)

    logger.debug(f"Deduplicated {total} commit nodes down to {len(unique)}")
    return list(unique.values())


def total_additions_and_deletions_by_user(
    branches: Iterable[dict],
    username: str
) -> RepositoryCommitStats:
    """Sum additions and deletions of ``username``'s unique commits."""
    additions_count = 0
    deletions_count = 0

    for node in dedupe_commits(branches):
        commit = CommitRecord.from_graphql_response(node)
        if commit.is_authored_by(username):
            additions_count += commit.additions
            deletions_count += commit.deletions

    return RepositoryCommitStats(
        additions_count=additions_count,
        deletions_count=deletions_count
    )
