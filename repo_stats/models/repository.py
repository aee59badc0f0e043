# repo_stats/models/repository.py
"""
Immutable data models for repository statistics.

Raw GraphQL payloads are translated here so the services never
reach into response dictionaries for commit fields directly.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CommitRecord:
    """A single commit reachable from one or more branch refs."""
    oid: str                          # Commit hash
    author_login: Optional[str]       # None when the author has no linked account
    additions: int
    deletions: int

    @classmethod
    def from_graphql_response(cls, node: dict) -> 'CommitRecord':
        """
        Factory method to create CommitRecord from a GraphQL history node.

        Missing ``additions``/``deletions`` count as zero and a missing
        ``author.user`` leaves the login unset.
        """
        user = (node.get('author') or {}).get('user') or {}
        return cls(
            oid=str(node.get('oid', '')),
            author_login=user.get('login'),
            additions=int(node.get('additions') or 0),
            deletions=int(node.get('deletions') or 0)
        )

    def is_authored_by(self, login: str) -> bool:
        """Case-insensitive match against the linked user login."""
        if not self.author_login:
            return False
        return self.author_login.lower() == login.lower()


@dataclass(frozen=True)
class RepositoryCommitStats:
    """Line changes attributed to one author across deduplicated commits."""
    additions_count: int = 0
    deletions_count: int = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert to the public camelCase field names."""
        return {
            'totalAdditions': self.additions_count,
            'totalDeletions': self.deletions_count
        }


def repository_meta(repository: dict) -> Dict[str, Any]:
    """Copy repository fragment fields and derive ``starCount``."""
    return {
        **repository,
        'starCount': (repository.get('stargazers') or {}).get('totalCount', 0)
    }


def merge_repository_data(meta: Dict[str, Any], stats: RepositoryCommitStats) -> Dict[str, Any]:
    """Shallow union of metadata and commit statistics."""
    return {**meta, **stats.to_dict()}
