"""Repository metadata and per-author commit statistics from GitHub's GraphQL API."""

from repo_stats.services import fetch_repo

__all__ = ['fetch_repo']
