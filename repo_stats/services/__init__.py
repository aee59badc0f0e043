# services package
from repo_stats.services.errors import (
    MissingParamError,
    NotFoundError,
    RepoStatsError,
    UnexpectedResponseError,
)
from repo_stats.services.repo_fetcher import RepoFetcherService, fetch_repo

__all__ = [
    'RepoFetcherService',
    'fetch_repo',
    'RepoStatsError',
    'MissingParamError',
    'NotFoundError',
    'UnexpectedResponseError',
]
