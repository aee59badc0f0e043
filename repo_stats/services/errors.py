# repo_stats/services/errors.py
"""Errors surfaced to callers of the repository fetcher."""

from typing import Sequence


class RepoStatsError(Exception):
    """Base class for repository statistics failures."""
    pass


class MissingParamError(RepoStatsError):
    """Raised before any request when required parameters are absent."""

    def __init__(self, missing_params: Sequence[str], secondary_message: str = ''):
        self.missing_params = list(missing_params)
        self.secondary_message = secondary_message
        quoted = ', '.join(f'"{param}"' for param in self.missing_params)
        super().__init__(f"Missing params {quoted} make sure you pass the parameters in URL")


class NotFoundError(RepoStatsError):
    """Raised when a lookup resolves to nothing usable."""

    MESSAGES = {
        'owner': 'Not found',
        'user-repository': 'User Repository Not found',
        'organization-repository': 'Organization Repository Not found',
        'identity': 'Not found',
        'repository-or-refs': 'Repository or refs not found',
        'no-commits': 'No commits found',
    }

    def __init__(self, kind: str):
        if kind not in self.MESSAGES:
            raise ValueError(f"Unknown not-found kind: {kind}")
        self.kind = kind
        super().__init__(self.MESSAGES[kind])


class UnexpectedResponseError(RepoStatsError):
    """Raised when GitHub returns a shape the lookup contract rules out."""

    def __init__(self, message: str = 'Unexpected behavior'):
        super().__init__(message)
