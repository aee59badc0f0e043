# repo_stats/services/owner_resolver.py
"""
Decides whether a repository lives under a user or an organization.

The metadata query asks both namespaces at once; at most one of them
is expected to come back populated.
"""

import logging
from typing import Any, Dict

from repo_stats.models.repository import repository_meta
from repo_stats.services.errors import NotFoundError, UnexpectedResponseError

logger = logging.getLogger(__name__)


def _visible_repository(owner: dict, kind: str) -> Dict[str, Any]:
    repository = owner.get('repository')
    # Only the documented nesting (owner.repository.isPrivate) is checked.
    if not repository or repository.get('isPrivate'):
        raise NotFoundError(kind)
    return repository_meta(repository)


def resolve_owner(data: dict, username: str, reponame: str) -> Dict[str, Any]:
    """
    Pick the owner namespace holding ``reponame``.

    Args:
        data: ``data`` object of the metadata query (``user``/``organization``)
        username: Requested owner login
        reponame: Requested repository name

    Returns:
        Repository fields plus ``starCount``

    Raises:
        NotFoundError: Owner unknown, or repository missing/private
        UnexpectedResponseError: Both namespaces populated
    """
    user = data.get('user')
    organization = data.get('organization')

    if user is None and organization is None:
        raise NotFoundError('owner')

    if user is not None and organization is None:
        return _visible_repository(user, 'user-repository')

    if organization is not None and user is None:
        return _visible_repository(organization, 'organization-repository')

    logger.error(
        f"Both user and organization resolved for {username}/{reponame}; "
        f"upstream response violates the single-owner contract"
    )
    raise UnexpectedResponseError()
