# repo_stats/services/repo_fetcher.py
"""
Repository data service orchestrating the three GitHub lookups.

Coordinates between the retry-wrapped GraphQL adapter and the pure
owner/commit logic without containing either.
"""

from typing import Any, Callable, Dict, Optional
import logging

from repo_stats.adapters.github_api import GitHubGraphQLAdapter
from repo_stats.adapters.retryer import FetchFn, TenacityRetryer
from repo_stats.config.settings import GitHubConfig
from repo_stats.models.repository import RepositoryCommitStats, merge_repository_data
from repo_stats.services.commit_reconciler import total_additions_and_deletions_by_user
from repo_stats.services.errors import MissingParamError, NotFoundError
from repo_stats.services.owner_resolver import resolve_owner

logger = logging.getLogger(__name__)

Retryer = Callable[[FetchFn, Dict[str, Any]], Dict[str, Any]]

URL_EXAMPLE = "/api/pin?username=USERNAME&amp;repo=REPO_NAME"


class RepoFetcherService:
    """
    Fetches repository metadata and one author's commit totals.

    ``retryer`` and ``fetcher`` are injectable so tests can run the
    whole flow without a network.
    """

    USER_ID_QUERY = """
    query userId($login: String!) {
        user(login: $login) {
            id
        }
    }
    """

    REPO_COMMITS_QUERY = """
    query repoCommits($login: String!, $repo: String!, $id: ID!) {
        repository(owner: $login, name: $repo) {
            refs(refPrefix: "refs/heads/", first: 100) {
                nodes {
                    name
                    target {
                        ... on Commit {
                            history(first: 100, author: {id: $id}) {
                                nodes {
                                    oid
                                    messageHeadline
                                    committedDate
                                    additions
                                    deletions
                                    author {
                                        user {
                                            id
                                            login
                                        }
                                    }
                                }
                            }
                        }
                    }
                }
            }
        }
    }
    """

    REPO_META_QUERY = """
    fragment RepoInfo on Repository {
        name
        nameWithOwner
        isPrivate
        isArchived
        isTemplate
        stargazers {
            totalCount
        }
        description
        primaryLanguage {
            color
            id
            name
        }
        forkCount
    }
    query getRepo($login: String!, $repo: String!) {
        user(login: $login) {
            repository(name: $repo) {
                ...RepoInfo
            }
        }
        organization(login: $login) {
            repository(name: $repo) {
                ...RepoInfo
            }
        }
    }
    """

    def __init__(
        self,
        github_config: GitHubConfig,
        retryer: Optional[Retryer] = None,
        adapter: Optional[GitHubGraphQLAdapter] = None
    ):
        """
        Initialize the fetcher service.

        Args:
            github_config: Configuration for GitHub API access
            retryer: Callable ``retryer(fetch_fn, payload)``; built from
                the config when omitted
            adapter: Request executor; built from the config when omitted
        """
        self._github_config = github_config
        self._retryer = retryer
        self._adapter = adapter

    def _ensure_initialized(self) -> None:
        """Lazy initialization of the transport."""
        if self._adapter is None:
            self._adapter = GitHubGraphQLAdapter(
                endpoint=self._github_config.graphql_endpoint,
                timeout=self._github_config.request_timeout
            )
        if self._retryer is None:
            self._retryer = TenacityRetryer(
                tokens=self._github_config.tokens,
                max_attempts=self._github_config.max_attempts,
                min_wait=self._github_config.retry_min_wait,
                max_wait=self._github_config.retry_max_wait
            )

    def _query(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        self._ensure_initialized()
        return self._retryer(self._adapter.fetch, {'query': query, 'variables': variables})

    def fetch_user_id(self, username: str) -> str:
        """Resolve a login to its GraphQL node id."""
        data = self._query(self.USER_ID_QUERY, {'login': username})
        user = data.get('user')
        if not user:
            raise NotFoundError('identity')
        return user['id']

    def fetch_repo_commits(self, username: str, reponame: str) -> RepositoryCommitStats:
        """
        Sum ``username``'s additions and deletions across every branch.

        Raises:
            NotFoundError: Unknown login, missing repository/refs, or no refs
        """
        user_id = self.fetch_user_id(username)

        data = self._query(
            self.REPO_COMMITS_QUERY,
            {'login': username, 'repo': reponame, 'id': user_id}
        )

        repository = data.get('repository')
        if not repository or not repository.get('refs'):
            raise NotFoundError('repository-or-refs')

        branches = repository['refs'].get('nodes') or []
        if not branches:
            raise NotFoundError('no-commits')

        logger.debug(f"Reconciling {len(branches)} branch histories for {username}/{reponame}")
        return total_additions_and_deletions_by_user(branches, username)

    def fetch_repo_meta(self, username: str, reponame: str) -> Dict[str, Any]:
        """Fetch repository attributes from whichever namespace owns it."""
        data = self._query(self.REPO_META_QUERY, {'login': username, 'repo': reponame})
        return resolve_owner(data, username, reponame)

    def fetch_repo(self, username: str, reponame: str) -> Dict[str, Any]:
        """
        Fetch metadata and commit totals and merge them into one record.

        Args:
            username: GitHub login owning the repository (and authoring commits)
            reponame: Repository name

        Returns:
            Repository fields, ``starCount``, ``totalAdditions`` and
            ``totalDeletions``

        Raises:
            MissingParamError: ``username`` and/or ``reponame`` empty
            NotFoundError: See ``NotFoundError.MESSAGES`` for the kinds
            UnexpectedResponseError: Both owner namespaces populated
        """
        missing = []
        if not username:
            missing.append('username')
        if not reponame:
            missing.append('repo')
        if missing:
            raise MissingParamError(missing, URL_EXAMPLE)

        logger.info(f"Fetching repository data for {username}/{reponame}")
        repo_meta = self.fetch_repo_meta(username, reponame)
        repo_commits = self.fetch_repo_commits(username, reponame)

        return merge_repository_data(repo_meta, repo_commits)

    def close(self) -> None:
        """Release the HTTP session if one was opened."""
        if self._adapter is not None:
            self._adapter.close()
            self._adapter = None

    def __enter__(self) -> 'RepoFetcherService':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def fetch_repo(
    username: str,
    reponame: str,
    github_config: Optional[GitHubConfig] = None
) -> Dict[str, Any]:
    """Fetch repository data using configuration from the environment."""
    with RepoFetcherService(github_config or GitHubConfig.from_env()) as service:
        return service.fetch_repo(username, reponame)
