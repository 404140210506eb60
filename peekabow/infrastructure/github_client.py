import aiohttp
import asyncio
import logging
from typing import Dict, Any, Tuple, List, Optional

from peekabow.domain.models import EnrichedIssue, RepositoryRef
from peekabow.domain.exceptions import (
    AuthenticationException,
    NotFoundException,
    QueryRejectedException,
    ServiceUnavailableException,
    UnexpectedResponseException,
)
from peekabow.infrastructure.acl import GitHubTranslator

logger = logging.getLogger(__name__)

SERVICE_NAME = "GitHub"

# Resolves owner/name into the numeric id ZenHub keys its boards by.
REPOSITORY_ID_QUERY = """
query ($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    databaseId
  }
}
"""

# Only the Issue variant is consulted; pull requests come back as an empty object.
ISSUE_QUERY = """
query ($owner: String!, $repo: String!, $number: Int!) {
  repository(owner: $owner, name: $repo) {
    issueOrPullRequest(number: $number) {
      ... on Issue {
        title
        url
      }
    }
  }
}
"""

class GitHubGraphQLClient:
    """
    Client for interacting with the GitHub GraphQL API.
    Handles authentication, query execution and error classification.
    """

    def __init__(self, token: str):
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": "peekabow",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self.api_url = "https://api.github.com/graphql"

    async def execute(
        self,
        session: aiohttp.ClientSession,
        query: str,
        variables: Dict[str, Any],
        call: str,
    ) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Runs a single GraphQL query.

        `call` names the lookup (e.g. "lookup of #7") and prefixes every error
        raised here, so a failure tells which request went wrong.

        Returns:
            Tuple of (data, errors). GraphQL-level errors can accompany HTTP 200,
            so classifying them is left to the caller.
        """
        payload = {"query": query, "variables": variables}
        try:
            async with session.post(self.api_url, json=payload, headers=self.headers) as response:
                if response.status in {401, 403}:
                    raise AuthenticationException(SERVICE_NAME, f"{call}: token rejected (HTTP {response.status})")

                if not 200 <= response.status < 300:
                    raise ServiceUnavailableException(
                        SERVICE_NAME, f"{call}: GraphQL endpoint answered HTTP {response.status}", status=response.status
                    )

                try:
                    body = await response.json(content_type=None)
                except ValueError as e:
                    raise UnexpectedResponseException(SERVICE_NAME, f"{call}: response is not JSON: {e}") from e

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ServiceUnavailableException(SERVICE_NAME, f"{call}: request failed: {e}") from e

        if not isinstance(body, dict):
            raise UnexpectedResponseException(SERVICE_NAME, f"{call}: response is not a JSON object")

        data = body.get('data')
        errors = body.get('errors') or []
        if data is None and not errors:
            raise UnexpectedResponseException(SERVICE_NAME, f"{call}: response has neither data nor errors")
        if data is not None and not isinstance(data, dict):
            raise UnexpectedResponseException(SERVICE_NAME, f"{call}: data is not a JSON object")

        return data or {}, errors

    async def fetch_repository_id(self, session: aiohttp.ClientSession, repository: RepositoryRef) -> int:
        call = f"repository id of {repository.full_name}"
        data, errors = await self.execute(
            session, REPOSITORY_ID_QUERY, {"owner": repository.owner, "repo": repository.name}, call
        )

        if errors:
            if any(error.get('type') == 'NOT_FOUND' for error in errors):
                raise NotFoundException(SERVICE_NAME, f"{call}: repository not found")
            error_msg = errors[0].get('message', 'Unknown GraphQL error')
            raise QueryRejectedException(SERVICE_NAME, f"{call}: {error_msg}")

        if 'repository' not in data:
            raise UnexpectedResponseException(SERVICE_NAME, f"{call}: response has no repository field")

        if data['repository'] is None:
            raise NotFoundException(SERVICE_NAME, f"{call}: repository not found")

        return GitHubTranslator.to_repository_id(data)

    async def fetch_issue(
        self,
        session: aiohttp.ClientSession,
        repository: RepositoryRef,
        number: int,
    ) -> Optional[EnrichedIssue]:
        """
        Looks up the title and URL of one issue.

        Returns None when GitHub reports that no issue or pull request has this
        number. Any other GraphQL error or a response without a repository
        object is raised.
        """
        call = f"lookup of #{number} in {repository.full_name}"
        data, errors = await self.execute(
            session,
            ISSUE_QUERY,
            {"owner": repository.owner, "repo": repository.name, "number": number},
            call,
        )

        if errors:
            if all(_is_missing_issue(error) for error in errors):
                logger.info(f"GitHub has no issue #{number} in {repository.full_name}.")
                return None
            error_msg = errors[0].get('message', 'Unknown GraphQL error')
            raise QueryRejectedException(SERVICE_NAME, f"{call} failed: {error_msg}")

        if not isinstance(data.get('repository'), dict):
            raise UnexpectedResponseException(SERVICE_NAME, f"{call}: response has no repository object")

        return GitHubTranslator.to_enriched_issue(number, data)


def _is_missing_issue(error: Dict[str, Any]) -> bool:
    path = error.get('path') or []
    return error.get('type') == 'NOT_FOUND' and bool(path) and path[-1] == 'issueOrPullRequest'
