from typing import Any, Dict, Optional
from pydantic import ValidationError

from peekabow.domain.models import Board, EnrichedIssue
from peekabow.domain.exceptions import UnexpectedResponseException

class GitHubTranslator:
    """
    Anti-corruption layer that translates raw GitHub GraphQL JSON responses into domain values.
    """

    @staticmethod
    def to_repository_id(raw_data: Dict[str, Any]) -> int:
        """
        Extracts the numeric database id from a `repository { databaseId }` response.

        Args:
            raw_data (Dict[str, Any]): The `data` object of the GraphQL response.

        Returns:
            int: The repository's numeric id, the key ZenHub uses for boards.
        """
        repository = raw_data.get('repository') or {}
        database_id = repository.get('databaseId')
        # bool is an int subclass; a JSON true is not an id
        if not isinstance(database_id, int) or isinstance(database_id, bool):
            raise UnexpectedResponseException("GitHub", f"repository.databaseId is not an integer: {database_id!r}")
        return database_id

    @staticmethod
    def to_enriched_issue(number: int, raw_data: Dict[str, Any]) -> Optional[EnrichedIssue]:
        """
        Transforms an `issueOrPullRequest { ... on Issue { title url } }` response into an EnrichedIssue.

        Pull requests match no fragment and come back as an empty object, which
        yields an issue with an empty title. A null entity yields None.
        """
        repository = raw_data.get('repository') or {}
        entity = repository.get('issueOrPullRequest')
        if entity is None:
            return None
        if not isinstance(entity, dict):
            raise UnexpectedResponseException("GitHub", f"issueOrPullRequest #{number} is not an object: {entity!r}")

        try:
            return EnrichedIssue(
                number=number,
                title=entity.get('title') or '',
                url=entity.get('url') or '',
            )
        except ValidationError as e:
            raise UnexpectedResponseException("GitHub", f"issue #{number} has an unexpected shape: {e}") from e

class ZenHubTranslator:
    """
    Anti-corruption layer for the ZenHub board endpoint.
    """

    @staticmethod
    def to_board(raw_body: Any) -> Board:
        try:
            return Board.model_validate(raw_body)
        except ValidationError as e:
            raise UnexpectedResponseException("ZenHub", f"board response has an unexpected shape: {e}") from e
