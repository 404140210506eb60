import asyncio
import logging
from typing import AsyncIterator, List, Optional

import aiohttp

from peekabow.domain.models import EnrichedIssue, Pipeline, RepositoryRef
from peekabow.infrastructure.github_client import GitHubGraphQLClient

logger = logging.getLogger(__name__)

# Queue sizes between the stages. One slot keeps the number source at most one
# step ahead of the enrichment stage, so only one lookup is ever in flight.
HANDOFF_CAPACITY = 1

_DONE = object()


def is_reportable(issue: Optional[EnrichedIssue]) -> bool:
    """
    Filter applied to every lookup result.

    Numbers that GitHub does not know, that point at a pull request, or that
    come back without a title are left out of the summary.
    """
    return issue is not None and issue.title != ""


class IssueEnricher:
    """
    Turns the bare issue numbers of a pipeline into summary lines.

    Two tasks cooperate: a number source feeding a bounded queue, and an
    enrichment stage that looks each number up on GitHub and feeds the
    resulting lines into a second bounded queue. Lines come out in the
    pipeline's order; numbers that fail `is_reportable` are dropped.
    """

    def __init__(self, github_client: GitHubGraphQLClient, repository: RepositoryRef):
        self.github_client = github_client
        self.repository = repository

    @staticmethod
    async def _produce_numbers(pipeline: Pipeline, numbers: asyncio.Queue) -> None:
        for number in pipeline.issue_numbers():
            await numbers.put(number)
        await numbers.put(_DONE)

    async def _enrich_numbers(
        self,
        session: aiohttp.ClientSession,
        numbers: asyncio.Queue,
        lines: asyncio.Queue,
    ) -> None:
        try:
            while True:
                number = await numbers.get()
                if number is _DONE:
                    break

                issue = await self.github_client.fetch_issue(session, self.repository, number)
                if not is_reportable(issue):
                    logger.info(f"Skipping #{number}: not an issue or no title.")
                    continue

                await lines.put(issue.summary_line())
        except Exception:
            # Close the output so the reader stops waiting and collects the failure.
            await lines.put(_DONE)
            raise

        await lines.put(_DONE)

    async def stream(self, session: aiohttp.ClientSession, pipeline: Pipeline) -> AsyncIterator[str]:
        """
        Yields one `#<number>: <title> : <url>` line per reportable issue.

        Lookup failures are raised once the lines produced before them have
        been yielded.
        """
        numbers: asyncio.Queue = asyncio.Queue(maxsize=HANDOFF_CAPACITY)
        lines: asyncio.Queue = asyncio.Queue(maxsize=HANDOFF_CAPACITY)

        producer = asyncio.create_task(self._produce_numbers(pipeline, numbers))
        enricher = asyncio.create_task(self._enrich_numbers(session, numbers, lines))

        try:
            while True:
                line = await lines.get()
                if line is _DONE:
                    break
                yield line

            await enricher
        finally:
            for task in (producer, enricher):
                if not task.done():
                    task.cancel()
            await asyncio.gather(producer, enricher, return_exceptions=True)

    async def enrich(self, session: aiohttp.ClientSession, pipeline: Pipeline) -> List[str]:
        """Drains `stream` into a list."""
        logger.info(f"Looking up {len(pipeline.issues)} issues of '{pipeline.name}' on GitHub...")
        return [line async for line in self.stream(session, pipeline)]
