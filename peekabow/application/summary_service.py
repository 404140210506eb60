import logging
import aiohttp

from peekabow.domain.models import PipelineSummary, SummaryContext
from peekabow.application.issue_enricher import IssueEnricher
from peekabow.application.pipeline_selector import select_pipeline
from peekabow.infrastructure.github_client import GitHubGraphQLClient
from peekabow.infrastructure.zenhub_client import ZenHubClient

logger = logging.getLogger(__name__)


class SummaryService:
    """
    Service responsible for building the issue summary of one ZenHub pipeline.

    Resolves the repository id on GitHub, fetches the ZenHub board for it,
    selects the requested pipeline and enriches its issue numbers with GitHub
    titles and URLs. Any upstream failure aborts the run; nothing is cached.
    """

    def __init__(
            self,
            github_client: GitHubGraphQLClient,
            zenhub_client: ZenHubClient,
    ):
        self.github_client = github_client
        self.zenhub_client = zenhub_client

    async def summarize(self, context: SummaryContext) -> PipelineSummary:
        repository = context.repository

        async with aiohttp.ClientSession() as session:
            logger.info("🔍  Search repository ID from GitHub...")
            repository_id = await self.github_client.fetch_repository_id(session, repository)
            logger.info(f"👍  Found repository ID: {repository_id}")

            logger.info("🔍  Search pipeline issues from ZenHub...")
            board = await self.zenhub_client.fetch_board(session, repository_id)

            pipeline, found = select_pipeline(board, context.pipeline_name)
            if not found:
                logger.info(f"Pipeline '{context.pipeline_name}' is not on the board of {repository.full_name}.")
                return PipelineSummary(
                    repository_id=repository_id,
                    pipeline_name=context.pipeline_name,
                    found=False,
                )

            enricher = IssueEnricher(self.github_client, repository)
            lines = await enricher.enrich(session, pipeline)

        logger.info(f"Summarized {len(lines)} of {len(pipeline.issues)} issues.")
        return PipelineSummary(
            repository_id=repository_id,
            pipeline_name=context.pipeline_name,
            found=True,
            lines=lines,
        )
