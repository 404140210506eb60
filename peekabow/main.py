import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from peekabow.domain.models import RepositoryRef, SummaryContext
from peekabow.domain.exceptions import ConfigurationException, UpstreamException
from peekabow.application.summary_formatter import format_summary
from peekabow.application.summary_service import SummaryService
from peekabow.infrastructure.config import EXAMPLE_CONFIG, load_credentials
from peekabow.infrastructure.github_client import GitHubGraphQLClient
from peekabow.infrastructure.zenhub_client import ZenHubClient

APP_NAME = "peekabow"
APP_VERSION = "0.0.1"

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="show your repo's summary of ZenHub pipeline",
    )
    parser.add_argument("--owner", "-o", default="", help="repository owner")
    parser.add_argument("--repo", "-r", default="", help="repository name")
    parser.add_argument("--pipeline", "-p", default="", help="pipeline name of ZenHub")
    parser.add_argument("--verbose", action="store_true", help="show debug log")
    parser.add_argument("--version", "-v", action="version", version=f"{APP_NAME} {APP_VERSION}")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("issues", aliases=["i"], help="show your repo's pipeline issue summary")
    return parser


async def show_issues(args: argparse.Namespace) -> int:
    logger.info("👀  Load global flags...")
    if not args.owner or not args.repo or not args.pipeline:
        print("❌  Please set --owner, --repo, and --pipeline. See help.")
        return 0

    logger.info("📄  Load token settings from toml...")
    try:
        credentials = load_credentials()
    except ConfigurationException as e:
        logger.info(str(e))
        print(f"❌  Please set your token in {e.path}. Just like below:\n{EXAMPLE_CONFIG}")
        return 0

    context = SummaryContext(
        repository=RepositoryRef(owner=args.owner, name=args.repo),
        pipeline_name=args.pipeline,
    )
    service = SummaryService(
        github_client=GitHubGraphQLClient(token=credentials.github_token),
        zenhub_client=ZenHubClient(token=credentials.zenhub_token),
    )
    summary = await service.summarize(context)

    if not summary.found:
        print(f"❌  Not Found: {context.pipeline_name}")
        print("❌  Please check whether if your ZenHub pipeline's name is correct.")
        return 0

    print(f"🔽  {context.repository.full_name}: {context.pipeline_name}'s issues here:")
    print(format_summary(summary.lines))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command not in ("issues", "i"):
        parser.print_help()
        return 0

    try:
        return asyncio.run(show_issues(args))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        return 1
    except UpstreamException as e:
        logger.error(f"Request failed ({e.kind}): {e}")
        return 1
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
