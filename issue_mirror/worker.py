"""Mirror worker: runs one sync pass over every configured target."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from .config.exceptions import ConfigurationError, ConfigurationValidationError
from .config.loader import ConfigurationLoader
from .config.models import MirrorConfig, SyncTarget
from .database.config import DatabaseConfig
from .database.connection import DatabaseConnectionManager
from .github.client import GitHubClient, GitHubClientConfig
from .sync.results import SyncResult
from .sync.synchronizer import PASS_ERRORS, RepositorySynchronizer

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class MirrorWorker:
    """Owns the store and GitHub client for the lifetime of one run."""

    def __init__(
        self,
        config: MirrorConfig,
        database_config: DatabaseConfig | None = None,
        github_client: GitHubClient | None = None,
    ):
        self.config = config
        self.connection_manager = DatabaseConnectionManager(database_config)
        self.github_client = github_client or GitHubClient(
            token=config.github.token,
            config=GitHubClientConfig(
                base_url=config.github.base_url,
                timeout=config.github.timeout,
                max_retries=config.github.max_retries,
                per_page=config.github.per_page,
            ),
        )

    async def _sync_target(
        self, synchronizer: RepositorySynchronizer, target: SyncTarget
    ) -> list[SyncResult]:
        if target.repositories:
            return await synchronizer.sync_organization(target.org, target.repositories)

        try:
            return await synchronizer.sync_organization_items(
                target.org, self.github_client
            )
        except PASS_ERRORS as e:
            return [await synchronizer.fail_pass(target.org, "*", e)]

    async def run_once(self) -> list[SyncResult]:
        """Sync every target in configuration order."""
        await self.connection_manager.create_schema()

        results: list[SyncResult] = []
        async with self.connection_manager.get_session() as session:
            synchronizer = RepositorySynchronizer(session, self.github_client)
            for target in self.config.targets:
                results.extend(await self._sync_target(synchronizer, target))

        failed = [r for r in results if not r.success]
        logger.info(
            f"Mirror run finished: {len(results) - len(failed)} succeeded, "
            f"{len(failed)} failed, "
            f"{sum(len(r.soft_failures) for r in results)} skipped lookups"
        )
        return results

    async def cleanup(self) -> None:
        """Release the HTTP session and database engine."""
        await self.github_client.close()
        await self.connection_manager.close()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Mirror GitHub issues into a database")
    parser.add_argument("--config", help="Configuration file path")
    parser.add_argument(
        "--log-level", default=None, help="Log level (overrides configuration)"
    )
    return parser.parse_args(argv)


async def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the mirror worker."""
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, (args.log_level or "INFO").upper()),
        format=LOG_FORMAT,
    )

    loader = ConfigurationLoader()
    try:
        config = (
            loader.load_from_file(args.config) if args.config else loader.auto_load()
        )
    except ConfigurationValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        for problem in e.problems:
            logger.error(f"  {problem}")
        sys.exit(1)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    if args.log_level is None:
        logging.getLogger().setLevel(config.log_level.value)

    worker = MirrorWorker(config)
    try:
        await worker.run_once()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Worker failed: {e}")
        sys.exit(1)
    finally:
        await worker.cleanup()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())
