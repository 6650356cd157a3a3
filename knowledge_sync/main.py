"""
Main entry point for knowledge-sync.
"""

import argparse
import sys
from datetime import datetime
from typing import List, Optional

from knowledge_sync.config import load_config
from knowledge_sync.errors import ConfigurationError
from knowledge_sync.logging_config import configure_logging, get_logger
from knowledge_sync.models.state import SyncOptions, SyncResult
from knowledge_sync.orchestrator import SyncOrchestrator
from knowledge_sync.reporter import Reporter

logger = get_logger(__name__)

EPILOG = """\
examples:
  knowledge-sync                      sync with an automatic commit message
  knowledge-sync -m "Add new entries" sync with a custom commit message
  knowledge-sync --dry-run            show the planned commands only
  knowledge-sync --force              skip the confirmation prompt
"""


class SyncArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises ConfigurationError instead of exiting."""

    def error(self, message):
        raise ConfigurationError(message)


def build_parser() -> SyncArgumentParser:
    parser = SyncArgumentParser(
        prog="knowledge-sync",
        description="Stage, commit and push all changes in a knowledge base repository",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-m", "--message",
        help="Commit message (default: generated from the change summary)",
    )

    parser.add_argument(
        "-f", "--force",
        action="store_true",
        help="Skip the confirmation prompt",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the planned commands without committing or pushing",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    parser.add_argument(
        "-C", "--repo",
        help="Repository directory (default: $KNOWLEDGE_SYNC_REPO or the current directory)",
    )

    parser.add_argument(
        "--branch",
        help="Expected branch; a mismatch only warns (default: main)",
    )

    parser.add_argument(
        "--config",
        help="Optional YAML configuration file",
    )

    parser.add_argument(
        "--env-file",
        help="Optional .env file with KNOWLEDGE_SYNC_* variables",
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments. Unknown flags and positionals raise ConfigurationError."""
    return build_parser().parse_args(argv)


def print_results(result: SyncResult, reporter: Reporter):
    """Report the final outcome."""
    if result.succeeded:
        return

    reporter.error(result.error or result.termination_reason)
    if "commit" in result.completed_steps and "publish" not in result.completed_steps:
        reporter.info("Committed locally but not pushed")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit code."""
    reporter = Reporter()

    try:
        args = parse_args(argv)
    except ConfigurationError as e:
        reporter.error(str(e))
        reporter.info("Run with --help for usage")
        return ConfigurationError.exit_code
    except SystemExit as e:
        # -h/--help prints usage and exits
        return e.code if isinstance(e.code, int) else 0

    configure_logging(verbose=args.verbose)
    reporter.verbose = args.verbose

    try:
        config = load_config(
            config_path=args.config,
            env_file=args.env_file,
            repo_path=args.repo,
            required_branch=args.branch,
        )
    except ConfigurationError as e:
        logger.info("config_load_failed", error=str(e))
        reporter.error(str(e))
        return e.exit_code

    options = SyncOptions(
        message=args.message,
        force=args.force,
        dry_run=args.dry_run,
        verbose=args.verbose,
    )

    logger.info("sync_starting", path=str(config.repo_path), dry_run=options.dry_run, force=options.force)
    start_time = datetime.now()

    try:
        orchestrator = SyncOrchestrator(config, reporter=reporter)
        final_state = orchestrator.run(options)
    except KeyboardInterrupt:
        logger.info("sync_interrupted")
        print("\nOperation interrupted by user")
        return 130
    except Exception as e:
        logger.error("sync_exception", error=str(e), exc_info=True)
        reporter.error(f"Unexpected error: {e}")
        return 1

    result = final_state.to_result()
    print_results(result, reporter)

    logger.info(
        "sync_complete",
        duration=(datetime.now() - start_time).total_seconds(),
        termination_reason=result.termination_reason,
        exit_code=result.exit_code,
    )
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
