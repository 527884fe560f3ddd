#!/usr/bin/env python3
"""
ghcontext - GitHub context resolver

Finds the repository, branch, file and line range referred to by a GitHub URL
or a browser window title, and maps file links onto a local clone.

Usage:
    ghcontext url https://github.com/octocat/Hello-World/blob/master/README#L3
    ghcontext title "GitHub - octocat/Hello-World: My first repo - Google Chrome"
    ghcontext titles < window_titles.txt
    ghcontext resolve --repo ./Hello-World https://github.com/octocat/Hello-World/blob/master/README
    ghcontext changed --repo ./Hello-World refs/remotes/origin/master README
"""

import argparse
import json
import sys
from typing import List, Optional

import git
from loguru import logger

from ghcontext import __version__
from ghcontext.modules.config import ConfigError, load_config
from ghcontext.modules.extractor import (
    find_context_from_titles,
    find_context_from_url,
    find_context_from_window_title,
)
from ghcontext.modules.integration import GitHubContextService
from ghcontext.modules.resolver import ResolverContractError
from ghcontext.modules.schemas import GitHubContext


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Configure logging with loguru."""
    logger.remove()  # Remove default handler

    # Console handler
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level,
        colorize=True,
    )

    # File handler
    if log_file:
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
        )


def _context_payload(context: GitHubContext) -> dict:
    payload = context.model_dump(mode="json", exclude_none=True)
    payload["repository_url"] = context.repository_url
    return payload


def _print_context(context: Optional[GitHubContext]) -> int:
    if context is None:
        logger.info("No GitHub context found")
        return 1
    print(json.dumps(_context_payload(context), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghcontext",
        description="Resolve GitHub URLs and browser window titles to repository objects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ghcontext url https://github.com/octocat/Hello-World/pull/42
  ghcontext title "octocat/Hello-World at main - Google Chrome"
  ghcontext resolve --repo . https://github.com/octocat/Hello-World/blob/main/src/app.py#L5-L9
  ghcontext changed --repo . refs/remotes/origin/main src/app.py

Environment Variables:
  GHCONTEXT_CONFIG  - Path to configuration file
  GHCONTEXT_REMOTE  - Remote searched for branches (default: origin)
""",
    )

    parser.add_argument(
        "--config", "-c", type=str, default=None, help="Path to configuration file (default: config.yaml)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose/debug output")
    parser.add_argument("--log-file", type=str, help="Path to log file (optional)")
    parser.add_argument("--version", action="version", version=f"ghcontext v{__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.required = True

    url_parser = subparsers.add_parser("url", help="Extract a context from a GitHub URL")
    url_parser.add_argument("url", type=str)

    title_parser = subparsers.add_parser("title", help="Extract a context from a browser window title")
    title_parser.add_argument("title", type=str)

    subparsers.add_parser("titles", help="Extract a context from the first matching window title on stdin")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a GitHub blob URL against a local repository")
    resolve_parser.add_argument("url", type=str)
    resolve_parser.add_argument("--repo", "-r", type=str, default=".", help="Repository directory (default: .)")
    resolve_parser.add_argument("--remote", type=str, default=None, help="Remote to search for branches")

    changed_parser = subparsers.add_parser("changed", help="Check if a working file differs from a commit-ish")
    changed_parser.add_argument("commitish", type=str)
    changed_parser.add_argument("path", type=str)
    changed_parser.add_argument("--repo", "-r", type=str, default=".", help="Repository directory (default: .)")

    return parser


def run_command(args: argparse.Namespace, service: GitHubContextService) -> int:
    if args.command == "url":
        return _print_context(find_context_from_url(args.url))

    if args.command == "title":
        return _print_context(find_context_from_window_title(args.title))

    if args.command == "titles":
        titles = (line.rstrip("\r\n") for line in sys.stdin)
        return _print_context(find_context_from_titles(titles))

    if args.command == "resolve":
        context = find_context_from_url(args.url)
        if context is None:
            logger.error(f"Not a GitHub URL: {args.url}")
            return 1

        resolved = service.resolve_blob(args.repo, context, remote_name=args.remote)
        print(json.dumps(resolved._asdict(), indent=2))
        return 0 if resolved.resolved else 1

    if args.command == "changed":
        changed = service.has_changes_in_working_directory(args.repo, args.commitish, args.path)
        print(json.dumps(changed))
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose, args.log_file)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(str(e))
        return 2

    if config.logging.verbose or config.logging.log_file:
        setup_logging(args.verbose or config.logging.verbose, args.log_file or config.logging.log_file)

    service = GitHubContextService(config=config)

    try:
        return run_command(args, service)
    except KeyboardInterrupt:
        logger.info("\nInterrupted by user")
        return 130
    except (git.NoSuchPathError, git.InvalidGitRepositoryError) as e:
        logger.error(f"Not a git repository: {e}")
        return 2
    except ResolverContractError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
