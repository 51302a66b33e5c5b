#!/usr/bin/env python3
"""
PR Monitor - Main CLI entrypoint

Runs one aggregation cycle against GitHub and prints the configured user's
open PRs or standalone workflow runs to the terminal, or starts the
dashboard server.

Usage:
    python main.py prs                   # Open PRs with review/CI state
    python main.py workflows             # Recent runs not tied to a PR
    python main.py serve --port 8080     # Start the web dashboard
"""

import argparse
import sys

from dashboard.view_models import (
    PRCard,
    WorkflowCard,
    build_pr_cards,
    build_workflow_cards,
)
from fetchers.github import GitHubClient
from models.config_models import Config
from monitor.aggregator import PRAggregator
from monitor.workflows import StandaloneWorkflowCollector
from utils.config_loader import load_config
from utils.logger import setup_logger

STATUS_SYMBOLS = {
    "success": "✓",
    "failure": "✗",
    "cancelled": "⊘",
    "in_progress": "…",
    "pending": "•",
}


def build_client(config: Config) -> GitHubClient:
    return GitHubClient(
        config.credentials.github_token,
        base_url=config.api_url,
        timeout=config.request_timeout,
    )


def format_pr_card(card: PRCard) -> str:
    """Render a PR card as plain text lines."""
    draft = " [DRAFT]" if card.draft else ""
    lines = [
        f"#{card.number} {card.title}{draft}",
        f"  {card.repository} • by {card.author} • {card.created}",
        f"  {card.head_branch} → {card.base_branch}",
        f"  {card.url}",
    ]

    for group in card.review_groups:
        reviewers = ", ".join(f"@{review.user}" for review in group.reviews) or "-"
        lines.append(f"  {group.icon} {group.heading} ({group.count}): {reviewers}")

    awaiting = ", ".join(
        f"@{r.handle} (team)" if r.kind == "team" else f"@{r.handle}"
        for r in card.awaiting
    ) or "-"
    lines.append(f"  🔍 Awaiting Review ({card.awaiting_count}): {awaiting}")

    if card.workflows:
        chips = "  ".join(f"{STATUS_SYMBOLS.get(chip.icon, '•')} {chip.name}" for chip in card.workflows)
        lines.append(f"  Workflows: {chips}")
    if card.last_activity:
        lines.append(f"  Last activity: {card.last_activity}")

    return "\n".join(lines)


def format_workflow_card(card: WorkflowCard) -> str:
    """Render a workflow card as plain text lines."""
    symbol = STATUS_SYMBOLS.get(card.icon, "•")
    sha = f" @ {card.head_sha}" if card.head_sha else ""
    return "\n".join([
        f"{symbol} {card.name} - {card.status_text}",
        f"  {card.repository} • {card.head_branch or 'unknown'}{sha} • {card.created}",
        f"  {card.url}",
    ])


def show_prs(config: Config) -> None:
    prs = PRAggregator(build_client(config), config).list_user_prs()
    cards = build_pr_cards(prs, config.repositories, palette_size=config.repo_palette_size)

    if not cards:
        print("No open pull requests. All caught up! 🎉")
        return

    print(f"{len(cards)} open pull request(s) by @{config.username}\n")
    print("\n\n".join(format_pr_card(card) for card in cards))


def show_workflows(config: Config) -> None:
    runs = StandaloneWorkflowCollector(build_client(config), config).list_standalone_runs()
    cards = build_workflow_cards(runs)

    if not cards:
        print("No standalone workflow runs in the last "
              f"{config.standalone_lookback_days} day(s).")
        return

    print(f"{len(cards)} standalone workflow run(s) by @{config.username}\n")
    print("\n\n".join(format_workflow_card(card) for card in cards))


def main():
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="PR Monitor - open PRs and workflow runs for one GitHub user",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List open PRs with reviews and CI status
  python main.py prs

  # List recent workflow runs not tied to a PR
  python main.py workflows

  # Start the dashboard on port 8080
  python main.py serve --port 8080
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("prs", help="Print open PRs authored by the configured user")
    subparsers.add_parser("workflows", help="Print recent workflow runs not tied to a PR")

    serve_parser = subparsers.add_parser("serve", help="Start the web dashboard")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to run the dashboard on (default: PORT from .env, then 3000)"
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)"
    )

    args = parser.parse_args()

    # Show help if no command provided
    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = load_config()
    logger = setup_logger(config.log_level)

    if args.command == "prs":
        show_prs(config)

    elif args.command == "workflows":
        show_workflows(config)

    elif args.command == "serve":
        port = args.port or config.port
        logger.info(f"GitHub Monitor running on http://{args.host}:{port}")
        logger.info(f"Monitoring repositories: {', '.join(config.repositories)}")

        import uvicorn
        uvicorn.run(
            "backend.app:build_app",
            factory=True,
            host=args.host,
            port=port,
            log_level=config.log_level.lower(),
        )


if __name__ == "__main__":
    main()
