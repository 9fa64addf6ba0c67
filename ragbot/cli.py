"""Command-line entry point.

Usage:
    ragbot train-url https://example.com/docs    # Train on a web page
    ragbot train-file notes/guide.md             # Train on a local file
    ragbot ask "How do I install it?"            # Ask a question
"""
import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import structlog

from ragbot.chatbot import Chatbot
from ragbot.config import Settings
from ragbot.exceptions import RagError
from ragbot.log_config import configure_logging
from ragbot.rag.ingest import TrainingReport

logger = structlog.get_logger()


class ProgressReporter:
    """Simple progress reporter for training runs."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.start_time = None

    def start(self, message: str):
        self.start_time = datetime.now()
        print(f"\n  {message}\n", file=self.stream)

    def update(self, current: int, total: int, ok: bool):
        status = "done" if ok else "failed"
        print(
            f"  Embedding chunk {current}/{total}... {status}",
            file=self.stream,
            flush=True,
        )

    def finish(self, report: TrainingReport):
        elapsed = (datetime.now() - self.start_time).total_seconds()
        print(f"\n  Chunks:   {report.chunks_total}", file=self.stream)
        print(f"  Saved:    {report.records_saved}", file=self.stream)
        print(f"  Skipped:  {len(report.skipped)}", file=self.stream)
        print(f"  Elapsed:  {elapsed:.1f}s", file=self.stream)
        print(f"\n  Training data saved to {report.store_path}\n", file=self.stream)

        if report.records_saved == 0:
            print(
                "  Warning: no chunk could be embedded, the store is empty.\n",
                file=self.stream,
            )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ragbot",
        description="Train on a web page or document, then ask questions about it",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to a .env file (default: project root .env)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    train_url = sub.add_parser("train-url", help="Train on the text of a web page")
    train_url.add_argument("url")

    train_file = sub.add_parser("train-file", help="Train on a local text/markdown file")
    train_file.add_argument("path", type=Path)

    ask = sub.add_parser("ask", help="Ask a question about the trained source")
    ask.add_argument("query")
    ask.add_argument(
        "--show-match",
        action="store_true",
        help="Print the retrieved chunk score before the answer",
    )

    return parser


async def main(argv: Optional[List[str]] = None, chatbot: Chatbot = None) -> int:
    """Run one command and return the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        if chatbot is None:
            settings = Settings.from_env(args.env_file)
            configure_logging(settings.log_level)
            chatbot = Chatbot(settings)

        if args.command in ("train-url", "train-file"):
            progress = ProgressReporter()
            progress.start(f"Training from {args.url if args.command == 'train-url' else args.path}")
            if args.command == "train-url":
                report = await chatbot.train_from_url(args.url, progress.update)
            else:
                report = await chatbot.train_from_file(args.path, progress.update)
            progress.finish(report)
            return 0

        if not args.query.strip():
            print("Error: the question must not be empty.", file=sys.stderr)
            return 2

        answer = await chatbot.ask(args.query)
        if args.show_match:
            match = answer.retrieval.match
            if answer.retrieval.use_context:
                print(f"Found relevant information (similarity: {match.score:.2f}).")
            else:
                print("No highly relevant information found in the trained source.")
        print(answer.text)
        return 0

    except RagError as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error("command_failed", command=args.command, error_type=type(e).__name__)
        return 1


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
