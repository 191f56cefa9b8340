"""
Command line entry point.

Usage:
    python -m docsearch serve [--host HOST] [--port PORT] [--reload]
    python -m docsearch ingest PATH [--split-length N] [--split-overlap N]
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from .config import get_settings
from .logging_config import configure_logging
from .preprocessing import load_directory
from .repositories import create_repository

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docsearch", description=__doc__.splitlines()[1])
    subcommands = parser.add_subparsers(dest="command", required=True)

    serve = subcommands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")

    ingest = subcommands.add_parser("ingest", help="Load a directory of text files")
    ingest.add_argument("path", type=Path)
    ingest.add_argument("--split-length", type=int, default=None)
    ingest.add_argument("--split-overlap", type=int, default=0)

    return parser


async def ingest(path: Path, split_length: Optional[int], split_overlap: int) -> int:
    """
    Load text files into the configured document store.

    Returns:
        Number of documents written
    """
    documents = load_directory(path, split_length=split_length, split_overlap=split_overlap)
    repository = create_repository(get_settings())
    try:
        if documents:
            await repository.write_documents(documents)
    finally:
        await repository.close()

    logger.info("Ingestion finished", path=str(path), documents=len(documents))
    return len(documents)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, use_json=settings.LOG_JSON)

    if args.command == "serve":
        import uvicorn

        uvicorn.run(
            "docsearch.app:build_app",
            factory=True,
            host=args.host or settings.SERVICE_HOST,
            port=args.port or settings.SERVICE_PORT,
            reload=args.reload,
            log_level=settings.LOG_LEVEL.lower(),
        )
        return 0

    try:
        count = asyncio.run(ingest(args.path, args.split_length, args.split_overlap))
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(f"Wrote {count} documents")
    return 0


if __name__ == "__main__":
    sys.exit(main())
