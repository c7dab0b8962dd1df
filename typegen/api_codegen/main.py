"""
API Code Generator - Generates a typed client module from an OpenAPI document.

This module provides the ``generate`` command:
- Document loading from a file, a URL or standard input
- Memoized schema resolution and type canonicalization
- Rendering through the selected target emitter
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Callable, Final, Sequence

from typegen.shared.document_loader import load_document
from typegen.shared.errors import GenerationError

from .context import GenerationConfig, GenerationContext
from .ts import generate_ts

logger = logging.getLogger(__name__)

# Target selector -> emitter
TARGETS: Final[dict[str, Callable[[GenerationContext], str]]] = {
    "ts": generate_ts,
}

TARGET_NAMES: Final[dict[str, str]] = {
    "ts": "TypeScript",
}

LOG_LEVEL_ENV: Final[str] = "TYPEGEN_LOG"


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; ``TYPEGEN_LOG`` sets the default level."""
    if verbose:
        level: int | str = logging.DEBUG
    else:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def generate(
    document: dict,
    target: str,
    config: GenerationConfig | None = None,
) -> str:
    """Generate client source text for ``document`` in the ``target`` format."""
    context = GenerationContext(document, config or GenerationConfig())
    return TARGETS[target](context)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typegen generate",
        description="Generate type definitions and client for the given OpenAPI.",
    )
    parser.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Path or URL of the OpenAPI document. If none is provided the document will be read from STDIN",
    )
    parser.add_argument(
        "-t", "--target",
        required=True,
        choices=sorted(TARGETS),
        help="The output format of the generated file",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="The path where the output will be written. If none is provided the generated file is printed to STDOUT",
    )
    parser.add_argument(
        "--api-prefix",
        default=None,
        help=(
            "A common prefix for API endpoints to exclude when determining names of "
            "generated methods, e.g. with '/beta/api' the endpoint "
            "'/beta/api/explore/export' is named 'exploreExport'"
        ),
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log schema resolution details",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        document = load_document(args.source)
        output_text = generate(
            document,
            args.target,
            GenerationConfig.from_prefix(args.api_prefix),
        )
        if args.output is None:
            sys.stdout.write(output_text + "\n")
            return 0

        logger.debug("writing output to %s", args.output)
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output_text + "\n", encoding="utf-8")
    except (GenerationError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(f"Generated {TARGET_NAMES[args.target]} client -> {args.output}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
