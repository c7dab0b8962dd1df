#!/usr/bin/env python3
"""
Typed API client generator.

Usage:
    python -m typegen <command> [options]
    typegen <command> [options]

Commands:
    generate    Generate type definitions and client for an OpenAPI document

Examples:
    python -m typegen generate openapi.json --target ts
    python -m typegen generate https://example.com/openapi.json -t ts -o client.ts
    cat openapi.yaml | python -m typegen generate -t ts --api-prefix /beta/api
"""

from __future__ import annotations

import sys


def cmd_generate(args: list[str]) -> int:
    """Generate a typed client."""
    from typegen.api_codegen.main import main as generate_main
    try:
        return generate_main(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


COMMANDS = {
    "generate": (cmd_generate, "Generate type definitions and client for an OpenAPI document"),
}


def main() -> int:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(__doc__)
        print("Available commands:")
        for name, (_, desc) in COMMANDS.items():
            print(f"  {name:12} {desc}")
        print("\nUse '<command> --help' for command-specific options.")
        return 0

    command = sys.argv[1]
    args = sys.argv[2:]

    if command not in COMMANDS:
        print(f"Unknown command: {command}", file=sys.stderr)
        print(f"Available commands: {', '.join(COMMANDS.keys())}", file=sys.stderr)
        return 1

    handler, _ = COMMANDS[command]
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
