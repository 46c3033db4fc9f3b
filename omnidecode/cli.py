"""Command-line interface for omnidecode."""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import List, Optional

from omnidecode.assembler import ContentParser
from omnidecode.core.config import DecoderConfig, IdStrategy
from omnidecode.core.exceptions import ConfigurationError
from omnidecode.decoders.registry import available_environments


logger = logging.getLogger(__name__)


ENVIRONMENT_CHOICES = ["code", "tool", "pointer", "mcp", "computer"]


def setup_logging(verbosity: int) -> None:
    """Configure logging to stderr based on the number of -v flags."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr
    )


def read_input(path: Optional[str]) -> str:
    """Read model output from a file, or stdin when path is None or '-'."""
    if path is None or path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def run_decode(args: argparse.Namespace) -> int:
    """Decode one block of model output and print it as JSON."""
    try:
        text = read_input(args.file)
    except OSError as e:
        print(f"Error: cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    logger.debug(f"Read {len(text)} chars of model output for environment {args.env}")

    overrides = {"id_strategy": args.id_strategy}
    if args.think_tag:
        overrides["think_tag"] = args.think_tag

    try:
        config = DecoderConfig.from_dict(overrides)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    result = ContentParser(config).parse(text, args.env)

    if args.chat_format:
        payload = {
            "think": result.reasoning,
            "answer": result.answer,
            "tools": result.to_chat_completion_tool_calls(),
        }
    else:
        payload = result.model_dump()
        if not args.diagnostics:
            payload.pop("diagnostics", None)

    print(json.dumps(payload, indent=args.indent, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Decode multimodal agent model output into structured instructions",
        prog="omnidecode"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    decode_parser = subparsers.add_parser(
        "decode",
        help="Decode model output read from FILE or stdin"
    )
    decode_parser.add_argument("file", nargs="?", help="File with model output (default: stdin)")
    decode_parser.add_argument(
        "--env", "-e",
        required=True,
        choices=ENVIRONMENT_CHOICES,
        help="Active environment selecting the action grammar"
    )
    decode_parser.add_argument("--think-tag", help="Tag name of the reasoning block")
    decode_parser.add_argument(
        "--id-strategy",
        choices=[strategy.value for strategy in IdStrategy],
        default=IdStrategy.RANDOM.value,
        help="Invocation identifier strategy"
    )
    decode_parser.add_argument(
        "--chat-format",
        action="store_true",
        help="Render actions as chat-completion tool calls"
    )
    decode_parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Include decoding diagnostics in the output"
    )
    decode_parser.add_argument("--indent", type=int, default=2, help="JSON indentation")

    subparsers.add_parser("environments", help="List environments with a registered decoder")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "decode":
        return run_decode(args)
    elif args.command == "environments":
        for name in available_environments():
            print(name)
        return 0
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
