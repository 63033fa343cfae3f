from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import markdown_parser, yaml_io
from .utils import configure_logging, read_markdown, resolve_output_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdview",
        description="Parse a Markdown file and print its document model as YAML.",
    )
    parser.add_argument("input", type=str, help="Path to Markdown file")
    parser.add_argument("-o", "--output", type=str, help="Write the YAML snapshot here instead of stdout")
    parser.add_argument("--autolinks", action="store_true", help="Turn <url> and bare URLs into links")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    input_path = Path(args.input).expanduser()
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    logging.info("Reading %s", input_path)
    markdown_text = read_markdown(input_path)
    logging.debug("Markdown length: %d chars", len(markdown_text))

    document = markdown_parser.segment(markdown_text, autolinks=args.autolinks)
    logging.info("Parsed %d blocks", len(document))
    snapshot = yaml_io.dump_document(document)

    if not args.output:
        sys.stdout.write(snapshot)
        return
    output_path = resolve_output_path(input_path, args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(snapshot, encoding="utf-8")
    logging.info("Done. Saved to %s", output_path)


if __name__ == "__main__":
    main()
