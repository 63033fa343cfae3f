from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional


def configure_logging(verbose: bool = False) -> None:
    """Log to stderr so the YAML snapshot on stdout stays clean."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def resolve_output_path(input_path: Path, output: Optional[str]) -> Path:
    out_path = Path(output)
    if out_path.is_dir():
        out_path = out_path / f"{input_path.stem}.yaml"
    return out_path


def read_markdown(path: Path) -> str:
    # A leading BOM would otherwise stick to the first line and hide a "#" heading.
    return path.read_text(encoding="utf-8-sig")
