"""Command-line entry point: RDL schema JSON on stdin, JSON Schema out."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rdl_json_schema.generator import generate_document, render_document
from rdl_json_schema.loader import read_schema
from rdl_json_schema.types import Schema

JSON_EXT = ".json"


def output_path(outdir: str, schema_name: str, ext: str = JSON_EXT) -> Path | None:
    """Choose where to write the document.

    Returns None for stdout (no ``-o``). A path ending in ``ext`` is used as
    is; anything else is a directory that receives ``<schema_name><ext>``.
    """
    if not outdir:
        return None
    if outdir.endswith(ext):
        return Path(outdir)
    return Path(outdir) / f"{schema_name or 'anonymous'}{ext}"


def export_json_schema(schema: Schema, outdir: str = "", base_path: str = "") -> Path | None:
    """Translate a schema and write the document.

    The document is fully rendered before anything is opened, so a failed
    translation never leaves a partial file behind.

    Returns:
        The file written, or None when the document went to stdout.
    """
    text = render_document(generate_document(schema, base_path))
    path = output_path(outdir, schema.name)
    if path is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return None

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="rdl-gen-json-schema",
        description="Export the types of an RDL schema (JSON on stdin) to JSON Schema",
    )
    parser.add_argument(
        "-o",
        dest="output",
        default="",
        help="Output .json file or directory (default: stdout)",
    )
    parser.add_argument(
        "-s",
        dest="source",
        default="",
        help="RDL source file (ignored)",
    )
    parser.add_argument(
        "-b",
        dest="base_path",
        default="",
        help="Base path",
    )

    args = parser.parse_args(argv)

    try:
        schema = read_schema(sys.stdin)
        export_json_schema(schema, args.output, args.base_path)
    except Exception as e:
        print(f"*** {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
