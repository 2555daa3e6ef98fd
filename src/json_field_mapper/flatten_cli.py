"""CLI that prints the terms a json field mapping would index for a document."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys
from typing import IO, Any

import orjson

from json_field_mapper.config import get_settings
from json_field_mapper.mapper.emitter import IndexableField
from json_field_mapper.mapper.errors import MapperError
from json_field_mapper.mapper.field_mapper import JsonFieldMapper, ParseContext, parse_mapping
from json_field_mapper.mapper.tokens import IjsonTokenStream
from json_field_mapper.observability.logging import configure_logging


logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Flatten a JSON object into the root and keyed terms of a json field",
    )
    parser.add_argument(
        "input",
        help="Path to a JSON document holding one object, or '-' for stdin",
    )
    parser.add_argument(
        "--field",
        default="json",
        help="Name of the json field (default: json)",
    )
    parser.add_argument(
        "--mapping",
        type=Path,
        help="JSON file with the field mapping (e.g. {\"ignore_above\": 256})",
    )
    parser.add_argument(
        "--ignore-above",
        type=int,
        help="Override ignore_above from the mapping",
    )
    parser.add_argument(
        "--null-value",
        help="Override null_value from the mapping",
    )
    selection = parser.add_mutually_exclusive_group()
    selection.add_argument("--root-only", action="store_true", help="Print only root terms")
    selection.add_argument("--keyed-only", action="store_true", help="Print only keyed terms")
    return parser


def _load_mapping(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    node = orjson.loads(path.read_bytes())
    if not isinstance(node, dict):
        raise ValueError(f"Mapping in {path} must be a JSON object")
    return node


def _build_mapper(args: argparse.Namespace) -> JsonFieldMapper:
    node = _load_mapping(args.mapping)
    if args.ignore_above is not None:
        node["ignore_above"] = args.ignore_above
    if args.null_value is not None:
        node["null_value"] = args.null_value
    return parse_mapping(args.field, node).build()


def _flatten(mapper: JsonFieldMapper, source: IO[bytes]) -> list[IndexableField]:
    stream = IjsonTokenStream(source)
    stream.next_token()
    context = ParseContext(stream)
    mapper.parse(context)
    return context.fields


def _select(
    fields: Sequence[IndexableField], mapper: JsonFieldMapper, args: argparse.Namespace
) -> list[IndexableField]:
    wanted = {mapper.name, mapper.field_type.keyed_name}
    if args.root_only:
        wanted = {mapper.name}
    elif args.keyed_only:
        wanted = {mapper.field_type.keyed_name}
    return [f for f in fields if f.name in wanted]


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    args = build_argument_parser().parse_args(argv)

    try:
        mapper = _build_mapper(args)
    except FileNotFoundError as exc:
        logger.error("Mapping file not found: %s", exc)
        return 1
    except (MapperError, ValueError) as exc:
        logger.error("Invalid mapping: %s", exc)
        return 1

    try:
        if args.input == "-":
            fields = _flatten(mapper, sys.stdin.buffer)
        else:
            with open(args.input, "rb") as source:
                fields = _flatten(mapper, source)
    except FileNotFoundError as exc:
        logger.error("Input not found: %s", exc)
        return 1
    except MapperError as exc:
        logger.error("Failed to flatten %s: %s", args.input, exc)
        return 1

    out = sys.stdout.buffer
    for field in _select(fields, mapper, args):
        out.write(orjson.dumps({"field": field.name, "value": field.text}) + b"\n")
    out.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
