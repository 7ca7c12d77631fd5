"""Command-line entry point for converting and inspecting scene object XML."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Sequence

from .faults import DecodeResult
from .group import SceneObjectGroup
from .options import JsonUserNameService, LazyUserNameService, SerializationOptions
from .serializer import from_original_xml, from_xml2, to_original_xml, to_xml2

ORIGINAL = "original"
XML2 = "xml2"

_READERS: dict[str, Callable[[bytes], DecodeResult]] = {
    ORIGINAL: from_original_xml,
    XML2: from_xml2,
}


def _add_format(parser: argparse.ArgumentParser, flag: str, help_text: str) -> None:
    parser.add_argument(flag, choices=sorted(_READERS), default=ORIGINAL, help=help_text)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="scenexml", description="Scene object XML tools")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log decoding details, including every field fault.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    convert = commands.add_parser("convert", help="Convert a scene object between formats.")
    convert.add_argument("input", type=Path, help="Document to read.")
    convert.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Where to write the result (default: standard output).",
    )
    _add_format(convert, "--from", "Format of the input document (default: original).")
    _add_format(convert, "--to", "Format to write (default: original).")
    convert.add_argument(
        "--old-guids",
        action="store_true",
        help="Write identifiers under the legacy Guid tag.",
    )
    convert.add_argument(
        "--wipe-owners",
        action="store_true",
        help="Replace owner and last owner identifiers with the nil identifier.",
    )
    convert.add_argument(
        "--home",
        help="Origin used to fill in missing creator attribution.",
    )
    convert.add_argument(
        "--user-names",
        type=Path,
        help="JSON object mapping user identifiers to display names (needed by --home).",
    )
    convert.add_argument(
        "--no-script-states",
        action="store_true",
        help="Leave saved script states out of the output.",
    )

    inspect = commands.add_parser("inspect", help="Print a JSON summary of a scene object.")
    inspect.add_argument("input", type=Path, help="Document to read.")
    _add_format(inspect, "--format", "Format of the input document (default: original).")
    return parser


def _decode(path: Path, fmt: str) -> DecodeResult:
    return _READERS[fmt](path.read_bytes())


def summarize(result: DecodeResult) -> dict[str, Any]:
    """Return a JSON-ready description of a decoded group and its faults."""

    faults = [fault.describe() for fault in result.faults]
    if result.group is None:
        assert result.error is not None
        return {"ok": False, "error": result.error.message, "faults": faults}

    group: SceneObjectGroup = result.group
    return {
        "ok": True,
        "uuid": str(group.uuid),
        "name": group.name,
        "part_count": group.part_count,
        "parts": [
            {
                "uuid": str(part.uuid),
                "name": part.name,
                "link_number": part.link_number or 0,
                "inventory_items": len(part.task_inventory),
            }
            for part in group.parts
        ],
        "script_states": sorted(str(item_id) for item_id in group.script_states),
        "faults": faults,
    }


def _convert(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    if args.home and args.user_names is None:
        parser.error("--home requires --user-names")

    result = _decode(args.input, getattr(args, "from"))
    for fault in result.faults:
        print(f"warning: {fault.describe()}", file=sys.stderr)
    if result.group is None:
        assert result.error is not None
        print(f"error: {result.error.message}", file=sys.stderr)
        return 1

    options = SerializationOptions(
        old_guids=args.old_guids,
        wipe_owners=args.wipe_owners,
        home=args.home,
    )
    user_names = None
    if args.user_names is not None:
        path: Path = args.user_names
        user_names = LazyUserNameService(lambda: JsonUserNameService.from_file(path))

    include_states = not args.no_script_states
    if args.to == XML2:
        text = to_xml2(
            result.group,
            include_script_states=include_states,
            options=options,
            user_names=user_names,
        )
    else:
        text = to_original_xml(
            result.group,
            include_script_states=include_states,
            options=options,
            user_names=user_names,
        )

    if args.output is None:
        sys.stdout.write(text + "\n")
    else:
        args.output.write_text(text, encoding="utf-8")
    return 0


def _inspect(args: argparse.Namespace) -> int:
    result = _decode(args.input, args.format)
    print(json.dumps(summarize(result), indent=2))
    return 0 if result.ok else 1


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "convert":
            return _convert(args, parser)
        return _inspect(args)
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
