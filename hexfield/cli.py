"""
Command line entry point

    hexfield                      open the window (same as `hexfield gui`)
    hexfield decode --hex "FF0A" --field A:1:8 --field B:9:4
    hexfield decode --file dump.txt --template Header
    hexfield templates            list saved templates
"""

import argparse
import logging
import sys

from .config import ConfigError, load_config
from .decoder import decode
from .fields import FieldRow
from .hexfile import read_hex_file
from .log_setup import setup_logging
from .templates import TemplateNotFound, TemplateStore, TemplateStoreError

logger = logging.getLogger(__name__)


def parse_field_spec(text):
    """NAME:START:LENGTH -> FieldRow (start/length left as text for the extractor)"""
    name, sep, rest = text.rpartition(":")
    name, sep2, start = name.rpartition(":")
    if not sep or not sep2 or not name:
        raise argparse.ArgumentTypeError(f"expected NAME:START:LENGTH, got {text!r}")
    return FieldRow(name, start, rest)


def build_parser():
    parser = argparse.ArgumentParser(prog="hexfield", description="HEX bit-field decoder")
    parser.add_argument("--config", default=None, help="YAML config file (default: hexfield.yaml)")
    parser.add_argument("--db", default=None, help="Template database, overrides storage.db_path")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("gui", help="Open the decoder window")

    p_decode = sub.add_parser("decode", help="Decode HEX text and print the field table")
    source = p_decode.add_mutually_exclusive_group(required=True)
    source.add_argument("--hex", dest="hex_text", help="HEX text")
    source.add_argument("--file", help="Text file with HEX content")
    p_decode.add_argument("--template", help="Saved template to take fields from")
    p_decode.add_argument(
        "--field", action="append", type=parse_field_spec, default=[],
        metavar="NAME:START:LENGTH", help="Field definition (repeatable, appended after the template)",
    )

    sub.add_parser("templates", help="List saved templates")
    return parser


def format_results(results):
    if not results:
        return "(no fields extracted)"
    name_w = max(4, max(len(r.name) for r in results))
    bits_w = max(4, max(len(r.bits) for r in results))
    lines = [f"{'Name':<{name_w}}  {'Bits':<{bits_w}}  Value"]
    for r in results:
        lines.append(f"{r.name:<{name_w}}  {r.bits:<{bits_w}}  {r.display_value}")
    return "\n".join(lines)


def cmd_decode(args, store_path):
    rows = []
    if args.template:
        with TemplateStore(store_path) as store:
            rows.extend(FieldRow.from_definition(d) for d in store.load(args.template))
    rows.extend(args.field)

    hex_text = args.hex_text if args.hex_text is not None else read_hex_file(args.file)
    outcome = decode(hex_text, rows)
    if outcome.error is not None:
        print(f"Error: {outcome.error}", file=sys.stderr)
        return 1
    print(format_results(outcome.results))
    return 0


def cmd_templates(store_path):
    with TemplateStore(store_path) as store:
        for name in store.list_names():
            print(name)
    return 0


def cmd_gui(config, store_path):
    # Imported here so decode/templates work without a display
    from .gui import run

    try:
        store = TemplateStore(store_path)
    except TemplateStoreError as e:
        logger.error("%s - templates disabled", e)
        store = None
    try:
        return run(store, config, sys.argv[:1])
    finally:
        if store is not None:
            store.close()


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    try:
        setup_logging(
            level=args.log_level or config.logging.level,
            log_dir=config.logging.log_dir,
            log_file=config.logging.log_file,
        )
    except ValueError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Logging error: {e}", file=sys.stderr)
        return 2
    store_path = args.db or config.storage.db_path

    try:
        if args.command == "decode":
            return cmd_decode(args, store_path)
        if args.command == "templates":
            return cmd_templates(store_path)
        return cmd_gui(config, store_path)
    except (TemplateNotFound, TemplateStoreError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
