"""
CLI entry point for fromvdf.

Usage:
    fromvdf parse <file>               Parse a VDF file and print it as JSON
    fromvdf parse - --lossy            Parse stdin, tolerating a truncated string
    fromvdf format <file>              Rewrite a VDF file in normalized layout
    fromvdf config                     Show the active configuration
    fromvdf config --init              Write a default config file
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .config import get_config, write_default_config

logger = logging.getLogger(__name__)

STDIN_NAME = "<stdin>"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _read_input(file_arg: str):
    """Return (source, name) for a file path or '-' for stdin."""
    from .parser.parser import read_source

    if file_arg == "-":
        return sys.stdin.read(), STDIN_NAME
    return read_source(file_arg), file_arg


def _lossy(args, config) -> bool:
    return args.lossy or config.lossy


def cmd_parse(args):
    """Parse a file and print the tree."""
    from .parser import parse_source, VdfParseError, TableNode
    from .parser.tree_serde import serialize_tree, count_nodes

    config = get_config()
    try:
        source, name = _read_input(args.file)
        tree = parse_source(source, name, lossy=_lossy(args, config), max_depth=config.max_depth)
    except VdfParseError as e:
        print(f"Error parsing VDF: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info("Parsed %s: %d nodes", name, count_nodes(tree))

    if args.summary:
        print(f"Parsed: {name}")
        print(f"Top-level entries: {len(tree)}")
        for key in list(tree.keys())[:20]:
            node = tree[key]
            kind = f"table ({len(node)} entries)" if isinstance(node, TableNode) else "scalar"
            print(f"  - {key}: {kind}")
        if len(tree) > 20:
            print(f"  ... and {len(tree) - 20} more")
    elif args.positions:
        print(serialize_tree(tree).decode("utf-8"))
    else:
        print(json.dumps(tree.to_python(), indent=args.indent, ensure_ascii=False))

    return 0


def cmd_format(args):
    """Format a VDF file."""
    from .parser import parse_source, VdfParseError
    from .tools.format import VdfFormatter, FormatOptions

    config = get_config()
    options = FormatOptions(
        indent_char=config.indent_char,
        sort_keys=args.sort_keys or config.sort_keys,
    )
    formatter = VdfFormatter(options)

    try:
        source, name = _read_input(args.file)
        tree = parse_source(source, name, lossy=_lossy(args, config), max_depth=config.max_depth)
    except VdfParseError as e:
        print(f"Error parsing VDF: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = formatter.format_tree(tree)

    if args.check:
        if result == source:
            print(f"{name} is formatted")
            return 0
        print(f"{name} needs formatting")
        return 1

    if args.inplace and name != STDIN_NAME:
        with open(args.file, 'w', encoding='utf-8') as f:
            f.write(result)
        print(f"Formatted: {args.file}")
    else:
        sys.stdout.write(result)

    return 0


def cmd_config(args):
    """Show or initialize configuration."""
    if args.init:
        path = write_default_config(Path(args.init_path) if args.init_path else None)
        print(f"Wrote default config: {path}")
        return 0

    print(json.dumps(get_config().to_dict(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fromvdf",
        description="Parse Valve KeyValues (VDF) text into structured data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    fromvdf parse steamapps/libraryfolders.vdf
    cat appmanifest_440.acf | fromvdf parse - --lossy
    fromvdf format config/loginusers.vdf --sort-keys
"""
    )
    parser.add_argument('--version', action='version', version=f'fromvdf {__version__}')
    parser.add_argument('--config', help='Path to a YAML config file')
    parser.add_argument('--log-level', type=str.upper, choices=LOG_LEVELS,
                        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # parse
    parse_p = subparsers.add_parser('parse', help='Parse a VDF file')
    parse_p.add_argument('file', help="File to parse ('-' for stdin)")
    parse_p.add_argument('-l', '--lossy', action='store_true', help='Allow lossy parsing')
    parse_p.add_argument('--indent', type=int, default=2, help='JSON indentation')
    output = parse_p.add_mutually_exclusive_group()
    output.add_argument('-s', '--summary', action='store_true', help='Print top-level entries only')
    output.add_argument('-p', '--positions', action='store_true',
                        help='Print the full tree with line/column positions')
    parse_p.set_defaults(func=cmd_parse)

    # format
    format_p = subparsers.add_parser('format', help='Format a VDF file')
    format_p.add_argument('file', help="File to format ('-' for stdin)")
    format_p.add_argument('-l', '--lossy', action='store_true', help='Allow lossy parsing')
    format_p.add_argument('-i', '--inplace', action='store_true', help='Modify in place')
    format_p.add_argument('-c', '--check', action='store_true',
                          help='Check if the file is formatted (exit 1 if not)')
    format_p.add_argument('--sort-keys', action='store_true', help='Sort keys within tables')
    format_p.set_defaults(func=cmd_format)

    # config
    config_p = subparsers.add_parser('config', help='Show configuration')
    config_p.add_argument('--init', action='store_true', help='Write a default config file')
    config_p.add_argument('--init-path', help='Where to write the default config')
    config_p.set_defaults(func=cmd_config)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_config(Path(args.config) if args.config else None)
    level = args.log_level or config.log_level
    if level not in LOG_LEVELS:
        print(f"Warning: unknown log level {level!r}, using WARNING", file=sys.stderr)
        level = "WARNING"
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
