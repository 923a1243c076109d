"""
CLI entry point for xivextract.

Usage:
    xivextract Action <id|text>                  Extract or search an action
    xivextract Status <id|text>                  Extract or search a status effect
    xivextract ContentFinderCondition <id|text>  Extract or search a duty
    xivextract ClassJob <id|text>                Extract or search a class/job
    xivextract sheet <name> <id|text>            Extract or search any flat sheet
    xivextract icon <id>                         Extract an icon as PNG
    xivextract job-actions <id>                  List a class/job's actions
    xivextract role-actions <role>               List a role's role actions
    xivextract version                           Print the game version

Numeric ids extract one row; anything else searches the sheet. Global options
(-d, -f, --schema-dir, ...) go before the command.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, Union

from xivextract import __version__
from xivextract.config import ExtractorConfig
from xivextract.errors import ExtractError, Unknown
from xivextract.extractor import Extractor
from xivextract.results import Icon
from xivextract.schema.providers import PROVIDERS
from xivextract.sheets.actions import Role
from xivextract.sheets.registry import SheetKind

logger = logging.getLogger(__name__)

SHEET_HELP = {
    SheetKind.ACTION: "Retrieve or search actions",
    SheetKind.STATUS: "Retrieve or search status effects",
    SheetKind.CONTENT_FINDER_CONDITION: "Retrieve or search duties",
    SheetKind.CLASS_JOB: "Retrieve or search classes and jobs",
}


def parse_id(value: str) -> Union[int, str]:
    """A decimal row id, or search text."""
    return int(value) if value.isdigit() else value


# =============================================================================
# Commands
# =============================================================================

def cmd_sheet(args, extractor: Extractor):
    """Extract one row by id, or search the sheet by text."""
    key = parse_id(args.id)
    if isinstance(key, int):
        return extractor.get(args.sheet, key)
    return extractor.search(args.sheet, key)


def cmd_icon(args, extractor: Extractor):
    return extractor.icon(args.icon_id)


def cmd_job_actions(args, extractor: Extractor):
    return extractor.job_actions(args.job_id, names=args.names)


def cmd_role_actions(args, extractor: Extractor):
    return extractor.role_actions(Role.from_label(args.role), names=args.names)


def cmd_version(args, extractor: Extractor):
    return extractor.game_version()


def write_result(result, path: str, pretty: bool) -> None:
    """Write a result to ``path``, or to stdout when ``path`` is "-"."""
    binary = isinstance(result, Icon)
    if path == "-":
        out = sys.stdout.buffer if binary else sys.stdout
        result.write(out, pretty=pretty)
        out.flush()
        return

    if binary:
        with open(path, 'wb') as f:
            result.write(f, pretty=pretty)
    else:
        with open(path, 'w', encoding='utf-8') as f:
            result.write(f, pretty=pretty)
    logger.info(f"Wrote {path}")


# =============================================================================
# Parser
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xivextract",
        description="Extract data from FFXIV's Excel sheets and icon textures",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    xivextract -d ~/ffxiv/game Action 7
    xivextract -d ~/ffxiv/game Status Regen
    xivextract -d ~/ffxiv/game -f icon.png icon 405
    xivextract -d ~/ffxiv/game role-actions tank --names
"""
    )
    parser.add_argument('--version', action='version', version=f'xivextract {__version__}')
    parser.add_argument('-d', '--game-dir', help='Game directory (the folder holding ffxivgame.ver)')
    parser.add_argument('-f', '--file', default='-', help='Output file (default: stdout)')
    parser.add_argument('--config', type=Path, help='YAML config file')
    parser.add_argument('--schema-dir', help='Schema definitions directory')
    parser.add_argument('--schema-format', choices=sorted(PROVIDERS), help='Schema definition format')
    parser.add_argument('--schema-version', help='Schema version to use instead of the game version')
    parser.add_argument('--language', help='Sheet language code (en, ja, de, fr, ...)')
    parser.add_argument('--debug', action='store_true', help='Show tracebacks for unexpected errors')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='-v for info, -vv for debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # curated sheets
    for kind, help_text in SHEET_HELP.items():
        sheet_p = subparsers.add_parser(kind.sheet, help=help_text)
        sheet_p.add_argument('id', help='Row ID, or text to search for')
        sheet_p.add_argument('-p', '--pretty', action='store_true', help='Pretty-print the output')
        sheet_p.set_defaults(func=cmd_sheet, sheet=kind.sheet)

    # sheet
    any_p = subparsers.add_parser('sheet', help='Retrieve or search any flat sheet')
    any_p.add_argument('sheet', help='Sheet name')
    any_p.add_argument('id', help='Row ID, or text to search for')
    any_p.add_argument('-p', '--pretty', action='store_true', help='Pretty-print the output')
    any_p.set_defaults(func=cmd_sheet)

    # icon
    icon_p = subparsers.add_parser('icon', help='Extract an icon as PNG')
    icon_p.add_argument('icon_id', type=int, help='Icon ID')
    icon_p.set_defaults(func=cmd_icon, pretty=False)

    # job-actions
    job_p = subparsers.add_parser('job-actions', help='List the actions of a class or job')
    job_p.add_argument('job_id', type=int, help='ClassJob ID')
    job_p.add_argument('-n', '--names', action='store_true', help='List names instead of IDs')
    job_p.add_argument('-p', '--pretty', action='store_true', help='Pretty-print the output')
    job_p.set_defaults(func=cmd_job_actions)

    # role-actions
    role_p = subparsers.add_parser('role-actions', help='List the role actions of a party role')
    role_p.add_argument('role', choices=[r.label for r in Role], help='Party role')
    role_p.add_argument('-n', '--names', action='store_true', help='List names instead of IDs')
    role_p.add_argument('-p', '--pretty', action='store_true', help='Pretty-print the output')
    role_p.set_defaults(func=cmd_role_actions)

    # version
    version_p = subparsers.add_parser('version', help='Print the version of the game files')
    version_p.set_defaults(func=cmd_version, pretty=False)

    return parser


def configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        return
    logging.basicConfig(
        level=logging.DEBUG if verbosity > 1 else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    config = ExtractorConfig(args.config)
    config.override(
        game_path=args.game_dir,
        schema_path=args.schema_dir,
        schema_format=args.schema_format,
        schema_version=args.schema_version,
        language=args.language,
        debug=True if args.debug else None,
    )

    try:
        extractor = Extractor.from_config(config)
        result = args.func(args, extractor)
        if result is not None:
            write_result(result, args.file, args.pretty)
    except ExtractError as e:
        print(e.message, file=sys.stderr)
        if isinstance(e, Unknown) and e.trace:
            print(e.trace, file=sys.stderr)
        return 1
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
