"""
Main entry point for heyi.
"""
import argparse
import asyncio
import sys
from typing import Optional

from .constants import APP_DESCRIPTION, APP_NAME, APP_VERSION, HELP_EPILOG, OUTPUT_FORMATS
from .errors import InputError
from .prompts.preset import FlagOptions


PRESET_COMMAND = "preset"


class CliArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with 1, like every other failure."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    """Options shared by prompt mode and preset mode.

    Scalar options default to None so that the preset merge can tell a
    passed flag from an absent one.
    """
    parser.add_argument(
        "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}"
    )

    parser.add_argument(
        "-m", "--model",
        type=str,
        default=None,
        help="AI model to use (default: $HEYI_MODEL or openai/gpt-4o-mini)"
    )

    parser.add_argument(
        "-f", "--format",
        type=str,
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: string)"
    )

    parser.add_argument(
        "-s", "--schema",
        type=str,
        default=None,
        help="Schema for object/array format, e.g. \"z.object({name: z.string()})\""
    )

    parser.add_argument(
        "-c", "--crawler",
        type=str,
        default=None,
        help="URL crawler: fetch, chrome, or a path to a browser executable "
             "(default: $HEYI_CRAWLER or fetch)"
    )

    parser.add_argument(
        "--file",
        dest="files",
        action="append",
        default=[],
        metavar="PATH",
        help="Read content from file and include as context (can be used multiple times)"
    )

    parser.add_argument(
        "--url",
        dest="urls",
        action="append",
        default=[],
        metavar="URL",
        help="Fetch content from URL and include as context (can be used multiple times)"
    )

    parser.add_argument(
        "--var",
        dest="vars",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Define variables for replacement in prompt using {{key}} syntax "
             "(can be used multiple times)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug information to stderr"
    )


def build_parser() -> argparse.ArgumentParser:
    """Parser for `heyi [prompt] [options]`."""
    parser = CliArgumentParser(
        prog=APP_NAME,
        description=APP_DESCRIPTION,
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "prompt",
        nargs="?",
        default=None,
        help="The AI prompt to execute (optional when using stdin)"
    )
    _add_common_options(parser)
    return parser


def build_preset_parser() -> argparse.ArgumentParser:
    """Parser for `heyi preset <file> [options]`."""
    parser = CliArgumentParser(
        prog=f"{APP_NAME} {PRESET_COMMAND}",
        description="Run a prompt stored in a preset JSON file; flags override the preset",
    )
    parser.add_argument(
        "preset_file",
        help="Path to the preset JSON file"
    )
    _add_common_options(parser)
    return parser


def parse_vars(assignments: list[str]) -> dict[str, str]:
    """
    Parse repeated --var key=value assignments.

    The value may itself contain '='; later assignments of a key win.

    Raises:
        InputError: If an assignment has no '=' or an empty key
    """
    variables: dict[str, str] = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise InputError(
                f"Invalid --var format: '{assignment}'. Expected format: key=value"
            )
        variables[key] = value
    return variables


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments, dispatching preset mode on its first word."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv and argv[0] == PRESET_COMMAND:
        args = build_preset_parser().parse_args(argv[1:])
        args.prompt = None
    else:
        args = build_parser().parse_args(argv)
        args.preset_file = None
    return args


def flag_options(args: argparse.Namespace) -> FlagOptions:
    """Convert parsed arguments into the options crossing into the runner."""
    return FlagOptions(
        model=args.model,
        format=args.format,
        schema=args.schema,
        crawler=args.crawler,
        files=list(args.files),
        urls=list(args.urls),
        variables=parse_vars(args.vars),
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    from .rich_ui.console import print_error, setup_logging
    setup_logging(args.verbose)

    try:
        from .config import load_config
        from .rich_ui.input import VariablePrompter
        from .runner import Runner

        config = load_config()
        flags = flag_options(args)
        runner = Runner(config, ask=VariablePrompter())
        result = asyncio.run(runner.run(args.prompt, flags, preset_path=args.preset_file))
    except KeyboardInterrupt:
        print_error(InputError("Interrupted"))
        return 130
    except Exception as e:
        print_error(e)
        return 1

    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
