#!/usr/bin/env python3
"""
Project Generator CLI

Command-line interface for resolving how a project is generated:
interactively, from a configuration file, or fully automated.
"""

import argparse
import logging
import sys

from . import __version__
from .config import ConfigManager
from .conflict.matrix import RuleCategory, default_matrix
from .errors import ConflictError, ExitCode, GeneratorError, exit_code_for, EXIT_CODE_REASONS
from .flags import GlobalFlags, process_global_flags
from .logging_config import setup_logging
from .mode_detection import GenerationMode
from .report import format_conflict_report, format_matrix, format_mode_result
from .resolver import ModeResolver

logger = logging.getLogger(__name__)


# ============================================================================
# Commands
# ============================================================================

def cmd_generate(args, flags: GlobalFlags, config):
    """Resolve the generation mode for this run."""
    resolver = ModeResolver(strict=config.mode.strict)
    result = resolver.resolve(args)

    if result.mode == GenerationMode.CONFIG_FILE:
        logger.info("Loading project configuration from %s", args.config)
    elif result.mode == GenerationMode.NON_INTERACTIVE:
        logger.info("Running in non-interactive mode")

    logger.debug("Output directory: %s", args.output)

    print(format_mode_result(result, flags.output_format), end="")


def cmd_conflicts(args, flags: GlobalFlags, config):
    """List the flag conflict rules."""
    categories = [RuleCategory(c) for c in args.category] if args.category else None
    matrix = default_matrix(categories)
    print(format_matrix(matrix, flags.output_format), end="")


# ============================================================================
# Entry point
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projgen",
        description="Project Generator - scaffold projects interactively, from a config file, or in CI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  projgen generate
  projgen generate --config project.yaml
  projgen generate --non-interactive
  projgen generate --mode=ni
  projgen --output-format json generate --force-interactive
  projgen conflicts --category generation
        """
    )

    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging with detailed operation information')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-error output (quiet mode)')
    parser.add_argument('--debug', '-d', action='store_true', help='Enable debug logging')
    parser.add_argument('--log-level', default=None, help='Set log level (debug, info, warn, error, fatal)')
    parser.add_argument('--log-file', default=None, help='Also write logs to this file')
    parser.add_argument('--output-format', default=None, help='Output format (text, json, yaml)')
    parser.add_argument('--settings', default=None, help='Settings file (default: .projgen.yaml)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Generate command
    generate_parser = subparsers.add_parser('generate', help='Resolve the generation mode and generate a project')
    generate_parser.add_argument('--config', '-c', default='', help='Path to configuration file')
    generate_parser.add_argument('--output', '-o', default='.', help="Output directory, passed on to the project generator (not written by projgen)")
    generate_parser.add_argument('--interactive', action='store_true', help='Force interactive mode')
    generate_parser.add_argument('--non-interactive', action='store_true', help='Run in non-interactive mode')
    generate_parser.add_argument('--force-interactive', action='store_true',
                                 help='Force interactive mode (override detection)')
    generate_parser.add_argument('--force-non-interactive', action='store_true',
                                 help='Force non-interactive mode (override detection)')
    generate_parser.add_argument('--mode', default='',
                                 help='Explicit mode: interactive, non-interactive, config-file')
    generate_parser.set_defaults(func=cmd_generate)

    # Conflicts command
    conflicts_parser = subparsers.add_parser('conflicts', help='List flag combinations that cannot be used together')
    conflicts_parser.add_argument('--category', action='append', choices=[c.value for c in RuleCategory],
                                  help='Only show rules of this category (repeatable)')
    conflicts_parser.set_defaults(func=cmd_conflicts)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        config = ConfigManager(args.settings).get()
        flags = process_global_flags(
            args,
            default_log_level=config.logging.level,
            default_output_format=config.mode.default_output_format,
        )
        setup_logging(flags.log_level, args.log_file or config.logging.file)
        args.func(args, flags, config)
    except ConflictError as e:
        print(format_conflict_report(e.rules), file=sys.stderr, end="")
        _exit(e)
    except GeneratorError as e:
        print(f"Error: {e}", file=sys.stderr)
        _exit(e)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        _exit(e)
    except KeyboardInterrupt as e:
        print("\nCancelled.", file=sys.stderr)
        _exit(e)
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        _exit(e)

    sys.exit(int(ExitCode.SUCCESS))


def _exit(error: BaseException):
    code = exit_code_for(error)
    logger.debug("Exiting with code %d: %s", code, EXIT_CODE_REASONS[code])
    sys.exit(int(code))


if __name__ == '__main__':
    main()
