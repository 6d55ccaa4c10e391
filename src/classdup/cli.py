import argparse
import logging
import sys
import textwrap
from pathlib import Path

from . import DuplicateClassRule, Processor
from .host.discovery import discover_artifacts
from .result import DuplicateClassesFailure, FatalFailure
from .settings import Settings, SETTING_CONCURRENCY, SETTING_IGNORED, SETTING_LOGGING_PATH

EXIT_OK = 0
EXIT_DUPLICATES = 1
EXIT_FATAL = 2

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(args, settings: Settings):
    """Configure logging from command-line arguments, falling back to the settings file.

    Without a log file, records go to stderr.
    """
    log_level = args.log_level
    if log_level is None:
        log_level = 'DEBUG' if args.verbose else 'INFO'

    log_file = args.log_file
    if log_file is None:
        log_file = settings.get(SETTING_LOGGING_PATH)

    # Reset logging configuration
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    if log_file:
        logging.basicConfig(filename=str(log_file), level=getattr(logging, log_level), format=LOG_FORMAT)
    else:
        logging.basicConfig(stream=sys.stderr, level=getattr(logging, log_level),
                            format='%(levelname)s: %(message)s')


def classdup_main(argv=None):
    parser = argparse.ArgumentParser(
        prog='classdup',
        description='Detect classes that are present in several jar archives with differing content.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Examples:
              classdup check target/lib
              classdup check --ignore org.example:legacy lib/a.jar lib/b.jar
              classdup describe build/classdup-report
            ''').strip()
    )
    parser.add_argument(
        '--config',
        metavar='PATH',
        help='Path to a TOML settings file (default: classdup.toml in the working directory if present)')
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output, including per-archive progress')
    parser.add_argument(
        '--log-file',
        metavar='PATH',
        help='Path to log file. If not provided, uses logging.path from the settings file or stderr.')
    parser.add_argument(
        '--log-level',
        metavar='LEVEL',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Defaults to INFO, or DEBUG with --verbose.')
    subparsers = parser.add_subparsers(
        dest='command',
        title='Commands',
        description='Available commands',
        help='Use "classdup COMMAND --help" for command-specific help',
        required=True
    )

    parser_check = subparsers.add_parser(
        'check',
        help='Check archives for differing duplicate classes',
        description='Indexes the class entries of the given jar files (directories are searched recursively) '
                    'and fails if a class is present in more than one archive with differing bytes. '
                    'Identical copies are tolerated.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent('''
            Exit status:
              0  no differing duplicates
              1  differing duplicates found
              2  an archive could not be read
            ''').strip())
    parser_check.add_argument(
        'paths',
        nargs='+',
        metavar='PATH',
        help='Jar files or directories containing jar files')
    parser_check.add_argument(
        '--ignore',
        action='append',
        default=[],
        metavar='GROUP:NAME',
        help='Exclude an artifact from the check; may be repeated')
    parser_check.add_argument(
        '--jobs',
        type=int,
        metavar='N',
        help='Number of worker processes (default: processor.concurrency setting or CPU count)')
    parser_check.add_argument(
        '--report',
        metavar='DIR',
        help='Persist the findings to a report directory for later use with "describe"')
    parser_check.set_defaults(method=_check)

    parser_describe = subparsers.add_parser(
        'describe',
        help='Show a report written by "check --report"',
        description='Displays the outcome and conflicts stored in a report directory.')
    parser_describe.add_argument(
        'report',
        metavar='DIR',
        help='Report directory')
    parser_describe.add_argument(
        '--paths',
        action='store_true',
        help='Show the archive files involved in each conflict')
    parser_describe.set_defaults(method=_describe)

    args = parser.parse_args(argv)

    settings = Settings.load(Path(args.config) if args.config else None)
    configure_logging(args, settings)

    return args.method(settings, args)


def _check(settings: Settings, args) -> int:
    ignored = set(settings.get(SETTING_IGNORED, []))
    ignored.update(args.ignore)

    concurrency = args.jobs if args.jobs is not None else settings.get(SETTING_CONCURRENCY)

    artifacts = discover_artifacts(Path(p) for p in args.paths)

    with Processor(concurrency) as processor:
        with DuplicateClassRule(processor, ignored) as rule:
            result = rule.check(artifacts)

    if args.report:
        from .report.store import save_report
        save_report(Path(args.report), result, len(artifacts), ignored)

    if isinstance(result, FatalFailure):
        print(f"Error: {result.message}", file=sys.stderr)
        return EXIT_FATAL

    # The summary of a failed check has been logged with the conflicts
    if isinstance(result, DuplicateClassesFailure):
        return EXIT_DUPLICATES

    return EXIT_OK


def _describe(settings: Settings, args) -> int:
    from .commands.describe import do_describe

    try:
        do_describe(Path(args.report), show_paths=args.paths)
    except FileNotFoundError as e:
        print(f"Error: No report found at {args.report}: {e}", file=sys.stderr)
        return EXIT_FATAL

    return EXIT_OK


def main():
    sys.exit(classdup_main())


if __name__ == '__main__':
    main()
