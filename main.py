#!/usr/bin/env python3
"""
Main CLI entry point for the accessibility validator
"""

import asyncio
import argparse
import logging
import sys
from typing import List, Optional

from a11y_validator.config_loader import ConfigLoader, ValidatorConfig, parse_bool
from a11y_validator.console_report import render
from a11y_validator.definition_loader import load_definition
from a11y_validator.errors import ConfigurationError
from a11y_validator.expectations import ExpectationSuite
from a11y_validator.models import Definition, RunSummary
from a11y_validator.process_handler import ProcessHandler
from a11y_validator.report_generator import ReportGenerator
from a11y_validator.validator import Validator


# Configure logging with UTF-8 encoding to handle Unicode characters
class UTF8StreamHandler(logging.StreamHandler):
    """StreamHandler that uses UTF-8 encoding for Windows compatibility"""
    def __init__(self, stream=None):
        if stream is None:
            stream = sys.stdout
        if sys.platform == 'win32' and hasattr(stream, 'reconfigure'):
            try:
                stream.reconfigure(encoding='utf-8', errors='replace')
            except (AttributeError, ValueError):
                pass
        super().__init__(stream)


class BelowErrorFilter(logging.Filter):
    """Keeps errors off stdout; they go to stderr"""
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.ERROR


def configure_logging(debug: bool = False, log_file: Optional[str] = 'a11y-validator.log'):
    stdout_handler = UTF8StreamHandler(sys.stdout)
    stdout_handler.addFilter(BelowErrorFilter())
    stderr_handler = UTF8StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR)
    handlers: List[logging.Handler] = [stdout_handler, stderr_handler]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='a11y-validator',
        description='Validate web pages for accessibility issues with axe-core',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  a11y-validator -f pages.yaml
  a11y-validator -f pages.yaml --headless no --detailed-report
  a11y-validator -f pages.yaml -M 5 --html-report nightly
        """
    )
    parser.add_argument('-f', '--definition-file', required=True, help='Definition file (.yaml/.yml/.json)')
    parser.add_argument('--headless', default=None, help='Run in headless mode (yes/no/true/false)')
    parser.add_argument('-r', '--detailed-report', action='store_true', default=None,
                        help='Print a detailed report')
    parser.add_argument('-d', '--debug-info', action='store_true', default=None,
                        help='Print debug info to console')
    parser.add_argument('-w', '--warnings', action='store_true', default=None,
                        help='Validation fails on warnings too')
    parser.add_argument('-M', '--max-errors', type=int, default=None,
                        help="Pass while there are fewer than M failed tests")
    parser.add_argument('--config', default=None, help='Path to configuration YAML file')
    parser.add_argument('--browser', default=None, choices=['chrome', 'firefox'], help='Default browser')
    parser.add_argument('--reuse-browsers', action='store_true', default=None,
                        help='Reuse one browser per browser type for all pages')
    parser.add_argument('--html-report', default=None, metavar='NAME',
                        help='Write an HTML report named NAME-report.html')
    parser.add_argument('--report-dir', default='.', help='Directory for the HTML report')
    return parser


def build_config(args: argparse.Namespace) -> ValidatorConfig:
    config = ConfigLoader.load_config(args.config)
    return config.with_overrides(
        headless=parse_bool(args.headless, 'headless') if args.headless is not None else None,
        detailed_report=args.detailed_report,
        debug=args.debug_info,
        assert_warnings=args.warnings,
        browser=args.browser,
        reuse_browsers=args.reuse_browsers,
    )


async def validate(definition: Definition, config: ValidatorConfig,
                   html_report: Optional[str] = None, report_dir: str = '.') -> RunSummary:
    """
    Run the validator and evaluate its results

    Returns:
        RunSummary with pass/fail counts
    """
    validator = Validator(definition, config)
    results = await validator.run()

    logger.info(render(results, detailed=config.detailed_report))

    if html_report:
        ReportGenerator(report_dir).generate_report(html_report, results)

    suite = ExpectationSuite(config.name, assert_warnings=config.assert_warnings)
    summary = suite.evaluate(results)
    for case in summary.test_fails:
        logger.error(f"FAILED {case.suite} > {case.title}: {case.message}")
    logger.info(f"Violations: {validator.validation_errors()}, warnings: {validator.warnings()}")
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function"""
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = ProcessHandler()
    if args.max_errors is not None:
        try:
            handler.max_fails(args.max_errors)
        except ValueError as e:
            parser.error(str(e))

    configure_logging()
    try:
        config = build_config(args)
        if config.debug:
            logging.getLogger().setLevel(logging.DEBUG)
            logger.debug(f"Validator configuration set: {ConfigLoader.describe(config)}")
        logger.info(f"Running {'headless' if config.headless else 'with a visible browser'}.")
        definition = load_definition(args.definition_file)
        summary = asyncio.run(validate(definition, config, args.html_report, args.report_dir))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    return handler.assert_results(summary.fails, summary.passes)


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
