#!/usr/bin/env python3
"""
Terra Classic batch sender.

Reads a CSV or Excel sheet with the columns address, amount, type and token,
validates every row, shows the result table and then either writes a dry-run
log or signs all valid transfers into one transaction and broadcasts it.
"""
import argparse
import getpass
import logging
import sys

import config
import sender_logging
from app.container import ServiceContainer
from errors import BatchSenderError, ConfigurationError
from orchestrator import MODE_FAILED


logger = logging.getLogger("batch_sender")


def _ask(question: str) -> str:
    return input(question).strip()


def _ask_secret(question: str) -> str:
    return getpass.getpass(question).strip()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="batch_sender", description="Terra Classic Batch Sender")
    parser.add_argument("--file", "-f", help="Input sheet (CSV or Excel); asked interactively when omitted")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--dry-run", dest="dry_run", action="store_true", default=None, help="Validate and log only")
    mode.add_argument("--live", dest="dry_run", action="store_false", default=None, help="Broadcast after confirmation")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip the send confirmation prompt")
    parser.add_argument("--env", help="Configuration environment (development, test, production)")
    parser.add_argument("--output-dir", "-o", help="Directory for the result sheets")
    parser.add_argument("--show-mnemonic", action="store_true", help="Echo the mnemonic while typing it")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        overrides = {"output": {"directory": args.output_dir}} if args.output_dir else None
        settings = config.reload_settings(env=args.env, overrides=overrides)
    except ConfigurationError as exc:
        sender_logging.configure(config.LoggingSettings())
        logger.critical("Configuration error during startup: %s", exc)
        return 1

    sender_logging.configure(settings.logging)
    container = ServiceContainer.build(
        settings=settings,
        overrides={
            "ask": _ask,
            "ask_secret": _ask if args.show_mnemonic else _ask_secret,
        },
    )

    try:
        result = container.build_run().execute(file_path=args.file, dry_run=args.dry_run, assume_yes=args.yes)
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        return 1
    except BatchSenderError as exc:
        logger.critical("%s", exc)
        return 1
    except Exception:
        logger.exception("An unexpected error occurred.")
        return 1

    logger.info("Run finished: %s", result.mode)
    return 1 if result.mode == MODE_FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
