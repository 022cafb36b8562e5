#!/usr/bin/env python3
"""
batchexec: launch all configured processes and wait for their exit codes

Usage:
  batchexec -c processes.yaml -l logging.yaml
  batchexec -c processes.toml -l logging.yaml --summary
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from batchexec.core.configuration import load_file_config
from batchexec.core.coordinator import BatchCoordinator
from batchexec.core.errors import render_exception
from batchexec.core.runner import CommandRunner
from batchexec.core.summary import render_summary
from batchexec.utils.logging_config import setup_logging_from_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="batchexec",
        description="Program to launch all the processes and wait for their exit code",
    )
    parser.add_argument("-c", "--config", dest="config_path", required=True, help="File configuration path")
    parser.add_argument("-l", "--log-config", dest="log_config_path", required=True, help="Log configuration file path")
    parser.add_argument("--shell", default=None, help="Shell executable used to run every process (default: /bin/sh)")
    parser.add_argument("--summary", action="store_true", help="Print a per-process summary table after the run")
    return parser


def run(args: argparse.Namespace) -> int:
    logger = setup_logging_from_file(Path(args.log_config_path))
    config = load_file_config(Path(args.config_path))
    logger.info("Completed configuration initialization!")

    coordinator = BatchCoordinator(CommandRunner(shell=args.shell), logger=logger)
    result = coordinator.run(config.processes)
    if args.summary:
        print(render_summary(result), end="")
    # exit status reflects setup only, never individual process outcomes
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        # usage errors share the setup-failure exit status; --help stays 0
        return 0 if e.code in (0, None) else 1
    try:
        rc = run(args)
    except Exception as e:
        logging.getLogger("batchexec").debug("setup failed", exc_info=True)
        print(render_exception(e), file=sys.stderr)
        return 1
    print("Program completed!")
    return rc


if __name__ == "__main__":
    sys.exit(main())
