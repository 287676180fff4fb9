# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/__main__.py
from __future__ import annotations

import sys
import traceback
from typing import Optional, Sequence

from .cli.args.parser import parse_args_with_config
from .core.exceptions import UsageError, format_exception_for_cli
from .orchestrator.orchestrator import Orchestrator


def _print_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def _safe_log(logger, level: str, msg: str) -> None:
    """
    Best-effort logging without assuming logger exists or has a given method.
    """
    if logger is None:
        _print_stderr(msg)
        return

    fn = getattr(logger, level, None)
    if callable(fn):
        fn(msg)
    else:
        _print_stderr(msg)


def run(argv: Optional[Sequence[str]] = None) -> int:
    logger = None

    # Phase 1: parse (UsageError can happen here; usage already printed)
    try:
        config, _conf, logger = parse_args_with_config(argv)
    except UsageError as e:
        _print_stderr(f"Error: {format_exception_for_cli(e)}")
        return e.code
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        return 130

    # Phase 2: run pipeline
    try:
        return Orchestrator(logger, config).run()
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        return 130
    except Exception as e:
        # Hard guardrail: unexpected exceptions should not fail silently.
        _safe_log(logger, "error", f"💥 UNHANDLED {type(e).__name__}: {e}")
        _safe_log(logger, "debug", traceback.format_exc())
        return 1


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
