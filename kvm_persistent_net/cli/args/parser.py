# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/cli/args/parser.py
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, Optional, Sequence, TextIO, Tuple

from ...config.config_loader import Config
from ...config.run_config import RunConfig
from ...core.exceptions import UsageError
from ...core.logger import Log, c
from .builder import HelpFormatter, _build_epilog
from .groups import (
    _add_global_config_logging,
    _add_naming_policy,
    _add_operation_flags,
    _add_vm_name,
)
from .validators import validate_args

PROG = "kvm-vm-persistent-net"


class ArgumentParser(argparse.ArgumentParser):
    """argparse that reports bad invocations as UsageError instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(msg=message)


def build_parser() -> ArgumentParser:
    p = ArgumentParser(
        prog=PROG,
        description=c("kvm-vm-persistent-net: set persistent network interface names for KVM VMs", "green", ["bold"]),
        formatter_class=HelpFormatter,
        epilog=_build_epilog(),
    )

    _add_global_config_logging(p)
    _add_naming_policy(p)
    _add_operation_flags(p)
    _add_vm_name(p)

    return p


def _build_preparser() -> ArgumentParser:
    pre = ArgumentParser(add_help=False)
    pre.add_argument("--config", action="append", default=[])
    pre.add_argument("-v", "--verbose", action="count", default=0)
    pre.add_argument("--log-file", dest="log_file", default=None)
    return pre


def _load_merged_config(logger: logging.Logger, cfgs: Sequence[str]) -> Dict[str, Any]:
    if not cfgs:
        return {}
    return Config.load_many(logger, list(cfgs))


def parse_args_with_config(
    argv: Optional[Sequence[str]] = None,
    logger: Optional[logging.Logger] = None,
    *,
    stderr: Optional[TextIO] = None,
) -> Tuple[RunConfig, Dict[str, Any], logging.Logger]:
    """
    Flow:
      Phase 0: parse ONLY the flags needed to locate config/logging
      Phase 1: load+merge YAML config files
      Phase 2: apply config as defaults onto the parser
      Phase 3: full parse (CLI overrides config)
      Phase 4: validate and freeze into RunConfig

    Raises UsageError for any bad invocation, after printing usage to stderr.
    --help / --version exit with SystemExit(0) as argparse does.
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    err = stderr if stderr is not None else sys.stderr

    parser = build_parser()
    try:
        args0, _rest = _build_preparser().parse_known_args(argv)

        if logger is None:
            try:
                logger = Log.setup(getattr(args0, "verbose", 0), getattr(args0, "log_file", None))
            except OSError as e:
                raise UsageError(msg=f"Cannot open log file {args0.log_file}: {e}", cause=e)

        conf = _load_merged_config(logger, getattr(args0, "config", None) or [])

        # Apply config as defaults so CLI can override.
        Config.apply_as_defaults(logger, parser, conf)

        args = parser.parse_args(argv)

        problems = validate_args(args, logger)
        if problems:
            raise UsageError(msg="; ".join(problems))
    except UsageError:
        parser.print_usage(err)
        raise

    return RunConfig.from_args(args), conf, logger
