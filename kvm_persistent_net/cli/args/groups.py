# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/cli/args/groups.py
from __future__ import annotations

import argparse

from ...udev.rules import DEFAULT_RULE_NAME


def _non_negative_int(s: str) -> int:
    try:
        v = int(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {s!r}")
    if v < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {v}")
    return v


def _positive_float(s: str) -> float:
    try:
        v = float(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {s!r}")
    if v <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {v}")
    return v


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML config file (repeatable; later overrides earlier, CLI overrides both).",
    )
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Progress diagnostics on stdout: -v, -vv (debug: commands run, skipped NICs).",
    )
    p.add_argument("--log-file", dest="log_file", default=None, help="Also write logs to file.")


def _add_naming_policy(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Interface naming
    # ------------------------------------------------------------------
    p.add_argument("--prefix", dest="prefix", default="eth", help="Interface name prefix.")
    p.add_argument(
        "--start-index",
        dest="start_index",
        type=_non_negative_int,
        default=0,
        help="Starting index for interface numbering.",
    )
    p.add_argument(
        "--rule-name",
        dest="rule_name",
        default=DEFAULT_RULE_NAME,
        help="File name of the udev rules file inside /etc/udev/rules.d/.",
    )


def _add_operation_flags(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Operation
    # ------------------------------------------------------------------
    p.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Show the rules file contents without copying it to the VM.",
    )
    p.add_argument(
        "--no-sudo",
        dest="use_sudo",
        action="store_false",
        help="Run virsh / virt-copy-in directly instead of through sudo.",
    )
    p.set_defaults(use_sudo=True)
    p.add_argument(
        "--timeout",
        dest="timeout",
        type=_positive_float,
        default=None,
        help="Seconds to wait for each virsh / virt-copy-in invocation (default: no limit).",
    )


def _add_vm_name(p: argparse.ArgumentParser) -> None:
    # Validated to exactly one by validate_args (UsageError otherwise).
    p.add_argument("vm_names", metavar="vm-name", nargs="*", help="Name of the shut-off libvirt domain.")
