# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/cli/args/validators.py
from __future__ import annotations

import argparse
import logging
import re
from typing import Any, List

from ...core.logger import Log

# Values are substituted into rule lines without escaping.
_PREFIX_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def _validate_vm_names(args: argparse.Namespace) -> List[str]:
    names = list(getattr(args, "vm_names", None) or [])
    if not names:
        return ["VM name is required"]
    if len(names) > 1:
        return [f"exactly one VM name is required, got {len(names)}: {' '.join(names)}"]
    if not names[0].strip():
        return ["VM name must not be empty"]
    return []


def _validate_prefix(prefix: Any) -> List[str]:
    if not isinstance(prefix, str) or not _PREFIX_RE.match(prefix):
        return [f"--prefix must be a non-empty string of [A-Za-z0-9_.-], got {prefix!r}"]
    return []


def _validate_start_index(start_index: Any) -> List[str]:
    # bool and float both pass int() silently
    if isinstance(start_index, (bool, float)):
        return [f"--start-index must be a non-negative integer, got {start_index!r}"]
    try:
        v = int(start_index)
    except (TypeError, ValueError):
        return [f"--start-index must be an integer, got {start_index!r}"]
    if v < 0:
        return [f"--start-index must be a non-negative integer, got {start_index!r}"]
    return []


def _validate_switch(name: str, value: Any) -> List[str]:
    if not isinstance(value, bool):
        return [f"{name} must be true or false, got {value!r}"]
    return []


def _validate_rule_name(rule_name: Any) -> List[str]:
    if not isinstance(rule_name, str) or not rule_name.strip():
        return ["--rule-name must not be empty"]
    if "/" in rule_name or rule_name in (".", ".."):
        return [f"--rule-name must be a plain file name, got {rule_name!r}"]
    return []


def _validate_timeout(timeout: Any) -> List[str]:
    if timeout is None:
        return []
    try:
        v = float(timeout)
    except (TypeError, ValueError):
        return [f"--timeout must be a number of seconds, got {timeout!r}"]
    if v <= 0:
        return [f"--timeout must be positive, got {timeout!r}"]
    return []


def validate_args(args: argparse.Namespace, logger: logging.Logger) -> List[str]:
    """
    Validate the merged (config + CLI) namespace.

    Returns the list of problems (empty when valid). On success, normalizes
    args.vm_name / args.start_index / args.timeout for RunConfig.from_args.
    """
    problems: List[str] = []
    problems += _validate_vm_names(args)
    problems += _validate_prefix(getattr(args, "prefix", None))
    problems += _validate_start_index(getattr(args, "start_index", None))
    problems += _validate_rule_name(getattr(args, "rule_name", None))
    problems += _validate_timeout(getattr(args, "timeout", None))
    problems += _validate_switch("dry_run", getattr(args, "dry_run", False))
    problems += _validate_switch("use_sudo", getattr(args, "use_sudo", True))
    if problems:
        return problems

    args.vm_name = args.vm_names[0].strip()
    args.start_index = int(args.start_index)
    args.timeout = float(args.timeout) if args.timeout is not None else None

    if not args.rule_name.endswith(".rules"):
        Log.warn(logger, "Rule file %r does not end in .rules; udev will ignore it", args.rule_name)

    return []
