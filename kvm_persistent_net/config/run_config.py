# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/config/run_config.py
from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Optional

from ..udev.model import NamingPolicy
from ..udev.rules import DEFAULT_RULE_NAME, UDEV_RULES_DIR


@dataclass(frozen=True)
class RunConfig:
    """
    Everything one invocation needs, built once at the CLI boundary.

    Nothing below the entry point reads argv, environment or config files;
    the orchestrator and backends only see this object.
    """
    vm_name: str
    policy: NamingPolicy = field(default_factory=NamingPolicy)
    rule_name: str = DEFAULT_RULE_NAME
    dry_run: bool = False
    verbose: int = 0
    use_sudo: bool = True
    timeout_s: Optional[float] = None
    rules_dir: str = UDEV_RULES_DIR

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunConfig":
        return cls(
            vm_name=args.vm_name,
            policy=NamingPolicy(prefix=args.prefix, start_index=int(args.start_index)),
            rule_name=args.rule_name,
            dry_run=args.dry_run,
            verbose=int(args.verbose or 0),
            use_sudo=args.use_sudo,
            timeout_s=args.timeout,
        )
