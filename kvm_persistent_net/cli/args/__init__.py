# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/cli/args/__init__.py
"""
Argument parser modules for the kvm-vm-persistent-net CLI.
"""
from __future__ import annotations

from .builder import HelpFormatter, _build_epilog
from .parser import ArgumentParser, build_parser, parse_args_with_config
from .validators import validate_args

__all__ = [
    "ArgumentParser",
    "HelpFormatter",
    "_build_epilog",
    "build_parser",
    "parse_args_with_config",
    "validate_args",
]
