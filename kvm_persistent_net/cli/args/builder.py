# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/cli/args/builder.py
from __future__ import annotations

import argparse

from ...core.logger import c
from ..help_texts import EXAMPLES, NOTES, YAML_EXAMPLE


class HelpFormatter(argparse.RawDescriptionHelpFormatter, argparse.ArgumentDefaultsHelpFormatter):
    """Combines raw description formatting with default value display in help."""


def _build_epilog() -> str:
    return (
        c("Examples:\n", "cyan", ["bold"])
        + c(EXAMPLES, "cyan")
        + "\n"
        + c("YAML config:\n", "cyan", ["bold"])
        + c(YAML_EXAMPLE, "cyan")
        + "\n"
        + NOTES
    )
