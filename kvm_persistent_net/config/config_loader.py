# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/config/config_loader.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Sequence

import yaml

from ..core.exceptions import UsageError


class Config:
    """
    YAML config files as argparse defaults.

    Files are merged in order (later overrides earlier); keys may use dashes or
    underscores. Only the keys in KEYS are applied; anything else is warned
    about and ignored.
    """

    KEYS = frozenset({"prefix", "start_index", "rule_name", "dry_run", "use_sudo", "timeout"})

    @staticmethod
    def _normalize_key(k: Any) -> str:
        return str(k).strip().replace("-", "_")

    @staticmethod
    def load_one(logger: logging.Logger, path: str) -> Dict[str, Any]:
        p = Path(path).expanduser()
        if not p.is_file():
            raise UsageError(msg=f"Config file not found: {p}")
        try:
            data = yaml.safe_load(p.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise UsageError(msg=f"Failed to load config {p}: {e}", cause=e)

        if data is None:
            logger.debug("Config %s is empty", p)
            return {}
        if not isinstance(data, dict):
            raise UsageError(msg=f"Config {p} must be a mapping at top level, got {type(data).__name__}")

        logger.debug("Loaded config %s (%d keys)", p, len(data))
        return {Config._normalize_key(k): v for k, v in data.items()}

    @staticmethod
    def load_many(logger: logging.Logger, paths: Sequence[str]) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for path in paths:
            merged.update(Config.load_one(logger, path))
        return merged

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        known = {a.dest for a in parser._actions} & Config.KEYS
        defaults: Dict[str, Any] = {}
        for k, v in conf.items():
            if k in known:
                defaults[k] = v
            else:
                logger.warning("⚠️  Ignoring unknown config key: %s", k)
        if defaults:
            parser.set_defaults(**defaults)
