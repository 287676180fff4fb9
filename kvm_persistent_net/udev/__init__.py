# SPDX-License-Identifier: LGPL-3.0-or-later
# kvm_persistent_net/udev/__init__.py
from .model import InterfaceBinding, NamingPolicy, NetworkDevice, RuleSet, VMStatus
from .naming import assign
from .rules import DEFAULT_RULE_NAME, UDEV_RULES_DIR, parse_rules, render_rules

__all__ = [
    "DEFAULT_RULE_NAME",
    "UDEV_RULES_DIR",
    "InterfaceBinding",
    "NamingPolicy",
    "NetworkDevice",
    "RuleSet",
    "VMStatus",
    "assign",
    "parse_rules",
    "render_rules",
]
