# SPDX-License-Identifier: LGPL-3.0-or-later
# kvm_persistent_net/udev/rules.py
"""Render and read back udev persistent-net rules."""

from __future__ import annotations

import re
from typing import Iterable, List

from .model import InterfaceBinding

DEFAULT_RULE_NAME = "70-persistent-net.rules"
UDEV_RULES_DIR = "/etc/udev/rules.d/"

_RULE_RE = re.compile(
    r'^SUBSYSTEM=="net", ACTION=="add", ATTR\{address\}=="(?P<mac>[^"]*)", NAME="(?P<name>[^"]*)"$'
)


def header_line(vm_name: str) -> str:
    return f"# Network interface persistence rules for VM '{vm_name}'"


def compose_udev_equality(key: str, value: str) -> str:
    """Return a udev comparison clause, like `ACTION=="add"`."""
    assert key == key.upper()
    return f'{key}=="{value}"'


def compose_udev_attr_equality(attribute: str, value: str) -> str:
    """Return a udev attribute comparison clause, like `ATTR{address}=="52:54:00:12:34:56"`."""
    assert attribute == attribute.lower()
    return f'ATTR{{{attribute}}}=="{value}"'


def compose_udev_setting(key: str, value: str) -> str:
    """Return a udev assignment clause, like `NAME="eth0"`."""
    assert key == key.upper()
    return f'{key}="{value}"'


def compose_udev_rule(binding: InterfaceBinding) -> str:
    """Return the single rule line naming the interface with `binding.hardware_address`.

    Values are substituted literally: MAC addresses and generated names are
    already safe tokens.
    """
    return ", ".join([
        compose_udev_equality("SUBSYSTEM", "net"),
        compose_udev_equality("ACTION", "add"),
        compose_udev_attr_equality("address", binding.hardware_address),
        compose_udev_setting("NAME", binding.interface_name),
    ])


def render_rules(bindings: Iterable[InterfaceBinding], vm_name: str) -> str:
    """Return the full rules file text: header comment, then one line per binding.

    Pure function of its inputs; the preview and the delivered file are both
    produced from this text.
    """
    lines = [header_line(vm_name)]
    lines.extend(compose_udev_rule(b) for b in bindings)
    return "".join(f"{ln}\n" for ln in lines)


def parse_rules(text: str) -> List[InterfaceBinding]:
    """Read rule lines back into bindings; comments and blank lines are ignored.

    Raises ValueError on a non-comment line that is not a rule in the format
    written by render_rules.
    """
    out: List[InterfaceBinding] = []
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        m = _RULE_RE.match(line)
        if not m:
            raise ValueError(f"line {lineno}: not a persistent-net rule: {line!r}")
        out.append(InterfaceBinding(hardware_address=m.group("mac"), interface_name=m.group("name")))
    return out
