# SPDX-License-Identifier: LGPL-3.0-or-later
# kvm_persistent_net/udev/model.py
"""
Data model for persistent network interface naming.

- VMStatus: what the status collaborator can report about a domain
- NetworkDevice: one virtual NIC as read from the domain description
- InterfaceBinding: MAC address -> interface name
- NamingPolicy: prefix + first numeric suffix
- RuleSet: the bindings of one VM, renderable to udev rule text
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class VMStatus(Enum):
    NOT_FOUND = "not-found"
    RUNNING = "running"  # exists, but not in the shut-off list
    SHUT_OFF = "shut-off"


@dataclass(frozen=True)
class NetworkDevice:
    """A virtual NIC. Only hardware_address takes part in naming."""

    hardware_address: str
    interface_type: Optional[str] = None  # <interface type="network|bridge|direct|...">
    model: Optional[str] = None  # <model type="virtio">
    source: Optional[str] = None  # network/bridge/dev of <source>

    def describe(self) -> str:
        bits = [self.hardware_address]
        if self.interface_type:
            bits.append(f"type={self.interface_type}")
        if self.model:
            bits.append(f"model={self.model}")
        if self.source:
            bits.append(f"source={self.source}")
        return " ".join(bits)


@dataclass(frozen=True)
class InterfaceBinding:
    hardware_address: str
    interface_name: str


@dataclass(frozen=True)
class NamingPolicy:
    prefix: str = "eth"
    start_index: int = 0

    def __post_init__(self) -> None:
        if self.start_index < 0:
            raise ValueError(f"start_index must be non-negative, got {self.start_index}")


@dataclass(frozen=True)
class RuleSet:
    vm_name: str
    bindings: Tuple[InterfaceBinding, ...] = ()

    def render(self) -> str:
        from .rules import render_rules

        return render_rules(self.bindings, self.vm_name)
