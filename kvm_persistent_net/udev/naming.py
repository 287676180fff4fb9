# SPDX-License-Identifier: LGPL-3.0-or-later
# kvm_persistent_net/udev/naming.py
from __future__ import annotations

from typing import List, Sequence

from .model import InterfaceBinding, NamingPolicy, NetworkDevice

# IFNAMSIZ is 16 including the trailing NUL.
MAX_INTERFACE_NAME_LEN = 15


def interface_name(policy: NamingPolicy, position: int) -> str:
    return f"{policy.prefix}{policy.start_index + position}"


def assign(devices: Sequence[NetworkDevice], policy: NamingPolicy) -> List[InterfaceBinding]:
    """
    Give the i-th device the name prefix + (start_index + i).

    Order is preserved and nothing is deduplicated: two devices reporting the
    same MAC address get two distinct, adjacent names.
    """
    return [
        InterfaceBinding(hardware_address=dev.hardware_address, interface_name=interface_name(policy, i))
        for i, dev in enumerate(devices)
    ]


def long_interface_names(bindings: Sequence[InterfaceBinding]) -> List[str]:
    """Names the kernel would refuse (longer than 15 characters)."""
    return [b.interface_name for b in bindings if len(b.interface_name) > MAX_INTERFACE_NAME_LEN]
