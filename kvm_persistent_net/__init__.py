# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/__init__.py
"""
kvm_persistent_net - persistent network interface names for KVM guests

Generates a udev rules file mapping each NIC's MAC address (read from the
libvirt domain XML of a shut-off VM) to a fixed interface name, and copies it
into the guest's /etc/udev/rules.d/.

Usage as a library:

    from kvm_persistent_net import NamingPolicy, assign, render_rules
    from kvm_persistent_net.udev.discovery import parse_domain_interfaces

    devices = parse_domain_interfaces(open("vm.xml").read())
    bindings = assign(devices, NamingPolicy(prefix="enp", start_index=1))
    print(render_rules(bindings, "centos7-vm"))
"""

__version__ = "0.1.0"

from .udev import InterfaceBinding, NamingPolicy, NetworkDevice, RuleSet, VMStatus, assign, parse_rules, render_rules

__all__ = [
    "__version__",
    "InterfaceBinding",
    "NamingPolicy",
    "NetworkDevice",
    "RuleSet",
    "VMStatus",
    "assign",
    "parse_rules",
    "render_rules",
]
