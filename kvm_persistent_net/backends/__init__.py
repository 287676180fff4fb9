# SPDX-License-Identifier: LGPL-3.0-or-later
# kvm_persistent_net/backends/__init__.py
from .base import DescriptionSource, GuestDelivery, StatusQuery
from .guest_copy import VirtCopyInDelivery
from .runner import CommandRunner
from .virsh import VirshDescriptionSource, VirshStatusQuery

__all__ = [
    "CommandRunner",
    "DescriptionSource",
    "GuestDelivery",
    "StatusQuery",
    "VirshDescriptionSource",
    "VirshStatusQuery",
    "VirtCopyInDelivery",
]
