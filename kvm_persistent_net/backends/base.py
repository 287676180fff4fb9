# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/backends/base.py
"""
Capability interfaces the pipeline consumes.

Each one can be backed by process invocation (the defaults in this package),
a library binding or a remote API without touching the pipeline.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..core.result import Result
from ..udev.model import VMStatus


class StatusQuery(ABC):
    """Reports whether a domain is missing, running or shut off."""

    @abstractmethod
    def query_status(self, vm_name: str) -> Result[VMStatus]:
        """Failure carries a VMStateError(kind=TOOL_FAILURE)."""
        raise NotImplementedError


class DescriptionSource(ABC):
    """Returns the machine-readable description (domain XML) of an existing domain."""

    @abstractmethod
    def fetch_description(self, vm_name: str) -> Result[str]:
        """Failure carries a DiscoveryError(kind=TOOL_FAILURE)."""
        raise NotImplementedError


class GuestDelivery(ABC):
    """Installs a local file into the udev rules directory of a shut-off guest."""

    @abstractmethod
    def deliver(self, artifact: Path, vm_name: str, destination_filename: str) -> Result[None]:
        """Failure carries a DeliveryError(kind=TOOL_FAILURE)."""
        raise NotImplementedError
