# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/backends/virsh.py
from __future__ import annotations

import logging

from ..core.exceptions import DiscoveryError, ErrorKind, ToolInvocationError, VMStateError
from ..core.result import Result
from ..udev.model import VMStatus
from .base import DescriptionSource, StatusQuery
from .runner import CommandRunner


def _names(listing: str) -> set:
    return {ln.strip() for ln in listing.splitlines() if ln.strip()}


class VirshStatusQuery(StatusQuery):
    """
    Status via two listings:
      virsh list --state-shutoff --name  -> SHUT_OFF when the name is there
      virsh list --all --name            -> RUNNING when only this one has it
    anything else is NOT_FOUND.
    """

    def __init__(self, logger: logging.Logger, runner: CommandRunner):
        self.logger = logger
        self.runner = runner

    def query_status(self, vm_name: str) -> Result[VMStatus]:
        try:
            if vm_name in _names(self.runner.run(["virsh", "list", "--state-shutoff", "--name"])):
                return Result.success(VMStatus.SHUT_OFF)
            if vm_name in _names(self.runner.run(["virsh", "list", "--all", "--name"])):
                return Result.success(VMStatus.RUNNING)
        except ToolInvocationError as e:
            return Result.failure(
                VMStateError(
                    msg=f"Failed to execute virsh command: {e.msg}",
                    kind=ErrorKind.TOOL_FAILURE,
                    cause=e,
                    context=dict(e.context or {}),
                )
            )
        return Result.success(VMStatus.NOT_FOUND)


class VirshDescriptionSource(DescriptionSource):
    """Domain XML via `virsh dumpxml <vm>`."""

    def __init__(self, logger: logging.Logger, runner: CommandRunner):
        self.logger = logger
        self.runner = runner

    def fetch_description(self, vm_name: str) -> Result[str]:
        try:
            return Result.success(self.runner.run(["virsh", "dumpxml", vm_name]))
        except ToolInvocationError as e:
            return Result.failure(
                DiscoveryError(
                    msg=f"Failed to execute virsh dumpxml: {e.msg}",
                    kind=ErrorKind.TOOL_FAILURE,
                    cause=e,
                    context=dict(e.context or {}),
                )
            )
