# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/backends/guest_copy.py
from __future__ import annotations

import logging
from pathlib import Path

from ..core.exceptions import DeliveryError, ToolInvocationError
from ..core.result import Result
from ..core.utils import U
from ..udev.rules import UDEV_RULES_DIR
from .base import GuestDelivery
from .runner import CommandRunner


class VirtCopyInDelivery(GuestDelivery):
    """
    Copies the rules file into the guest disk with libguestfs' virt-copy-in:

      virt-copy-in -d <vm> <artifact> /etc/udev/rules.d/

    virt-copy-in keeps the local basename, so the artifact must already carry
    the destination file name. Only safe on a shut-off domain.
    """

    def __init__(self, logger: logging.Logger, runner: CommandRunner, *, rules_dir: str = UDEV_RULES_DIR):
        self.logger = logger
        self.runner = runner
        self.rules_dir = rules_dir

    def deliver(self, artifact: Path, vm_name: str, destination_filename: str) -> Result[None]:
        artifact = Path(artifact)
        if artifact.name != destination_filename:
            return Result.failure(
                DeliveryError(
                    msg=f"Artifact {artifact.name!r} does not match destination file name {destination_filename!r}",
                    context={"vm": vm_name},
                )
            )

        try:
            with U.spinner(self.logger, f"Copying {destination_filename} into {vm_name}:{self.rules_dir}"):
                self.runner.run(["virt-copy-in", "-d", vm_name, str(artifact), self.rules_dir], merge_stderr=True)
        except ToolInvocationError as e:
            return Result.failure(
                DeliveryError(
                    msg=f"Failed to copy rules file to VM: {e.msg}",
                    cause=e,
                    context=dict(e.context or {}, vm=vm_name),
                )
            )
        return Result.success(None)
