# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/orchestrator/orchestrator.py
from __future__ import annotations

import contextlib
import logging
import sys
from enum import Enum
from typing import List, Optional, TextIO

from ..backends.base import DescriptionSource, GuestDelivery, StatusQuery
from ..backends.guest_copy import VirtCopyInDelivery
from ..backends.runner import CommandRunner
from ..backends.virsh import VirshDescriptionSource, VirshStatusQuery
from ..config.run_config import RunConfig
from ..core.exceptions import ErrorKind, PersistNetError, RenderError, VMStateError, format_exception_for_cli
from ..core.file_ops import transient_artifact
from ..core.logger import Log
from ..core.result import Result
from ..udev.discovery import MacDiscoverer
from ..udev.model import InterfaceBinding, RuleSet, VMStatus
from ..udev.naming import MAX_INTERFACE_NAME_LEN, assign, long_interface_names

_SEPARATOR = "-" * 40


class Stage(Enum):
    START = "start"
    STATUS_CHECKED = "status-checked"
    DISCOVERED = "discovered"
    MAPPED = "mapped"
    RENDERED = "rendered"
    PREVIEWED_AND_CLEANED_UP = "previewed-and-cleaned-up"
    DELIVERED_AND_CLEANED_UP = "delivered-and-cleaned-up"
    FAILED_AND_CLEANED_UP = "failed-and-cleaned-up"
    # failure before the artifact existed; nothing to clean up
    FAILED = "failed"


class Orchestrator:
    """
    One invocation, strictly sequential:

      START -> STATUS_CHECKED -> DISCOVERED -> MAPPED -> RENDERED ->
        PREVIEWED_AND_CLEANED_UP | DELIVERED_AND_CLEANED_UP | FAILED_AND_CLEANED_UP

    Every stage returns a Result; the first failure ends the run. Once the
    rules text is rendered it is written to a transient artifact that is
    removed on every exit path. Collaborators default to virsh / virt-copy-in
    and can be replaced (tests, other backends).
    """

    def __init__(
        self,
        logger: logging.Logger,
        config: RunConfig,
        *,
        status: Optional[StatusQuery] = None,
        source: Optional[DescriptionSource] = None,
        delivery: Optional[GuestDelivery] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        self.logger = logger
        self.config = config
        self.log = Log.bind(logger, vm=config.vm_name)

        runner = CommandRunner(logger, use_sudo=config.use_sudo, timeout_s=config.timeout_s)
        self.status = status or VirshStatusQuery(logger, runner)
        self.source = source or VirshDescriptionSource(logger, runner)
        self.delivery = delivery or VirtCopyInDelivery(logger, runner, rules_dir=config.rules_dir)
        self.discoverer = MacDiscoverer(logger, self.source)

        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.stage = Stage.START
        self.rendered: Optional[str] = None

    # ------------------------------------------------------------------
    # public
    # ------------------------------------------------------------------

    def run(self) -> int:
        """Execute the pipeline and return the process exit code."""
        result = self.execute()
        if result.ok:
            return 0

        e = result.error
        assert e is not None
        self._print_err(f"Error: {format_exception_for_cli(e, verbose=self.config.verbose)}")
        return e.code

    def execute(self) -> Result[Stage]:
        cfg = self.config
        Log.step(self.log, "Processing VM: %s", cfg.vm_name)

        checked = self._check_status()
        if not checked.ok:
            return self._fail(checked.error)
        self._advance(Stage.STATUS_CHECKED)

        discovered = self.discoverer.discover(cfg.vm_name)
        if not discovered.ok:
            return self._fail(discovered.error)
        devices = discovered.value or []
        self._advance(Stage.DISCOVERED)
        Log.ok(self.log, "Found %d network interfaces", len(devices))

        bindings = assign(devices, cfg.policy)
        self._advance(Stage.MAPPED)
        self._warn_long_names(bindings)
        for b in bindings:
            self.log.info("%s -> %s", b.hardware_address, b.interface_name)

        rule_set = RuleSet(vm_name=cfg.vm_name, bindings=tuple(bindings))
        self.rendered = rule_set.render()
        self._advance(Stage.RENDERED)

        return self._emit(self.rendered)

    # ------------------------------------------------------------------
    # stages
    # ------------------------------------------------------------------

    def _check_status(self) -> Result[VMStatus]:
        name = self.config.vm_name
        queried = self.status.query_status(name)
        if not queried.ok:
            return queried

        if queried.value is VMStatus.NOT_FOUND:
            return Result.failure(
                VMStateError(msg=f"VM '{name}' does not exist", kind=ErrorKind.NOT_FOUND, context={"vm": name})
            )
        if queried.value is VMStatus.RUNNING:
            return Result.failure(
                VMStateError(
                    msg=f"VM '{name}' exists but is currently running. Please shut it down first",
                    kind=ErrorKind.RUNNING_NOT_SHUT_OFF,
                    context={"vm": name},
                )
            )
        self.log.debug("VM is shut off")
        return queried

    def _emit(self, text: str) -> Result[Stage]:
        cfg = self.config
        with contextlib.ExitStack() as stack:
            try:
                artifact = stack.enter_context(transient_artifact(cfg.rule_name, text))
            except OSError as e:
                return self._fail(
                    RenderError(
                        msg=f"Failed to write rules file {cfg.rule_name}: {e}",
                        cause=e,
                        context={"vm": cfg.vm_name},
                    )
                )
            self.log.debug("Rules written to %s", artifact)
            self._preview(text)

            if cfg.dry_run:
                outcome: Result[Stage] = Result.success(Stage.PREVIEWED_AND_CLEANED_UP)
            else:
                delivered = self.delivery.deliver(artifact, cfg.vm_name, cfg.rule_name)
                if delivered.ok:
                    outcome = Result.success(Stage.DELIVERED_AND_CLEANED_UP)
                else:
                    outcome = Result.failure(delivered.error)  # type: ignore[arg-type]

        if not outcome.ok:
            return self._fail(outcome.error)

        self._advance(outcome.value)  # type: ignore[arg-type]
        if cfg.dry_run:
            self._print("Dry run completed. Rules file not copied to VM.")
        else:
            self._print(f"Successfully configured network interfaces for VM '{cfg.vm_name}'")
            self._print(f"Start the VM with: sudo virsh start {cfg.vm_name}")
        return outcome

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    def _advance(self, stage: Stage) -> None:
        self.logger.debug("Stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def _fail(self, error: Optional[PersistNetError]) -> Result[Stage]:
        assert error is not None
        self._advance(Stage.FAILED_AND_CLEANED_UP if self.stage is Stage.RENDERED else Stage.FAILED)
        return Result.failure(error)

    def _warn_long_names(self, bindings: List[InterfaceBinding]) -> None:
        for name in long_interface_names(bindings):
            Log.warn(
                self.log,
                "Interface name %r is longer than %d characters; the kernel will reject it",
                name,
                MAX_INTERFACE_NAME_LEN,
            )

    def _preview(self, text: str) -> None:
        self._print("Generated udev rules:")
        self._print(_SEPARATOR)
        self.out.write(text)
        self._print(_SEPARATOR)
        self.out.flush()

    def _print(self, line: str) -> None:
        print(line, file=self.out)

    def _print_err(self, line: str) -> None:
        print(line, file=self.err)
