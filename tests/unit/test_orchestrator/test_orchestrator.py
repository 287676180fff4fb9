# SPDX-License-Identifier: LGPL-3.0-or-later
"""End-to-end pipeline runs against fake collaborators."""
from __future__ import annotations

import contextlib
import io
import logging
import unittest
from unittest.mock import patch

import pytest

from fakes.fake_backends import FakeDelivery, FakeSource, FakeStatus, domain_xml
from kvm_persistent_net.config.run_config import RunConfig
from kvm_persistent_net.core import file_ops
from kvm_persistent_net.core.exceptions import DeliveryError, ErrorKind, VMStateError
from kvm_persistent_net.orchestrator.orchestrator import Orchestrator, Stage
from kvm_persistent_net.udev.model import InterfaceBinding, NamingPolicy, VMStatus
from kvm_persistent_net.udev.rules import parse_rules

VM = "centos7-vm"
MAC1 = "52:54:00:11:11:11"
MAC2 = "52:54:00:22:22:22"


class _ArtifactSpy:
    """Wraps transient_artifact to remember every path it handed out."""

    def __init__(self):
        self.paths = []

    @contextlib.contextmanager
    def __call__(self, filename, content, **kw):
        with file_ops.transient_artifact(filename, content, **kw) as p:
            self.paths.append(p)
            yield p


@pytest.mark.scenario
class TestOrchestratorScenarios(unittest.TestCase):

    def setUp(self):
        self.logger = logging.getLogger("test.orchestrator")
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.spy = _ArtifactSpy()
        patcher = patch("kvm_persistent_net.orchestrator.orchestrator.transient_artifact", self.spy)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _orch(self, *, status=None, source=None, delivery=None, **cfg):
        config = RunConfig(vm_name=cfg.pop("vm_name", VM), **cfg)
        self.status = status or FakeStatus(VMStatus.SHUT_OFF)
        self.source = source or FakeSource(xml=domain_xml(MAC1, MAC2))
        self.delivery = delivery or FakeDelivery()
        return Orchestrator(
            self.logger,
            config,
            status=self.status,
            source=self.source,
            delivery=self.delivery,
            out=self.out,
            err=self.err,
        )

    # Scenario A
    def test_default_policy_delivers_eth0_eth1(self):
        orch = self._orch()

        rc = orch.run()

        self.assertEqual(rc, 0)
        self.assertIs(orch.stage, Stage.DELIVERED_AND_CLEANED_UP)
        self.assertEqual(
            parse_rules(orch.rendered),
            [InterfaceBinding(MAC1, "eth0"), InterfaceBinding(MAC2, "eth1")],
        )
        rule_lines = [ln for ln in orch.rendered.splitlines() if ln.startswith('SUBSYSTEM=="net"')]
        self.assertEqual(len(rule_lines), 2)
        self.assertIn(MAC1, rule_lines[0])
        self.assertIn(MAC2, rule_lines[1])

        self.assertEqual(len(self.delivery.calls), 1)
        call = self.delivery.calls[0]
        self.assertTrue(call["existed"])
        self.assertEqual(call["content"], orch.rendered)
        self.assertEqual(call["vm_name"], VM)
        self.assertEqual(call["destination_filename"], "70-persistent-net.rules")
        self.assertEqual(call["artifact"].name, "70-persistent-net.rules")
        self.assertFalse(call["artifact"].exists())

        out = self.out.getvalue()
        self.assertIn("Generated udev rules:", out)
        self.assertIn(orch.rendered, out)
        self.assertIn(f"Successfully configured network interfaces for VM '{VM}'", out)
        self.assertIn(f"Start the VM with: sudo virsh start {VM}", out)
        self.assertEqual(self.err.getvalue(), "")

    # Scenario B
    def test_custom_prefix_and_start_index(self):
        orch = self._orch(policy=NamingPolicy(prefix="enp", start_index=1))

        self.assertEqual(orch.run(), 0)
        self.assertEqual(
            parse_rules(orch.rendered),
            [InterfaceBinding(MAC1, "enp1"), InterfaceBinding(MAC2, "enp2")],
        )

    # Scenario C
    def test_running_vm_aborts_before_discovery(self):
        orch = self._orch(status=FakeStatus(VMStatus.RUNNING))

        result = orch.execute()

        self.assertIsInstance(result.error, VMStateError)
        self.assertIs(result.error.kind, ErrorKind.RUNNING_NOT_SHUT_OFF)
        self.assertIs(orch.stage, Stage.FAILED)
        self.assertEqual(self.source.calls, [])
        self.assertEqual(self.spy.paths, [])
        self.assertEqual(self.delivery.calls, [])

    def test_running_vm_exit_code_and_message(self):
        orch = self._orch(status=FakeStatus(VMStatus.RUNNING))

        self.assertNotEqual(orch.run(), 0)
        self.assertIn("is currently running", self.err.getvalue())
        self.assertEqual(self.out.getvalue(), "")

    def test_missing_vm(self):
        orch = self._orch(status=FakeStatus(VMStatus.NOT_FOUND))

        result = orch.execute()

        self.assertIs(result.error.kind, ErrorKind.NOT_FOUND)
        self.assertIn(f"VM '{VM}' does not exist", str(result.error))
        self.assertEqual(self.source.calls, [])

    def test_status_tool_failure(self):
        failing = FakeStatus(error=VMStateError(msg="Failed to execute virsh command", kind=ErrorKind.TOOL_FAILURE))
        orch = self._orch(status=failing)

        self.assertEqual(orch.run(), 1)
        self.assertIn("Failed to execute virsh command", self.err.getvalue())

    # Scenario D
    def test_dry_run_previews_without_delivery(self):
        orch = self._orch(dry_run=True)

        rc = orch.run()

        self.assertEqual(rc, 0)
        self.assertIs(orch.stage, Stage.PREVIEWED_AND_CLEANED_UP)
        self.assertEqual(self.delivery.calls, [])
        self.assertEqual(len(self.spy.paths), 1)
        self.assertFalse(self.spy.paths[0].exists())

        out = self.out.getvalue()
        self.assertIn(orch.rendered, out)
        self.assertIn("Dry run completed. Rules file not copied to VM.", out)

    # Scenario E
    def test_delivery_failure_cleans_up(self):
        orch = self._orch(delivery=FakeDelivery(fail_detail="exit status 1"))

        result = orch.execute()

        self.assertIsInstance(result.error, DeliveryError)
        self.assertIs(result.error.kind, ErrorKind.TOOL_FAILURE)
        self.assertIs(orch.stage, Stage.FAILED_AND_CLEANED_UP)
        self.assertTrue(self.delivery.calls[0]["existed"])
        self.assertFalse(self.spy.paths[0].exists())

    def test_delivery_failure_exit_code(self):
        orch = self._orch(delivery=FakeDelivery(fail_detail="exit status 1"))

        self.assertEqual(orch.run(), 1)
        self.assertIn("Failed to copy rules file to VM", self.err.getvalue())
        self.assertNotIn("Successfully configured", self.out.getvalue())

    def test_preview_and_delivery_see_identical_text(self):
        orch = self._orch()
        orch.run()
        self.assertEqual(self.delivery.calls[0]["content"], orch.rendered)
        self.assertIn(orch.rendered, self.out.getvalue())

    def test_no_devices_never_renders(self):
        orch = self._orch(source=FakeSource(xml=domain_xml()))

        result = orch.execute()

        self.assertIs(result.error.kind, ErrorKind.NO_DEVICES_FOUND)
        self.assertIsNone(orch.rendered)
        self.assertIs(orch.stage, Stage.FAILED)
        self.assertEqual(self.spy.paths, [])

    def test_parse_failure(self):
        orch = self._orch(source=FakeSource(xml="<domain><devices>"))

        self.assertEqual(orch.run(), 1)
        self.assertIn("Failed to parse domain XML", self.err.getvalue())

    def test_custom_rule_name_is_artifact_name(self):
        orch = self._orch(rule_name="71-net.rules")

        self.assertEqual(orch.run(), 0)
        self.assertEqual(self.delivery.calls[0]["artifact"].name, "71-net.rules")
        self.assertEqual(self.delivery.calls[0]["destination_filename"], "71-net.rules")

    def test_long_names_warn_but_proceed(self):
        orch = self._orch(policy=NamingPolicy(prefix="averylongprefix", start_index=0))

        with self.assertLogs(self.logger, level="WARNING") as logs:
            rc = orch.run()

        self.assertEqual(rc, 0)
        self.assertTrue(any("longer than 15" in line for line in logs.output))

    def test_artifact_write_failure_is_render_error(self):
        def _broken(filename, content, **kw):
            raise PermissionError("read-only tmp")

        with patch("kvm_persistent_net.orchestrator.orchestrator.transient_artifact", _broken):
            orch = self._orch()
            result = orch.execute()

        self.assertIs(result.error.kind, ErrorKind.IO_FAILURE)
        self.assertEqual(self.delivery.calls, [])
        self.assertIs(orch.stage, Stage.FAILED_AND_CLEANED_UP)

    def test_broken_stdout_is_not_a_render_error(self):
        class _ClosedPipe(io.StringIO):
            def write(self, s):
                raise BrokenPipeError(32, "Broken pipe")

        orch = self._orch()
        orch.out = _ClosedPipe()

        with self.assertRaises(BrokenPipeError):
            orch.execute()

        self.assertEqual(self.delivery.calls, [])
        self.assertEqual(len(self.spy.paths), 1)
        self.assertFalse(self.spy.paths[0].exists())


@pytest.mark.unit
class TestDefaultCollaborators(unittest.TestCase):

    def test_builds_virsh_backends_from_config(self):
        from kvm_persistent_net.backends.guest_copy import VirtCopyInDelivery
        from kvm_persistent_net.backends.virsh import VirshDescriptionSource, VirshStatusQuery

        orch = Orchestrator(logging.getLogger("t"), RunConfig(vm_name="vm", use_sudo=False, timeout_s=4.0))

        self.assertIsInstance(orch.status, VirshStatusQuery)
        self.assertIsInstance(orch.source, VirshDescriptionSource)
        self.assertIsInstance(orch.delivery, VirtCopyInDelivery)
        self.assertFalse(orch.status.runner.use_sudo)
        self.assertEqual(orch.status.runner.timeout_s, 4.0)
