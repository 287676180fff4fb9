# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tests for the subprocess runner behind the virsh / virt-copy-in backends."""
from __future__ import annotations

import subprocess
import unittest
from unittest.mock import Mock, patch

from kvm_persistent_net.backends.runner import CommandRunner
from kvm_persistent_net.core.exceptions import ErrorKind, ToolInvocationError
from kvm_persistent_net.core.utils import U


@patch.object(U, "which", return_value="/usr/bin/tool")
class TestCommandRunner(unittest.TestCase):

    def setUp(self):
        self.logger = Mock()

    def test_sudo_prefix_by_default(self, _which):
        self.assertEqual(CommandRunner(self.logger).argv(["virsh", "list"]), ["sudo", "virsh", "list"])

    def test_no_sudo(self, _which):
        self.assertEqual(CommandRunner(self.logger, use_sudo=False).argv(["virsh", "list"]), ["virsh", "list"])

    @patch("kvm_persistent_net.core.utils.subprocess.run")
    def test_returns_stdout(self, mock_run, _which):
        mock_run.return_value = subprocess.CompletedProcess(["virsh"], 0, stdout="vm1\nvm2\n", stderr="")

        out = CommandRunner(self.logger, use_sudo=False, timeout_s=5).run(["virsh", "list", "--all", "--name"])

        self.assertEqual(out, "vm1\nvm2\n")
        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], ["virsh", "list", "--all", "--name"])
        self.assertEqual(kwargs["timeout"], 5)
        self.assertTrue(kwargs["check"])

    @patch("kvm_persistent_net.core.utils.subprocess.run")
    def test_non_zero_exit_raises_tool_error(self, mock_run, _which):
        mock_run.side_effect = subprocess.CalledProcessError(1, ["virsh"], output="", stderr="error: failed to connect")

        with self.assertRaises(ToolInvocationError) as cm:
            CommandRunner(self.logger).run(["virsh", "dumpxml", "vm"])

        self.assertIs(cm.exception.kind, ErrorKind.TOOL_FAILURE)
        self.assertIn("exit status 1", cm.exception.msg)
        self.assertIn("failed to connect", cm.exception.msg)

    @patch("kvm_persistent_net.core.utils.subprocess.run")
    def test_merged_output_included_in_detail(self, mock_run, _which):
        mock_run.side_effect = subprocess.CalledProcessError(1, ["virt-copy-in"], output="libguestfs: error: disk in use")

        with self.assertRaises(ToolInvocationError) as cm:
            CommandRunner(self.logger).run(["virt-copy-in"], merge_stderr=True)

        self.assertIn("disk in use", cm.exception.msg)

    @patch("kvm_persistent_net.core.utils.subprocess.run")
    def test_timeout_raises_tool_error(self, mock_run, _which):
        mock_run.side_effect = subprocess.TimeoutExpired(["virsh"], 3)

        with self.assertRaises(ToolInvocationError) as cm:
            CommandRunner(self.logger, timeout_s=3).run(["virsh", "list"])

        self.assertIn("timed out", cm.exception.msg)

    @patch("kvm_persistent_net.core.utils.subprocess.run")
    def test_os_error_raises_tool_error(self, mock_run, _which):
        mock_run.side_effect = PermissionError("permission denied")

        with self.assertRaises(ToolInvocationError):
            CommandRunner(self.logger).run(["virsh", "list"])

    def test_missing_binary(self, mock_which):
        mock_which.return_value = None

        with self.assertRaises(ToolInvocationError) as cm:
            CommandRunner(self.logger, use_sudo=False).run(["virsh", "list"])

        self.assertIn("virsh: command not found", cm.exception.msg)
