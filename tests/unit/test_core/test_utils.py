# SPDX-License-Identifier: LGPL-3.0-or-later
import subprocess
import unittest
from unittest.mock import Mock, patch

from kvm_persistent_net.core.utils import U


class TestUtilsHelpers(unittest.TestCase):
    """Test small text/command helpers."""

    def test_pretty_cmd_quotes(self):
        self.assertEqual(U.pretty_cmd(["virsh", "dumpxml", "my vm"]), "virsh dumpxml 'my vm'")

    def test_to_text(self):
        self.assertEqual(U.to_text(None), "")
        self.assertEqual(U.to_text(b"abc"), "abc")
        self.assertEqual(U.to_text(3), "3")


class TestRunCmd(unittest.TestCase):
    """Test subprocess invocation wrapper."""

    def setUp(self):
        self.logger = Mock()

    @patch("kvm_persistent_net.core.utils.subprocess.run")
    def test_capture(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(["x"], 0, stdout="ok", stderr="")

        cp = U.run_cmd(self.logger, ["x"], capture=True, timeout=9)

        self.assertEqual(cp.stdout, "ok")
        kwargs = mock_run.call_args.kwargs
        self.assertTrue(kwargs["capture_output"])
        self.assertEqual(kwargs["timeout"], 9)

    @patch("kvm_persistent_net.core.utils.subprocess.run")
    def test_merge_stderr(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(["x"], 0, stdout="", stderr=None)

        U.run_cmd(self.logger, ["x"], merge_stderr=True)

        kwargs = mock_run.call_args.kwargs
        self.assertIs(kwargs["stdout"], subprocess.PIPE)
        self.assertIs(kwargs["stderr"], subprocess.STDOUT)

    @patch("kvm_persistent_net.core.utils.subprocess.run")
    def test_failure_reraised_and_logged_at_debug(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(3, ["x"], output="o", stderr="e")

        with self.assertRaises(subprocess.CalledProcessError):
            U.run_cmd(self.logger, ["x"], capture=True)

        self.logger.error.assert_not_called()
        self.assertTrue(self.logger.debug.called)


class TestSpinner(unittest.TestCase):

    @patch("kvm_persistent_net.core.utils.is_tty", return_value=False)
    def test_non_tty_logs_instead_of_drawing(self, _tty):
        logger = Mock()
        with U.spinner(logger, "Copying"):
            pass
        self.assertEqual(logger.debug.call_count, 2)
