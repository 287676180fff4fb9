# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/backends/runner.py
from __future__ import annotations

import logging
import subprocess
from typing import List, Optional

from ..core.exceptions import ToolInvocationError
from ..core.utils import U


class CommandRunner:
    """
    Runs virtualization tools (virsh, virt-copy-in) as blocking subprocesses.

    - use_sudo=True prefixes every command with `sudo`
    - timeout_s=None waits forever; a hit timeout is reported as a tool failure
    - every failure mode (missing binary, non-zero exit, timeout) raises
      ToolInvocationError with a one-paragraph detail
    """

    def __init__(self, logger: logging.Logger, *, use_sudo: bool = True, timeout_s: Optional[float] = None):
        self.logger = logger
        self.use_sudo = use_sudo
        self.timeout_s = timeout_s

    def argv(self, cmd: List[str]) -> List[str]:
        return (["sudo"] + list(cmd)) if self.use_sudo else list(cmd)

    def run(self, cmd: List[str], *, merge_stderr: bool = False) -> str:
        """Run `cmd` and return its stdout (stdout+stderr when merge_stderr)."""
        argv = self.argv(cmd)
        pretty = U.pretty_cmd(argv)

        if U.which(argv[0]) is None:
            raise ToolInvocationError(msg=f"{argv[0]}: command not found", context={"cmd": pretty})

        try:
            cp = U.run_cmd(
                self.logger,
                argv,
                check=True,
                capture=True,
                merge_stderr=merge_stderr,
                timeout=self.timeout_s,
            )
        except subprocess.CalledProcessError as e:
            output = U.to_text(e.stdout or e.output).strip()
            stderr = U.to_text(e.stderr).strip()
            detail = f"exit status {e.returncode}"
            if stderr:
                detail += f": {stderr}"
            if output and merge_stderr:
                detail += f"\nOutput: {output}"
            raise ToolInvocationError(msg=detail, cause=e, context={"cmd": pretty}) from e
        except subprocess.TimeoutExpired as e:
            raise ToolInvocationError(
                msg=f"timed out after {self.timeout_s}s", cause=e, context={"cmd": pretty}
            ) from e
        except OSError as e:
            raise ToolInvocationError(msg=str(e), cause=e, context={"cmd": pretty}) from e

        return U.to_text(cp.stdout)
