# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kvm_persistent_net/core/utils.py
from __future__ import annotations

import contextlib
import logging
import shlex
import subprocess
import sys
from typing import Any, Dict, Iterator, List, Optional

from rich.console import Console

from .logger import is_tty


class U:
    @staticmethod
    def which(prog: str) -> Optional[str]:
        from shutil import which as _which
        return _which(prog)

    @staticmethod
    def pretty_cmd(cmd: List[str]) -> str:
        return " ".join(shlex.quote(x) for x in cmd)

    @staticmethod
    def to_text(x: Any) -> str:
        if x is None:
            return ""
        if isinstance(x, bytes):
            return x.decode("utf-8", "replace")
        return str(x)

    @staticmethod
    def run_cmd(
        logger: logging.Logger,
        cmd: List[str],
        *,
        check: bool = True,
        capture: bool = False,
        merge_stderr: bool = False,
        env: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        """
        Run a command.

        - capture=True collects stdout/stderr as text
        - merge_stderr=True folds stderr into stdout (tool output kept in order)
        - check=True raises subprocess.CalledProcessError on non-zero exit

        Failures are logged at DEBUG only; callers decide how to report them.
        """
        pretty = U.pretty_cmd(cmd)
        logger.debug("Running: %s", pretty)

        try:
            if merge_stderr:
                return subprocess.run(
                    cmd,
                    check=check,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    env=env,
                    timeout=timeout,
                )
            return subprocess.run(
                cmd,
                check=check,
                capture_output=capture,
                text=True,
                env=env,
                timeout=timeout,
            )

        except subprocess.CalledProcessError as e:
            stdout = U.to_text(e.stdout or e.output).strip()
            stderr = U.to_text(e.stderr).strip()
            logger.debug(
                "Command failed (rc=%s): %s%s%s",
                e.returncode,
                pretty,
                f"\nstdout:\n{stdout}" if stdout else "",
                f"\nstderr:\n{stderr}" if stderr else "",
            )
            raise

        except subprocess.TimeoutExpired:
            logger.debug("Command timed out: %s (timeout=%ss)", pretty, timeout)
            raise

        except OSError as e:
            logger.debug("Command error: %s (%s)", pretty, e)
            raise

    @staticmethod
    @contextlib.contextmanager
    def spinner(logger: logging.Logger, label: str) -> Iterator[None]:
        """
        Spinner on stderr for long-running external commands.
        Avoids drawing if stderr isn't a TTY (so CI logs stay line-based).
        """
        if not is_tty(sys.stderr):
            logger.debug("%s ...", label)
            yield
            logger.debug("%s done", label)
            return

        console = Console(stderr=True)
        with console.status(label, spinner="dots"):
            yield
