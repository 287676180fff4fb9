# SPDX-License-Identifier: LGPL-3.0-or-later
# kvm_persistent_net/core/logger.py
from __future__ import annotations

import datetime as _dt
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, TextIO, Tuple

from termcolor import colored as _colored

_LEVEL_EMOJI = {
    "DEBUG": "🔍",
    "INFO": "✅",
    "WARNING": "⚠️",
    "ERROR": "💥",
    "CRITICAL": "🧨",
}
_LEVEL_COLOR = {
    "DEBUG": "blue",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red",
}


def is_tty(stream: Any) -> bool:
    try:
        return bool(stream.isatty())
    except Exception:
        return False


def _supports_unicode(stream: Any) -> bool:
    """
    Best-effort check: if the stream encoding can't handle emoji, degrade gracefully.
    """
    try:
        enc = getattr(stream, "encoding", None) or "utf-8"
        "✅".encode(enc)
        return True
    except Exception:
        return False


def c(
    text: str,
    color: Optional[str] = None,
    attrs: Optional[List[str]] = None,
    *,
    enable: bool = True,
) -> str:
    """Colorize text with termcolor when enabled."""
    if not enable or not color:
        return text
    try:
        return _colored(text, color=color, attrs=attrs or [])
    except Exception:
        return text


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------

Ctx = Mapping[str, Any]


def _safe_str(v: Any, *, max_len: int = 240) -> str:
    try:
        s = str(v)
    except Exception:
        s = repr(v)
    s = s.replace("\n", "\\n").replace("\r", "\\r")
    if len(s) > max_len:
        s = s[: max_len - 1] + "…"
    return s


def _format_ctx_kv(ctx: Optional[Ctx]) -> str:
    if not ctx:
        return ""
    items = sorted(ctx.items(), key=lambda kv: str(kv[0]))
    return " " + " ".join(f"{_safe_str(k, max_len=80)}={_safe_str(v)}" for k, v in items)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    LoggerAdapter that carries a persistent context dict.

    Usage:
      log = Log.bind(logger, vm="centos7-vm")
      log.info("Found interfaces")
    """

    def __init__(self, logger: logging.Logger, ctx: Optional[Ctx] = None):
        super().__init__(logger, extra={"ctx": dict(ctx or {})})

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        extra = kwargs.get("extra") or {}
        merged = dict(self.extra.get("ctx") or {})
        merged.update(extra.get("ctx") or {})
        extra["ctx"] = merged
        kwargs["extra"] = extra
        return msg, kwargs


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LogStyle:
    color: bool = True
    show_ms: bool = False
    show_src: bool = False  # module:line
    align_level: int = 8
    unicode: bool = True


class EmojiFormatter(logging.Formatter):
    def __init__(self, style: LogStyle, stream: Optional[TextIO] = None):
        super().__init__()
        self._style = style
        self._stream = stream

    def _now(self, created: float) -> str:
        dt = _dt.datetime.fromtimestamp(created)
        return dt.strftime("%H:%M:%S.%f")[:-3] if self._style.show_ms else dt.strftime("%H:%M:%S")

    def _emoji(self, levelname: str) -> str:
        if not self._style.unicode:
            return "·"
        return _LEVEL_EMOJI.get(levelname, "•")

    def _src(self, record: logging.LogRecord) -> str:
        return f" [{record.module}:{record.lineno}]" if self._style.show_src else ""

    def format(self, record: logging.LogRecord) -> str:
        ts = self._now(record.created)
        emoji = self._emoji(record.levelname)
        lvl = record.levelname
        msg = record.getMessage()

        color_ok = bool(self._style.color and is_tty(self._stream))

        lvl = c(lvl, _LEVEL_COLOR.get(record.levelname), enable=color_ok)
        if record.levelno >= logging.WARNING:
            msg = c(msg, _LEVEL_COLOR.get(record.levelname), attrs=["bold"], enable=color_ok)

        line = f"{ts} {emoji} {lvl:<{self._style.align_level}}{self._src(record)} {msg}"
        line += _format_ctx_kv(getattr(record, "ctx", None))

        if record.exc_info:
            exc = "\n".join("  " + ln for ln in self.formatException(record.exc_info).splitlines())
            line += "\n" + c(exc, "red", enable=color_ok)
        return line


class _BelowLevel(logging.Filter):
    """Pass only records strictly below `level` (progress goes to stdout, problems to stderr)."""

    def __init__(self, level: int):
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class Log:
    @staticmethod
    def _level_from_flags(verbose: int) -> int:
        """
        CLI mapping:
          (none): WARNING  (only problems, on stderr)
          -v:     INFO     (progress diagnostics on stdout)
          -vv:    DEBUG    (commands run, skipped devices, stage transitions)
        """
        if verbose >= 2:
            return logging.DEBUG
        if verbose >= 1:
            return logging.INFO
        return logging.WARNING

    @staticmethod
    def bind(logger: logging.Logger, **ctx: Any) -> ContextLoggerAdapter:
        """Return a LoggerAdapter that carries a persistent context dict."""
        return ContextLoggerAdapter(logger, ctx)

    @staticmethod
    def step(logger: Any, msg: str, *args: Any) -> None:
        logger.info("➡️  " + msg, *args)

    @staticmethod
    def ok(logger: Any, msg: str, *args: Any) -> None:
        logger.info("✅ " + msg, *args)

    @staticmethod
    def warn(logger: Any, msg: str, *args: Any) -> None:
        logger.warning("⚠️  " + msg, *args)

    @staticmethod
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        color: bool = True,
        logger_name: str = "kvm_persistent_net",
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> logging.Logger:
        """
        Configure and return the project's logger.

        Records below WARNING go to stdout, WARNING and above to stderr.
        A log file, when given, receives every record at the configured level
        without colors.
        """
        out = stdout if stdout is not None else sys.stdout
        err = stderr if stderr is not None else sys.stderr

        logger = logging.getLogger(logger_name)
        logger.propagate = False

        level = Log._level_from_flags(verbose)
        logger.setLevel(level)

        for h in list(logger.handlers):
            logger.removeHandler(h)
            try:
                h.close()
            except Exception:
                pass

        style = LogStyle(
            color=bool(color),
            show_ms=verbose >= 2,
            show_src=verbose >= 2,
            unicode=_supports_unicode(err),
        )

        oh = logging.StreamHandler(stream=out)
        oh.setLevel(level)
        oh.addFilter(_BelowLevel(logging.WARNING))
        oh.setFormatter(EmojiFormatter(style, out))
        logger.addHandler(oh)

        eh = logging.StreamHandler(stream=err)
        eh.setLevel(max(level, logging.WARNING))
        eh.setFormatter(EmojiFormatter(style, err))
        logger.addHandler(eh)

        if log_file:
            fp = Path(log_file).expanduser().resolve()
            fp.parent.mkdir(parents=True, exist_ok=True)
            file_style = LogStyle(
                color=False,
                show_ms=True,
                show_src=True,
                unicode=style.unicode,
            )
            fh = logging.FileHandler(fp, encoding="utf-8")
            fh.setLevel(level)
            fh.setFormatter(EmojiFormatter(file_style))
            logger.addHandler(fh)

        logger.debug("Logger initialized (level=%s)", logging.getLevelName(level))
        return logger
