import logging
import os
import platform


def _supports_emoji():
	"""Detect if terminal supports emoji display"""
	if platform.system() != "Windows":
		term = os.environ.get('TERM', '')
		return term in ('xterm-256color', 'gnome-256color', 'konsole-256color')

	term_program = os.environ.get('TERM_PROGRAM', '')
	if 'WindowsTerminal' in term_program or 'ConEmu' in term_program:
		return True

	return 'ANSICON' in os.environ or 'ConEmuANSI' in os.environ


class _LowercaseLevelFormatter(logging.Formatter):
	def format(self, record: logging.LogRecord) -> str:  # noqa: D401
		# Lowercase level names for desired CLI look
		if record.levelname:
			record.levelname = record.levelname.lower()
		return super().format(record)


class _DebugOnlyFormatter(_LowercaseLevelFormatter):
	def format(self, record: logging.LogRecord) -> str:
		if record.levelno == logging.DEBUG:
			return f"[debug] {record.getMessage()}"
		return record.getMessage()


_logger = logging.getLogger("kl130")
_logger.propagate = False
_logger.addHandler(logging.NullHandler())


_GL_OK = "[ok] "
_GL_RESULT = "-> "


def configure(verbose: bool = False, show_payloads: bool = False) -> None:
	"""Configure the global CLI logger.

	verbose=True  -> show debug lines (with a [debug] tag) and payloads
	show_payloads -> print decrypted send/recv payloads
	"""
	_logger.setLevel(logging.DEBUG)
	_logger.handlers[:] = []

	handler = logging.StreamHandler()
	handler.setLevel(logging.DEBUG if verbose else logging.INFO)

	# Formatter: only show [debug] tags in verbose mode
	if verbose:
		fmt = _DebugOnlyFormatter()
	else:
		fmt = _LowercaseLevelFormatter("%(message)s")
	handler.setFormatter(fmt)
	_logger.addHandler(handler)

	# Store style flags (used by helpers below)
	_logger.show_payloads = bool(show_payloads or verbose)  # type: ignore[attr-defined]
	_logger.indent = 0  # type: ignore[attr-defined]
	_logger.verbose = bool(verbose)  # type: ignore[attr-defined]

	global _GL_OK, _GL_RESULT
	if _supports_emoji():
		_GL_OK     = "✅ "
		_GL_RESULT = "➡️ "


def _prefix(extra_indent: int) -> str:
	base = int(getattr(_logger, "indent", 0))
	add = max(0, int(extra_indent or 0))
	return " " * (base + add)


def say(msg: str, *, extra_indent: int = 0) -> None:
	print(f"{_prefix(extra_indent)}{msg}")


def info(msg: str, *, extra_indent: int = 0) -> None:
	_logger.info(f"{_prefix(extra_indent)}{msg}")


def warn(msg: str, *, extra_indent: int = 0) -> None:
	_logger.warning(f"{_prefix(extra_indent)}{msg}")


def debug(msg: str, *, extra_indent: int = 0) -> None:
	_logger.debug(f"{_prefix(extra_indent)}{msg}")


def send(proto: str, payload: str, *, extra_indent: int = 0) -> None:
	if getattr(_logger, "show_payloads", False):
		print(f"{_prefix(extra_indent)}>> {proto} send: {payload}")
	else:
		_logger.debug(f"{proto} send: {payload}")


def recv(proto: str, payload: str, *, extra_indent: int = 0) -> None:
	if getattr(_logger, "show_payloads", False):
		print(f"{_prefix(extra_indent)}<< {proto} recv: {payload}")
	else:
		_logger.debug(f"{proto} recv: {payload}")


def success(msg: str, *, extra_indent: int = 0) -> None:
	"""Success messages with clear visual indicator"""
	print(f"{_prefix(extra_indent)}{_GL_OK}{msg}")


def result(msg: str, *, extra_indent: int = 0) -> None:
	"""Result/outcome messages"""
	print(f"{_prefix(extra_indent)}{_GL_RESULT}{msg}")


def set_indent(spaces: int) -> None:
	"""Set current indentation (non-negative)."""
	_logger.indent = max(0, int(spaces))  # type: ignore[attr-defined]