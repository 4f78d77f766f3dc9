"""Small cross-platform helpers for build glue: a directory stack and process runner."""

from __future__ import annotations

import os
import shutil
import subprocess
import threading
from pathlib import Path
from types import TracebackType

__all__ = ["ShellError", "cwd", "pushd", "rm_rf", "shelx", "run"]


class ShellError(Exception):
    """A command could not be started or exited unsuccessfully."""


_state = threading.local()


def _stack() -> list[Path]:
    stack = getattr(_state, "stack", None)
    if stack is None:
        stack = []
        _state.stack = stack
    return stack


def cwd() -> Path:
    """The directory commands run in: the last pushed one, else the process's."""
    stack = _stack()
    return stack[-1] if stack else Path.cwd()


class _Pushd:
    """Enters a directory on creation and returns to the previous one on close."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        target = cwd() / Path(path)
        self._previous = Path.cwd()
        stack = _stack()
        stack.append(target)
        try:
            os.chdir(target)
        except OSError:
            stack.pop()
            raise
        self._closed = False

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        _stack().pop()
        os.chdir(self._previous)

    def __enter__(self) -> _Pushd:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def pushd(path: str | os.PathLike[str]) -> _Pushd:
    """Change into ``path`` (relative to :func:`cwd`) until the result is closed."""
    return _Pushd(path)


def rm_rf(path: str | os.PathLike[str]) -> None:
    """Remove a file or a directory tree; a missing path is not an error."""
    path = Path(path)
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)


def shelx(cmd: str) -> list[str]:
    """Split a command line on whitespace."""
    return cmd.split()


def _run(cmd: str, echo: bool) -> str:
    args = shelx(cmd)
    if not args:
        raise ShellError("empty command")
    if echo:
        print(f"> {cmd}")
    completed = subprocess.run(
        args,
        cwd=cwd(),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        check=False,
    )
    stdout = completed.stdout.decode("utf-8")
    if echo:
        print(stdout, end="")
    if completed.returncode != 0:
        raise ShellError(f"exit status: {completed.returncode}")
    return stdout.strip()


def run(cmd: str, echo: bool = True) -> str:
    """Run ``cmd`` in :func:`cwd` and return its trimmed standard output.

    Raises ShellError when the command cannot start or exits with failure.
    """
    try:
        return _run(cmd, echo)
    except (ShellError, OSError, UnicodeDecodeError) as exc:
        raise ShellError(f"process `{cmd}` failed: {exc}") from exc