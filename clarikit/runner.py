"""Test-run bookkeeping: module selection, doc-test extraction and result tallying."""

from __future__ import annotations

import json
import os
import re
import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, TextIO

__all__ = [
    "DocTest",
    "TestSummary",
    "is_supported_ext",
    "extract_doc_tests",
    "doc_test_specifier",
    "collect_dependencies",
    "modules_to_reload",
    "test_runner_source",
]

SUPPORTED_EXTENSIONS = frozenset({"ts", "js", "clar"})

_BLOCKS_RE = re.compile(r"```([^\n]*)\n([\S\s]*?)```")
_LINES_RE = re.compile(r"(?:\* ?)(?:\# ?)?(.*)")


@dataclass(frozen=True)
class DocTest:
    """A fenced code block found in a documentation comment.

    ``text`` is the whole fenced block, found at ``start:end`` of the comment
    text; ``source`` is the runnable module built from its lines.
    """

    text: str
    start: int
    end: int
    source: str


@dataclass
class TestSummary:
    """Tallies test events and decides whether the run failed.

    Events are mappings with a ``kind`` of ``"plan"`` (with ``pending`` and
    ``only``) or ``"result"`` (with ``result``, one of ``"ok"``, ``"ignored"``
    or ``"failed"``). Other kinds are ignored.
    """

    __test__ = False

    fail_fast: bool = True
    out: TextIO | None = None
    planned: int = 0
    reported: int = 0
    used_only: bool = False
    has_error: bool = False

    def visit(self, event: Mapping[str, Any]) -> bool:
        """Record one event; True when the run should stop now."""
        kind = event.get("kind")
        if kind == "plan":
            if event.get("only"):
                self.used_only = True
            self.planned += int(event.get("pending", 0))
        elif kind == "result":
            self.reported += 1
            if event.get("result") == "failed":
                self.has_error = True
        return self.has_error and self.fail_fast

    def finish(self) -> bool:
        """Close the tally; True when the run counts as failed."""
        if self.planned > self.reported:
            self.has_error = True
        if self.used_only:
            print(
                'FAILED because the "only" option was used\n',
                file=self.out if self.out is not None else sys.stdout,
            )
            self.has_error = True
        return self.has_error


def is_supported_ext(path: str | os.PathLike[str]) -> bool:
    """Whether a file is a script or contract the runner can load."""
    suffix = PurePath(path).suffix
    if not suffix:
        return False
    return suffix[1:].lower() in SUPPORTED_EXTENSIONS


def extract_doc_tests(comment_text: str) -> list[DocTest]:
    """Code blocks of a ``/** ... */`` comment body, as runnable modules.

    Only comments whose text starts with ``*`` are documentation comments;
    any other text yields no blocks. Leading ``*`` and ``#`` markers are
    stripped from each line.
    """
    if not comment_text.startswith("*"):
        return []
    tests = []
    for block in _BLOCKS_RE.finditer(comment_text):
        lines = (line.group(1) for line in _LINES_RE.finditer(block.group(2)))
        source = "".join(f"{line}\n" for line in lines) + "export {};"
        tests.append(DocTest(block.group(0), block.start(), block.end(), source))
    return tests


def doc_test_specifier(filename: str, line: int, block_text: str) -> str:
    """Name of the module generated for a doc test starting at ``line``."""
    return f"{filename}${line}-{line + len(block_text.split(chr(10)))}"


def collect_dependencies(graph: Mapping[str, Iterable[str]], root: str) -> set[str]:
    """``root`` and every module it reaches through its dependencies.

    Raises KeyError when a reached module is missing from ``graph``.
    """
    if root not in graph:
        raise KeyError(f"module not found in graph: {root}")
    found = {root}
    pending = [root]
    while pending:
        module = pending.pop()
        for dep in graph[module]:
            if dep in found:
                continue
            if dep not in graph:
                raise KeyError(f"module not found in graph: {dep}")
            found.add(dep)
            pending.append(dep)
    return found


def modules_to_reload(
    test_modules: Iterable[str],
    graph: Mapping[str, Iterable[str]],
    changed: Iterable[str | os.PathLike[str]] | None,
) -> list[str]:
    """Test modules to run again after ``changed`` files were modified.

    With no change list every test module is selected. A changed contract
    (``.clar``) selects every test module, once per changed contract; any
    other change selects the test modules that depend on it.
    """
    test_modules = list(test_modules)
    if changed is None:
        return test_modules
    changed_paths = [os.fspath(path) for path in changed]
    selected = []
    for module in test_modules:
        reachable = collect_dependencies(graph, module)
        for path in changed_paths:
            if path.endswith(".clar"):
                selected.append(module)
            elif path in reachable:
                selected.append(module)
                break
    return selected


def test_runner_source(quiet: bool, filter: str | None) -> str:
    """The module that starts the registered tests."""
    options = json.dumps(
        {"disableLog": quiet, "filter": filter}, sort_keys=True, separators=(",", ":")
    )
    return f"await Deno[Deno.internal].runTests({options});"


test_runner_source.__test__ = False  # type: ignore[attr-defined]