import io
import json

import pytest

from clarikit.runner import (
    TestSummary,
    collect_dependencies,
    doc_test_specifier,
    extract_doc_tests,
    is_supported_ext,
    modules_to_reload,
    test_runner_source,
)

GRAPH = {
    "tests/a_test.ts": ["lib/helpers.ts"],
    "tests/b_test.ts": ["lib/other.ts"],
    "lib/helpers.ts": ["lib/deep.ts"],
    "lib/deep.ts": [],
    "lib/other.ts": [],
}


@pytest.mark.parametrize(
    "path,expected",
    [
        ("tests/foo.ts", True),
        ("tests/foo.js", True),
        ("contracts/counter.clar", True),
        ("contracts/COUNTER.CLAR", True),
        ("README.md", False),
        ("Makefile", False),
        ("tests/foo.tsx", False),
    ],
)
def test_is_supported_ext(path, expected):
    assert is_supported_ext(path) is expected


def test_extract_doc_tests_strips_markers():
    comment = "*\n * Example:\n * ```ts\n * const x = 1;\n * # import y;\n * ```\n "
    (block,) = extract_doc_tests(comment)
    assert comment[block.start:block.end] == block.text
    assert block.text.startswith("```ts")
    assert block.source.startswith("const x = 1;\nimport y;\n")
    assert block.source.endswith("export {};")


def test_extract_doc_tests_ignores_non_doc_comments():
    assert extract_doc_tests(" plain\n ```ts\n x\n ```") == []


def test_extract_doc_tests_multiple_blocks():
    comment = "*\n * ```ts\n * a();\n * ```\n * ```js\n * b();\n * ```\n"
    blocks = extract_doc_tests(comment)
    assert len(blocks) == 2
    assert "a();" in blocks[0].source
    assert "b();" in blocks[1].source
    assert blocks[0].end <= blocks[1].start


def test_doc_test_specifier_counts_block_lines():
    text = "```ts\n * a();\n * ```"
    assert doc_test_specifier("file.ts", 10, text) == "file.ts$10-13"


def test_collect_dependencies_transitive():
    deps = collect_dependencies(GRAPH, "tests/a_test.ts")
    assert deps == {"tests/a_test.ts", "lib/helpers.ts", "lib/deep.ts"}


def test_collect_dependencies_handles_cycles():
    graph = {"a": ["b"], "b": ["a"]}
    assert collect_dependencies(graph, "a") == {"a", "b"}


def test_collect_dependencies_missing_module():
    with pytest.raises(KeyError):
        collect_dependencies({"a": ["missing"]}, "a")


def test_modules_to_reload_without_changes_selects_all():
    modules = ["tests/a_test.ts", "tests/b_test.ts"]
    assert modules_to_reload(modules, GRAPH, None) == modules


def test_modules_to_reload_selects_dependents():
    modules = ["tests/a_test.ts", "tests/b_test.ts"]
    assert modules_to_reload(modules, GRAPH, ["lib/deep.ts"]) == ["tests/a_test.ts"]


def test_modules_to_reload_contract_change_selects_every_module():
    modules = ["tests/a_test.ts", "tests/b_test.ts"]
    result = modules_to_reload(modules, GRAPH, ["contracts/counter.clar"])
    assert result == modules


def test_modules_to_reload_unrelated_change():
    assert modules_to_reload(["tests/b_test.ts"], GRAPH, ["lib/deep.ts"]) == []


def test_runner_source_embeds_options():
    source = test_runner_source(True, "counter")
    prefix = "await Deno[Deno.internal].runTests("
    assert source.startswith(prefix)
    assert source.endswith(");")
    options = json.loads(source[len(prefix):-2])
    assert options == {"disableLog": True, "filter": "counter"}


def test_runner_source_null_filter():
    source = test_runner_source(False, None)
    assert '"filter":null' in source


def test_summary_success():
    summary = TestSummary()
    summary.visit({"kind": "plan", "pending": 2, "only": False})
    summary.visit({"kind": "result", "name": "a", "result": "ok"})
    summary.visit({"kind": "result", "name": "b", "result": "ok"})
    assert summary.finish() is False
    assert summary.reported == summary.planned


def test_summary_fail_fast_stops():
    summary = TestSummary(fail_fast=True)
    summary.visit({"kind": "plan", "pending": 2, "only": False})
    assert summary.visit({"kind": "result", "name": "a", "result": "failed"}) is True
    assert summary.finish() is True


def test_summary_without_fail_fast_continues():
    summary = TestSummary(fail_fast=False)
    summary.visit({"kind": "plan", "pending": 1, "only": False})
    assert summary.visit({"kind": "result", "name": "a", "result": "failed"}) is False
    assert summary.finish() is True


def test_summary_missing_results_fail():
    summary = TestSummary()
    summary.visit({"kind": "plan", "pending": 3, "only": False})
    summary.visit({"kind": "result", "name": "a", "result": "ok"})
    assert summary.finish() is True


def test_summary_only_option_fails():
    out = io.StringIO()
    summary = TestSummary(out=out)
    summary.visit({"kind": "plan", "pending": 1, "only": True})
    summary.visit({"kind": "result", "name": "a", "result": "ok"})
    assert summary.finish() is True
    assert 'because the "only" option was used' in out.getvalue()