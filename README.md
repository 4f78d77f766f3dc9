# clarikit

Helpers for working with Clarity smart-contract projects.

## What is inside

- `clarikit.manifest` reads a project manifest (`Clarinet.toml`) into a
  `ProjectManifest` (`ProjectConfig`, `ContractConfig`, `RequirementConfig`).
  `ProjectManifest.ordered_contracts()` returns the contracts so that each one
  comes after the contracts it depends on. A dependency cycle raises
  `CyclicDependencyError`; a missing or malformed manifest, or a dependency on
  an unknown contract, raises `ManifestError`. The graph helpers
  `sort_dependencies` and `find_cycling_dependencies` are available on their own.
- `clarikit.mnemonic` derives the 64-byte BIP-39 seed of a mnemonic
  (`bip39_seed_from_mnemonic`), encodes base58 (`b58encode`) and turns a hex
  public key into a base58check address (`address_from_public_key`).
- `clarikit.costs` takes `CostsReport` records (contract id, method, total and
  limit `ExecutionCost`), finds the resource closest to its block limit with
  `find_bottleneck`, and builds the "Contract calls cost synthesis" table with
  `build_costs_table` (rows of `Cell`) or `render_costs_report` (plain text).
- `clarikit.runner` holds test-run bookkeeping: `is_supported_ext` for `.ts`,
  `.js` and `.clar` files, `extract_doc_tests` for fenced code blocks in
  `/** ... */` comments, `doc_test_specifier`, `collect_dependencies` and
  `modules_to_reload` for choosing test modules after files change,
  `test_runner_source`, and `TestSummary`, which tallies plan and result
  events and decides whether a run failed.
- `clarikit.shell` is build glue: `run` starts a command and returns its
  trimmed output (raising `ShellError` on failure), `pushd` changes directory
  until closed (also a context manager), `cwd`, `rm_rf` and `shelx`.

## Installation

```
pip install clarikit
```

For running the test suite:

```
pip install "clarikit[test]"
pytest
```

## Examples

Order the contracts of a project:

```python
from clarikit.manifest import ProjectManifest

manifest = ProjectManifest.from_path("Clarinet.toml")
for name, config in manifest.ordered_contracts():
    print(name, config.path)
```

Print a cost synthesis:

```python
from clarikit.costs import CostResult, CostsReport, ExecutionCost, render_costs_report

limit = ExecutionCost(5_000_000_000, 7_750, 100_000_000, 7_750, 15_000_000)
report = CostsReport(
    "ST000000000000000000002AMW42H.counter",
    "increment",
    CostResult(ExecutionCost(20_000, 3, 400, 1, 40), limit),
)
print(render_costs_report([report]))
```

Derive a seed:

```python
from clarikit.mnemonic import bip39_seed_from_mnemonic

seed = bip39_seed_from_mnemonic("abandon " * 11 + "about", "")
print(seed.hex())
```

Run a command from another directory:

```python
from clarikit.shell import pushd, run

with pushd("contracts"):
    print(run("git status --short", echo=False))
```

## What it does not do

clarikit installs no command-line program. It does not talk to a Stacks node,
does not run a Clarity interpreter or simulate a chain, and does not execute
test scripts itself: `clarikit.runner` only selects modules, extracts doc
tests and tallies the events a test run reports.