"""Synthesis of contract-call costs into a per-method table."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

from tabulate import tabulate

__all__ = [
    "ExecutionCost",
    "CostResult",
    "CostsReport",
    "BottleneckKind",
    "Bottleneck",
    "Cell",
    "find_bottleneck",
    "formatted_cost_cells",
    "build_costs_table",
    "render_costs_report",
]

HEADERS = (
    "",
    "Runtime (units)",
    "Read Count",
    "Read Length (bytes)",
    "Write Count",
    "Write Length (bytes)",
    "Tx per Block",
)
LIMITS_TITLE = "Mainnet Block Limits (Stacks 2.0)"
TITLE = "Contract calls cost synthesis"

DIM = "bright_black"
HIGHLIGHT = "bright_white"


@dataclass(frozen=True)
class ExecutionCost:
    runtime: int = 0
    read_count: int = 0
    read_length: int = 0
    write_count: int = 0
    write_length: int = 0

    def __iter__(self) -> Iterator[int]:
        yield self.runtime
        yield self.read_count
        yield self.read_length
        yield self.write_count
        yield self.write_length


@dataclass(frozen=True)
class CostResult:
    total: ExecutionCost
    limit: ExecutionCost


@dataclass(frozen=True)
class CostsReport:
    """Cost of one contract call; ``contract_id`` is ``address.name``."""

    contract_id: str
    method: str
    cost_result: CostResult


class BottleneckKind(Enum):
    RUNTIME = 0
    READ_COUNT = 1
    READ_LENGTH = 2
    WRITE_COUNT = 3
    WRITE_LENGTH = 4
    UNKNOWN = 5


@dataclass(frozen=True)
class Bottleneck:
    """The cost dimension closest to its block limit."""

    kind: BottleneckKind = BottleneckKind.UNKNOWN
    cost: int = 0
    limit: int = 0

    @property
    def tx_per_block(self) -> int:
        """How many such calls fit in a block, 0 when unknown."""
        if self.kind is BottleneckKind.UNKNOWN or self.cost == 0:
            return 0
        return self.limit // self.cost


@dataclass(frozen=True)
class Cell:
    text: str
    align: str = "left"
    style: str | None = None
    hspan: int = 1


def _ratio(cost: int, limit: int) -> float:
    if limit == 0:
        return math.inf if cost > 0 else math.nan
    return cost / limit


def find_bottleneck(report: CostsReport) -> tuple[Bottleneck, float]:
    """The dimension with the highest cost/limit ratio, and that ratio."""
    result = report.cost_result
    best = Bottleneck()
    best_ratio = 0.0
    dimensions = zip(BottleneckKind, result.total, result.limit)
    for kind, cost, limit in dimensions:
        ratio = _ratio(cost, limit)
        if ratio > best_ratio:
            best = Bottleneck(kind, cost, limit)
            best_ratio = ratio
    return best, best_ratio


def _annotation(value: int, limit: int) -> str:
    if value == 0:
        return ""
    return f" ({100.0 * _ratio(value, limit):.2f}%)"


def formatted_cost_cells(
    title: str, report: CostsReport, bottleneck: Bottleneck
) -> list[Cell]:
    """One table row for a report, highlighting the bottleneck dimension."""
    tx_per_block = bottleneck.tx_per_block
    if tx_per_block < 100:
        block_style = "red"
    elif tx_per_block < 500:
        block_style = "yellow"
    else:
        block_style = "green"

    result = report.cost_result
    cells = [Cell(title)]
    for kind, value, limit in zip(BottleneckKind, result.total, result.limit):
        style = HIGHLIGHT if kind is bottleneck.kind else DIM
        cells.append(Cell(f"{value}{_annotation(value, limit)}", "right", style))
    cells.append(Cell(str(tx_per_block), "right", block_style))
    return cells


def build_costs_table(reports: Iterable[CostsReport]) -> list[list[Cell]]:
    """Rows of the cost synthesis: header, one row per method, then limits.

    Methods are grouped by contract id and sorted. Each method row shows the
    call whose bottleneck ratio was lowest among those observed.
    """
    mins: dict[tuple[str, str], tuple[float, CostsReport, Bottleneck]] = {}
    maxs: dict[tuple[str, str], tuple[float, CostsReport, Bottleneck]] = {}
    for report in reports:
        bottleneck, ratio = find_bottleneck(report)
        key = (report.contract_id, report.method)
        current = mins.get(key)
        if current is None or ratio < current[0]:
            mins[key] = (ratio, report, bottleneck)
        current = maxs.get(key)
        if current is None or ratio > current[0]:
            maxs[key] = (ratio, report, bottleneck)

    rows = [[Cell(header) for header in HEADERS]]
    for key in sorted(mins):
        contract_id, method = key
        _, report, bottleneck = mins[key]
        contract_name = contract_id.split(".")[-1]
        rows.append(
            formatted_cost_cells(f"{contract_name}::{method}", report, bottleneck)
        )

    if maxs:
        _, report, _ = maxs[min(maxs)]
        limit = report.cost_result.limit
        rows.append([Cell("", "left", hspan=len(HEADERS))])
        rows.append(
            [Cell(LIMITS_TITLE)]
            + [Cell(str(value), "right") for value in limit]
            + [Cell("/", "right")]
        )
    return rows


def render_costs_report(reports: Iterable[CostsReport]) -> str:
    """The cost synthesis as plain text, ready to print."""
    header, *body = build_costs_table(reports)
    width = len(HEADERS)
    table_rows = []
    for row in body:
        texts = [cell.text for cell in row]
        texts.extend([""] * (width - len(texts)))
        table_rows.append(texts)
    table = tabulate(
        table_rows,
        headers=[cell.text for cell in header],
        tablefmt="grid",
        colalign=("left",) + ("right",) * (width - 1),
        disable_numparse=True,
    )
    return f"\n{TITLE}\n{table}\n\n"