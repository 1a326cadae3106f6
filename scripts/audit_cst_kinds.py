"""Two-pass audit of a C++ file against the normalizer's dispatch tables.

Pass 1 (Dispatch Comparison, block reachability):
    Parses the file, collects every named CST kind and compares against the
    normalizer's handled kinds.  Only kinds that appear as direct children of
    block-iterated nodes (translation unit, namespace bodies, compound
    statements, case bodies) are flagged as substantive gaps; everything else
    is consumed slot-by-slot by its parent's builder.

Pass 2 (Runtime):
    Converts the file and reports the first ``UnsupportedConstruct``, which
    is the next handler to write.

Usage:
    python scripts/audit_cst_kinds.py path/to/file.cpp
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Optional

from cpp2ts.api import convert_cst, parse_source
from cpp2ts.cst import CstNode, walk
from cpp2ts.errors import UnsupportedConstruct
from cpp2ts.normalizer import Normalizer

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

BLOCK_KINDS: frozenset[str] = frozenset(
    {"translation_unit", "declaration_list", "compound_statement", "case_statement"}
)


@dataclass(frozen=True)
class AuditResult:
    total_kinds: int
    handled_count: int
    unhandled_structural: list[str]
    unhandled_substantive: list[str]
    first_failure: Optional[UnsupportedConstruct]


def _is_named(node: CstNode) -> bool:
    # Anonymous tokens are spelled by their own kind.
    return node.kind != node.text


def collect_kinds(root: CstNode) -> set[str]:
    """All named CST kinds in the tree."""
    return {node.kind for node in walk(root) if _is_named(node)}


def classify_by_block_reachability(
    root: CstNode, unhandled: set[str]
) -> tuple[list[str], list[str]]:
    """Split unhandled kinds into (structural, substantive) sorted lists."""
    reachable = {
        child.kind
        for node in walk(root)
        if node.kind in BLOCK_KINDS
        for child in node.children
        if child.kind in unhandled
    }
    return sorted(unhandled - reachable), sorted(reachable)


def audit(source: str) -> AuditResult:
    root = parse_source(source)
    all_kinds = collect_kinds(root)
    handled = Normalizer().handled_kinds()
    structural, substantive = classify_by_block_reachability(root, all_kinds - handled)

    failure: Optional[UnsupportedConstruct] = None
    try:
        convert_cst(root)
    except UnsupportedConstruct as exc:
        failure = exc

    return AuditResult(
        total_kinds=len(all_kinds),
        handled_count=len(handled & all_kinds),
        unhandled_structural=structural,
        unhandled_substantive=substantive,
        first_failure=failure,
    )


def print_result(path: str, result: AuditResult):
    logger.info("")
    logger.info("=== AUDIT: %s ===", path)
    logger.info("")
    logger.info("Pass 1 -- Dispatch table coverage:")
    logger.info("  CST kinds found in source:       %3d", result.total_kinds)
    logger.info("  Handled (dispatch+noise):        %3d", result.handled_count)
    logger.info("    Structural (slot-consumed):    %3d", len(result.unhandled_structural))
    logger.info("    Substantive (block-reachable): %3d", len(result.unhandled_substantive))
    for gap in result.unhandled_substantive:
        logger.info("      - %s", gap)
    logger.info("")
    logger.info("Pass 2 -- Runtime conversion:")
    if result.first_failure is None:
        logger.info("  converted cleanly")
    else:
        logger.info("  %s", result.first_failure)


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("files", nargs="+", help="C++ source files to audit")
    args = parser.parse_args()

    for path in args.files:
        with open(path, encoding="utf-8") as f:
            print_result(path, audit(f.read()))


if __name__ == "__main__":
    main()
