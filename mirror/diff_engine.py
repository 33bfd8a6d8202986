#!/usr/bin/env python3
"""
Diff Engine

Compares a contract's reported sources against a local checkout, or two
contracts' sources against each other. Every compared file yields one
DiffResult; local I/O problems become result entries instead of aborting
the run.
"""

import difflib
import logging
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from mirror.errors import LocalFileNotFound, LocalFileReadError, SourceInvariantError
from mirror.models import (
    ContractSources,
    DiffDiffer,
    DiffError,
    DiffMatch,
    DiffNotFound,
    DiffResult,
    DiffStatus,
    DiffSummary,
    Remappings,
    Side,
)
from mirror.remappings import resolve_local_path
from mirror.text import normalize
from utils.file_handler import FileHandler

logger = logging.getLogger(__name__)

SourceSet = Union[ContractSources, Mapping[str, str]]

SUMMARY_MESSAGES = {
    DiffStatus.MATCH: "{count} file(s) matched.",
    DiffStatus.DIFFER: "{count} file(s) had differences.",
    DiffStatus.NOT_FOUND: "{count} file(s) were not found.",
    DiffStatus.ERROR: "{count} file(s) could not be read.",
}

# [DIFF] is padded to the width of [MATCH]
RESULT_TAGS = {
    DiffStatus.MATCH: "[MATCH]",
    DiffStatus.DIFFER: "[DIFF] ",
    DiffStatus.NOT_FOUND: "[NOT FOUND]",
    DiffStatus.ERROR: "[ERROR]",
}


def _as_mapping(sources: SourceSet) -> Mapping[str, str]:
    if isinstance(sources, ContractSources):
        return sources.sources
    return sources


def render_diff(normalized_a: str, normalized_b: str, labels: Tuple[str, str] = ("a", "b")) -> str:
    """Unified, line-oriented diff from ``a`` to ``b``."""
    lines = difflib.unified_diff(
        normalized_a.split("\n"),
        normalized_b.split("\n"),
        fromfile=labels[0],
        tofile=labels[1],
        lineterm="",
    )
    return "\n".join(lines)


def diff_one(
    normalized_a: str,
    normalized_b: str,
    path: str = "",
    labels: Optional[Tuple[str, str]] = None,
) -> DiffResult:
    """Compare two already-normalized texts.

    Returns:
        DiffMatch when equal, otherwise DiffDiffer carrying the rendered diff.
    """
    if normalized_a == normalized_b:
        return DiffMatch(path)

    if labels is None:
        labels = (f"a/{path}", f"b/{path}")
    return DiffDiffer(path, diff=render_diff(normalized_a, normalized_b, labels))


def diff_against_local_directory(
    sources: SourceSet,
    local_root: str,
    remappings: Optional[Remappings] = None,
    file_handler: Optional[FileHandler] = None,
) -> List[DiffResult]:
    """Compare every reported file with its counterpart under ``local_root``.

    Results follow the iteration order of the source map. The diff shows
    what the explorer copy adds to or removes from the local file.
    """
    file_handler = file_handler or FileHandler()
    results: List[DiffResult] = []

    for reported_path, reported_content in _as_mapping(sources).items():
        resolved = resolve_local_path(reported_path, local_root, remappings)

        try:
            local_content = file_handler.read_file(resolved)
        except LocalFileNotFound:
            results.append(DiffNotFound(reported_path, expected_path=resolved))
            continue
        except LocalFileReadError as e:
            logger.error("Error reading local file %s: %s", resolved, e.cause or e)
            results.append(DiffError(reported_path, expected_path=resolved, reason=str(e.cause or e)))
            continue

        results.append(
            diff_one(
                normalize(local_content),
                normalize(reported_content),
                path=reported_path,
                labels=(f"local/{reported_path}", f"explorer/{reported_path}"),
            )
        )

    return results


def _require_text(path: str, content, side: Side) -> str:
    if not isinstance(content, str):
        raise SourceInvariantError(
            f"Source set {side.value} has no text content for {path!r} (got {type(content).__name__})"
        )
    return content


def diff_two_source_sets(sources_a: SourceSet, sources_b: SourceSet) -> List[DiffResult]:
    """Compare two reported source sets file by file.

    Paths only in A are reported not-found on side B, then paths only in B
    are reported not-found on side A.

    Raises:
        SourceInvariantError: if a content value is missing or not a string.
    """
    map_a = _as_mapping(sources_a)
    map_b = _as_mapping(sources_b)
    results: List[DiffResult] = []

    for path, content_a in map_a.items():
        text_a = _require_text(path, content_a, Side.A)
        if path not in map_b:
            results.append(DiffNotFound(path, expected_path=path, side=Side.B))
            continue

        text_b = _require_text(path, map_b[path], Side.B)
        results.append(
            diff_one(normalize(text_a), normalize(text_b), path=path, labels=(f"A/{path}", f"B/{path}"))
        )

    for path in map_b:
        if path not in map_a:
            results.append(DiffNotFound(path, expected_path=path, side=Side.A))

    return results


def summarize_results(results: Iterable[DiffResult]) -> DiffSummary:
    """Count results by classification."""
    summary = DiffSummary()
    for result in results:
        summary.counts[result.status] = summary.counts.get(result.status, 0) + 1
        summary.total += 1
    return summary


def render_summary(summary: DiffSummary) -> List[str]:
    """One line per non-zero classification count."""
    return [
        message.format(count=summary.count(status))
        for status, message in SUMMARY_MESSAGES.items()
        if summary.count(status)
    ]


def result_heading(result: DiffResult) -> str:
    """Tag line for a result, e.g. ``[NOT FOUND] src/Token.sol``."""
    return f"{RESULT_TAGS[result.status]} {result.path}"


def result_detail(result: DiffResult) -> Optional[str]:
    """The indented location line under not-found and error results."""
    if isinstance(result, DiffNotFound):
        if result.side is not None:
            return f"  > Missing from source set {result.side.value}"
        return f"  > Expected at: {result.expected_path}"
    if isinstance(result, DiffError):
        return f"  > Could not read {result.expected_path}: {result.reason}"
    return None


def describe_result(result: DiffResult) -> List[str]:
    """Plain-text lines describing a single result."""
    lines = [result_heading(result)]
    if isinstance(result, DiffDiffer):
        lines.append(result.diff)
    detail = result_detail(result)
    if detail is not None:
        lines.append(detail)
    return lines


def render_results(results: Iterable[DiffResult]) -> str:
    """Full per-file listing followed by the summary lines."""
    results = list(results)
    lines: List[str] = []
    for result in results:
        lines.extend(describe_result(result))
    lines.append("")
    lines.extend(render_summary(summarize_results(results)))
    return "\n".join(lines)

