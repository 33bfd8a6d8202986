#!/usr/bin/env python3
"""
Remapping Resolver

Maps the file paths reported by an explorer onto a local Foundry-style
project layout. Scoped packages (``@scope/...``, optionally installed
under ``node_modules/``) are placed under ``lib/``.
"""

import logging
import os
from typing import Iterable, Optional

from mirror.models import Remappings
from mirror.text import normalize

logger = logging.getLogger(__name__)

DEPENDENCY_MARKER = "node_modules"
LIB_DIR = "lib"
DEFAULT_SOURCE_DIR = "src"
SOURCE_DIR_NAMES = ("src", "contracts", "source", "packages")


def _is_marked_scope(path: str) -> bool:
    return path.startswith(f"{DEPENDENCY_MARKER}/@")


def infer_remappings(paths: Iterable[str]) -> Optional[Remappings]:
    """Infer ``@scope/`` remappings from reported paths.

    ``@openzeppelin/contracts/Foo.sol`` and
    ``node_modules/@openzeppelin/contracts/Foo.sol`` both yield
    ``{"@openzeppelin/": "lib/@openzeppelin/"}``.

    Returns:
        The remappings in first-seen order, or None when no scoped path
        was found.
    """
    remappings: Remappings = {}

    for path in paths:
        scope = None
        if path.startswith("@"):
            scope = path.split("/")[0]
        elif _is_marked_scope(path):
            scope = path.split("/")[1]

        if scope:
            key = f"{scope}/"
            if key not in remappings:
                remappings[key] = f"{LIB_DIR}/{scope}/"

    return remappings or None


def _join_under(local_root: str, relative_path: str) -> str:
    # A leading separator must not replace local_root
    return os.path.join(local_root, relative_path.lstrip("/\\"))


def resolve_local_path(reported_path: str, local_root: str, remappings: Optional[Remappings]) -> str:
    """Resolve a reported path to a file under ``local_root``.

    Rules are tried in insertion order and the first prefix that matches
    is applied, even if a later rule has a longer matching prefix.
    An absolute reported path is still placed under ``local_root``.
    """
    for prefix, target in (remappings or {}).items():
        if reported_path.startswith(prefix):
            return _join_under(local_root, target + reported_path[len(prefix):])
    return _join_under(local_root, reported_path)


def transform_path(reported_path: str) -> str:
    """Rewrite a reported path to where the materialized project stores it.

    - ``@scope/...`` -> ``lib/@scope/...``
    - ``node_modules/@scope/...`` -> ``lib/@scope/...``
    - anything else is unchanged
    """
    if reported_path.startswith("@"):
        return f"{LIB_DIR}/{reported_path}"
    if _is_marked_scope(reported_path):
        return f"{LIB_DIR}/{reported_path[len(DEPENDENCY_MARKER) + 1:]}"
    return reported_path


def detect_source_root(contract_file_name: str) -> str:
    """Pick the ``src`` directory for foundry.toml from the primary file path."""
    if not contract_file_name:
        return DEFAULT_SOURCE_DIR

    # Scoped files are moved under lib/ by transform_path
    if contract_file_name.startswith("@") or _is_marked_scope(contract_file_name):
        return LIB_DIR

    parts = contract_file_name.split("/")
    if len(parts) > 1 and parts[0] in SOURCE_DIR_NAMES:
        return parts[0]
    return DEFAULT_SOURCE_DIR


def parse_remappings(content: str, origin: str = "<remappings>") -> Remappings:
    """Parse ``prefix=target`` lines into a remapping table."""
    remappings: Remappings = {}

    for entry in normalize(content).split("\n"):
        if not entry.strip():
            continue
        if entry.find("=") < 1:
            continue

        alias, _, target = entry.partition("=")
        alias, target = alias.strip(), target.strip()
        if not alias or not target:
            logger.warning("Skipping invalid line %r from %s", entry, origin)
            continue
        remappings[alias] = target

    return remappings


def load_remappings(remappings_file: str) -> Remappings:
    """Load a remappings.txt file.

    A missing file is not an error: a warning is logged and an empty table
    returned. Other read errors propagate.
    """
    try:
        with open(remappings_file, "r", encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        logger.warning("%s could not be found", remappings_file)
        return {}
    except OSError as e:
        logger.error("Error reading local file %s: %s", remappings_file, e)
        raise

    return parse_remappings(content, origin=remappings_file)


def format_remappings(remappings: Remappings) -> str:
    """Render remappings as newline-terminated ``prefix=target`` lines."""
    return "".join(f"{prefix}={target}\n" for prefix, target in remappings.items())
