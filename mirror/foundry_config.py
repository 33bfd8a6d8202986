#!/usr/bin/env python3
"""
Foundry build configuration for cloned contracts.

Builds the foundry.toml text from the compiler settings the explorer
reported, and extracts the solc version from compiler identifiers such as
``v0.8.17+commit.8df45f5f``.
"""

import logging
import re

from mirror.errors import InvalidCompilerVersion
from mirror.models import CompilerMeta

logger = logging.getLogger(__name__)

DEFAULT_SOLC_VERSION = "0.8.24"
NON_SOLIDITY_MARKER = "vyper"
CONFIG_HEADER = "# Auto-generated by evm-mirror clone"

_VERSION_RE = re.compile(r'v?(\d+\.\d+\.\d+)')


def extract_compiler_version(raw: str) -> str:
    """Return the first X.Y.Z in ``raw``.

    Raises:
        InvalidCompilerVersion: if ``raw`` is empty or holds no version.
    """
    if not raw:
        raise InvalidCompilerVersion("Unknown compiler version")

    match = _VERSION_RE.search(raw)
    if not match:
        raise InvalidCompilerVersion(f'Could not parse compiler version "{raw}"')
    return match.group(1)


def parse_compiler_version(raw: str, default_version: str) -> str:
    """Parse "v0.8.17+commit.abc123" into "0.8.17".

    Never fails: unparseable input logs a warning and yields ``default_version``.
    """
    try:
        return extract_compiler_version(raw)
    except InvalidCompilerVersion as e:
        logger.warning("%s, using default %s", e, default_version)
        return default_version


def is_non_solidity(compiler_version: str) -> bool:
    """True for compilers foundry.toml cannot describe (Vyper)."""
    return NON_SOLIDITY_MARKER in (compiler_version or "").lower()


def generate_foundry_config(
    meta: CompilerMeta,
    src_dir: str,
    address: str,
    chain_id: str,
    solc_version: str,
) -> str:
    """Generate the foundry.toml content string.

    ``solc_version`` is the already parsed X.Y.Z version (see
    parse_compiler_version).
    """
    lines = [
        CONFIG_HEADER,
        f"# Address: {address}",
        f"# Chain ID: {chain_id}",
        f"# Contract: {meta.contract_name}",
        "",
        "[profile.default]",
        f'src = "{src_dir}"',
        'out = "out"',
        'libs = ["lib"]',
        f'solc = "{solc_version}"',
    ]

    if meta.optimization_used:
        lines.append("optimizer = true")
        lines.append(f"optimizer_runs = {meta.runs}")
    else:
        lines.append("optimizer = false")

    # "Default" means the compiler's own default; leave it to forge
    if meta.evm_version and meta.evm_version.lower() != "default":
        lines.append(f'evm_version = "{meta.evm_version.lower()}"')

    return "\n".join(lines) + "\n"
