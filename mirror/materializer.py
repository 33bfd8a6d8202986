#!/usr/bin/env python3
"""
Project Materializer

Writes a contract's verified sources into a fresh Foundry project:
scoped dependencies go under lib/, remappings.txt points at them, and a
foundry.toml reproduces the reported compiler settings.

Existing files are never overwritten. A file that already exists with
the same content is skipped; one with different content aborts the
whole clone before anything is written.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from mirror.errors import OverwriteConflict
from mirror.foundry_config import (
    DEFAULT_SOLC_VERSION,
    generate_foundry_config,
    is_non_solidity,
    parse_compiler_version,
)
from mirror.models import CompilerMeta, ContractSources, Network, Remappings
from mirror.remappings import (
    detect_source_root,
    format_remappings,
    infer_remappings,
    transform_path,
)
from utils.file_handler import FileHandler, safe_relpath

logger = logging.getLogger(__name__)

FOUNDRY_CONFIG_FILE = "foundry.toml"
REMAPPINGS_FILE = "remappings.txt"


@dataclass
class MaterializePlan:
    """Every file a clone will produce, keyed by absolute path, in write order."""
    files: Dict[str, str] = field(default_factory=dict)
    foundry_config: Optional[str] = None
    remappings_file: Optional[str] = None
    remappings: Optional[Remappings] = None
    solc_version: Optional[str] = None
    non_solidity: bool = False

    def add(self, target: str, content: str) -> None:
        if target in self.files and self.files[target] != content:
            raise OverwriteConflict(target)
        self.files[target] = content


@dataclass
class MaterializeReport:
    """What a clone wrote to the output directory."""
    output_dir: str
    written: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    foundry_config: Optional[str] = None
    remappings_file: Optional[str] = None
    remappings: Remappings = field(default_factory=dict)
    solc_version: Optional[str] = None
    non_solidity: bool = False


class ProjectMaterializer:
    """Clones verified sources into a buildable Foundry project."""

    def __init__(
        self,
        output_dir: str,
        default_solc_version: str = DEFAULT_SOLC_VERSION,
        file_handler: Optional[FileHandler] = None,
    ):
        self.output_dir = output_dir
        self.default_solc_version = default_solc_version
        self.file_handler = file_handler or FileHandler()

    def _target(self, relative_path: str) -> str:
        return os.path.join(self.output_dir, *safe_relpath(relative_path).parts)

    def plan(self, contract: ContractSources, meta: CompilerMeta, network: Network) -> MaterializePlan:
        """Compute the files of the clone without touching the disk.

        Raises:
            UnsafeSourcePath: if a reported path would escape the output directory.
            OverwriteConflict: if two files land on the same path with
                different content.
        """
        plan = MaterializePlan()
        plan.remappings = infer_remappings(contract.sources.keys())

        for reported_path, content in contract.sources.items():
            plan.add(self._target(transform_path(reported_path)), content)

        if is_non_solidity(meta.compiler_version):
            plan.non_solidity = True
            return plan

        plan.solc_version = parse_compiler_version(meta.compiler_version, self.default_solc_version)
        src_dir = detect_source_root(meta.contract_file_name)

        plan.foundry_config = self._target(FOUNDRY_CONFIG_FILE)
        plan.add(
            plan.foundry_config,
            generate_foundry_config(meta, src_dir, contract.address, network.chain_id, plan.solc_version),
        )

        if plan.remappings:
            plan.remappings_file = self._target(REMAPPINGS_FILE)
            plan.add(plan.remappings_file, format_remappings(plan.remappings))

        return plan

    def check_conflicts(self, plan: MaterializePlan) -> List[str]:
        """Return the targets that already hold identical content.

        Raises:
            OverwriteConflict: on the first target holding different content.
        """
        identical = []
        for target, content in plan.files.items():
            existing = self.file_handler.read_existing(target)
            if existing is None:
                continue
            if existing != content:
                raise OverwriteConflict(target)
            identical.append(target)
        return identical

    def write_file_with_check(self, file_path: str, content: str) -> bool:
        """Write one file under the overwrite rules.

        Returns:
            True if the file was created, False if it already held ``content``.

        Raises:
            OverwriteConflict: if the file exists with different content.
        """
        existing = self.file_handler.read_existing(file_path)
        if existing is not None:
            if existing == content:
                return False
            raise OverwriteConflict(file_path)

        self.file_handler.write_file(file_path, content)
        return True

    def materialize(self, contract: ContractSources, meta: CompilerMeta, network: Network) -> MaterializeReport:
        """Write the project for ``contract`` into the output directory.

        Raises:
            OverwriteConflict: if any target exists with different content;
                nothing is written in that case.
            UnsafeSourcePath: if a reported path would escape the output directory.
        """
        logger.info("Cloning %s to %s", meta.contract_name or contract.address, self.output_dir)

        plan = self.plan(contract, meta, network)
        self.check_conflicts(plan)

        report = MaterializeReport(
            output_dir=self.output_dir,
            foundry_config=plan.foundry_config,
            remappings_file=plan.remappings_file,
            remappings=dict(plan.remappings or {}),
            solc_version=plan.solc_version,
            non_solidity=plan.non_solidity,
        )

        for target, content in plan.files.items():
            if self.write_file_with_check(target, content):
                logger.debug("[WRITE] %s", target)
                report.written.append(target)
            else:
                logger.debug("[SKIP]  %s (already exists)", target)
                report.skipped.append(target)

        if plan.non_solidity:
            logger.warning("Vyper contract detected. Skipping foundry.toml generation.")

        return report
