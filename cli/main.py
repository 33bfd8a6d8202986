"""
Main CLI implementation for evm-mirror.
"""

import logging
import os
from typing import List, Optional

from mirror.config_manager import ConfigManager
from mirror.diff_engine import diff_against_local_directory, diff_two_source_sets, summarize_results
from mirror.errors import MirrorError, OverwriteConflict
from mirror.explorer_fetcher import ExplorerFetcher, validate_address
from mirror.materializer import ProjectMaterializer
from mirror.models import CompilerMeta, ContractSources, Network
from mirror.networks import get_network
from mirror.remappings import load_remappings
from cli.console import ResultConsole

logger = logging.getLogger(__name__)


class MirrorCLI:
    """Main CLI class for evm-mirror."""

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        fetcher: Optional[ExplorerFetcher] = None,
        output: Optional[ResultConsole] = None,
    ):
        self.version = "0.1.0"
        self.config_manager = config_manager or ConfigManager()
        self.fetcher = fetcher or ExplorerFetcher(self.config_manager)
        self.output = output or ResultConsole()

    def show_version(self):
        """Display version information."""
        self.output.console.print(f"evm-mirror v{self.version}")

    def _network(self, chain_id: Optional[str]) -> Network:
        return get_network(chain_id or self.config_manager.config.default_chain_id)

    def _follow_proxy(self, follow_proxy: Optional[bool]) -> bool:
        if follow_proxy is None:
            return self.config_manager.config.follow_proxy
        return follow_proxy

    def _fetch(self, address: str, network: Network, follow_proxy: bool) -> ContractSources:
        self.output.info(f"Fetching sources for {address}...")
        with self.output.console.status("Fetching from explorer..."):
            contract = self.fetcher.fetch_contract(address, network, follow_proxy=follow_proxy)
        if contract.proxy and not follow_proxy:
            self.output.info(f"[Implementation at {contract.proxy.implementation}]")
        return contract

    def run_verify(
        self,
        addresses: List[str],
        source_root: str,
        chain_id: Optional[str] = None,
        remappings_file: Optional[str] = None,
        follow_proxy: Optional[bool] = None,
    ) -> int:
        """Compare each contract's verified sources against ``source_root``.

        A failing address is reported and the run moves on to the next one.

        Returns:
            0 when every file of every contract matched, 1 otherwise.
        """
        for address in addresses:
            validate_address(address)

        network = self._network(chain_id)
        follow = self._follow_proxy(follow_proxy)
        if not (remappings_file or "").strip():
            remappings_file = os.path.join(source_root, "remappings.txt")
        remappings = load_remappings(remappings_file)

        has_issues = False
        for address in addresses:
            try:
                contract = self._fetch(address, network, follow)
            except MirrorError as e:
                self.output.error(str(e))
                has_issues = True
                continue

            if not contract.sources:
                self.output.warning(f"No source files were received for {address}.")
                has_issues = True
                continue

            self.output.info(f"Comparing {len(contract.sources)} source file(s) against {source_root}")
            results = diff_against_local_directory(contract, source_root, remappings)
            self.output.print_results(results)
            self.output.console.print()

            if not summarize_results(results).success:
                has_issues = True

        if has_issues:
            self.output.error("One or more contracts could not be verified")
            return 1

        self.output.success(f"All contracts match the source code within the {source_root} directory")
        return 0

    def run_diff(
        self,
        address_a: str,
        address_b: str,
        chain_id: Optional[str] = None,
        follow_proxy: Optional[bool] = None,
    ) -> int:
        """Compare the verified sources of two deployed contracts."""
        validate_address(address_a)
        validate_address(address_b)
        network = self._network(chain_id)
        follow = self._follow_proxy(follow_proxy)

        contract_a = self._fetch(address_a, network, follow)
        contract_b = self._fetch(address_b, network, follow)

        self.output.info(f"Comparing {address_a} (A) against {address_b} (B)")
        results = diff_two_source_sets(contract_a, contract_b)
        self.output.print_results(results)

        if summarize_results(results).success:
            self.output.success("Both contracts have identical sources")
            return 0
        return 1

    def run_clone(
        self,
        address: str,
        output_dir: str,
        chain_id: Optional[str] = None,
        follow_proxy: Optional[bool] = None,
    ) -> int:
        """Clone a contract's verified sources into a Foundry project."""
        validate_address(address)
        network = self._network(chain_id)
        contract = self._fetch(address, network, self._follow_proxy(follow_proxy))
        meta = contract.meta or CompilerMeta(contract_name=address)

        self.output.info(f"Cloning {meta.contract_name} to {output_dir}")
        materializer = ProjectMaterializer(
            output_dir,
            default_solc_version=self.config_manager.config.default_solc_version,
        )
        try:
            report = materializer.materialize(contract, meta, network)
        except OverwriteConflict as e:
            self.output.error(str(e))
            return 1

        self.output.print_clone_report(report)
        return 0
