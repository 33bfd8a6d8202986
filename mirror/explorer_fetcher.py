#!/usr/bin/env python3
"""
Explorer Contract Source Fetcher

Fetches verified contract sources from Etherscan-compatible and Blockscout
explorers and hands the payload to the source parser.
"""

import logging
import time
from typing import Any, Dict, Optional, Set

import requests

from mirror.config_manager import ConfigManager
from mirror.errors import ExplorerAPIError, InvalidAddressError, VerificationError
from mirror.models import ContractSources, EndpointKind, Network
from mirror.source_parser import parse_source_response

logger = logging.getLogger(__name__)


def is_evm_address(address: str) -> bool:
    """Check if the input is a valid EVM-style address."""
    return (
        isinstance(address, str) and
        address.startswith('0x') and
        len(address) == 42 and
        all(c in '0123456789abcdefABCDEF' for c in address[2:])
    )


def validate_address(address: str) -> str:
    """Return ``address`` unchanged, or raise InvalidAddressError."""
    if not is_evm_address(address):
        raise InvalidAddressError(address)
    return address


class ExplorerFetcher:
    """Contract source fetcher for the explorers listed in mirror.networks."""

    def __init__(self, config_manager: Optional[ConfigManager] = None, api_key: Optional[str] = None):
        self.config_manager = config_manager or ConfigManager()
        config = self.config_manager.config
        self.api_key = api_key if api_key is not None else config.etherscan_api_key
        self.timeout = config.request_timeout
        self.request_delay = config.request_delay

    def _get_json(self, url: str, address: str, params: Optional[Dict[str, str]] = None) -> Any:
        # Rate limiting
        time.sleep(self.request_delay)

        try:
            response = requests.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ExplorerAPIError(f"Network error fetching {address}: {e}") from e

        if response.status_code == 404:
            raise VerificationError(address)
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise ExplorerAPIError(f"HTTP error fetching {address}! Status: {response.status_code}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ExplorerAPIError(f"JSON decode error for {address}: {e}") from e

    def fetch_payload(self, address: str, network: Network) -> Any:
        """Fetch the raw decoded explorer payload for ``address``."""
        validate_address(address)
        logger.info("Fetching sources for %s on chain %s", address, network.chain_id)

        if network.endpoint_kind == EndpointKind.BLOCKSCOUT:
            return self._get_json(f"{network.url_prefix}/v2/smart-contracts/{address}", address)

        if network.requires_api_key and not self.api_key:
            raise ExplorerAPIError(
                f"An API key is required for chain {network.chain_id}. "
                "Set ETHERSCAN_API_KEY or run: evm-mirror config --set-etherscan-key YOUR_KEY"
            )

        params = {'address': address}
        if self.api_key:
            params['apikey'] = self.api_key
        return self._get_json(network.url_prefix, address, params=params)

    def fetch_contract(
        self,
        address: str,
        network: Network,
        follow_proxy: bool = False,
        _visited: Optional[Set[str]] = None,
    ) -> ContractSources:
        """Fetch and parse the verified sources of ``address``.

        Args:
            address: Contract address to fetch
            network: Explorer endpoint to query
            follow_proxy: Fetch the implementation instead when the explorer
                reports one
            _visited: Addresses already fetched in this chain of proxies
        """
        if _visited is None:
            _visited = set()
        if address.lower() in _visited:
            raise ExplorerAPIError(f"Circular proxy reference detected for address {address}")
        _visited.add(address.lower())

        payload = self.fetch_payload(address, network)
        contract = parse_source_response(payload, address, network.endpoint_kind)

        if contract.proxy:
            logger.info("[Implementation at %s]", contract.proxy.implementation)
            if follow_proxy:
                return self.fetch_contract(contract.proxy.implementation, network, True, _visited)

        return contract
