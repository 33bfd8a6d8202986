#!/usr/bin/env python3
"""
Source Response Parser

Turns the raw payload of an explorer API into a ContractSources value.
Etherscan-style explorers return either a single file or a Standard JSON
Input document wrapped in an extra pair of braces; Blockscout returns the
main file plus a list of additional sources.
"""

import json
import logging
from typing import Any, Dict, Optional

from mirror.errors import ExplorerAPIError, MalformedSourceJson, VerificationError
from mirror.models import CompilerMeta, ContractSources, EndpointKind, ProxyInfo

logger = logging.getLogger(__name__)


def _single_file_name(contract_name: str) -> str:
    return f"{contract_name or 'Contract'}.sol"


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def decode_standard_json_sources(text: str) -> Dict[str, str]:
    """Decode the ``sources`` map of a Standard JSON Input document.

    Args:
        text: The document with the extra outer brace layer already removed.

    Returns:
        Mapping of file path to file content.

    Raises:
        MalformedSourceJson: if the text is not JSON or has no sources object.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedSourceJson(f"Failed to parse Solidity JSON-Input: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("sources"), dict):
        raise MalformedSourceJson("Solidity JSON-Input has no 'sources' object")

    sources: Dict[str, str] = {}
    for path, entry in document["sources"].items():
        content = entry.get("content") if isinstance(entry, dict) else None
        if not isinstance(content, str):
            logger.warning("Skipping source entry without text content: %s", path)
            continue
        sources[path] = content
    return sources


def decode_source_code(source_code: str, contract_name: str) -> Dict[str, str]:
    """Split an Etherscan ``SourceCode`` field into files.

    A ``{{...}}`` value is a Standard JSON Input document; anything else is a
    single file stored as ``<ContractName>.sol``. When the envelope cannot be
    decoded the text, minus its outer brace layer, is kept as a single file.
    """
    if source_code.startswith("{{") and source_code.endswith("}}"):
        inner = source_code[1:-1]
        try:
            return decode_standard_json_sources(inner)
        except MalformedSourceJson as e:
            logger.warning("%s; falling back to a single file", e)
            return {_single_file_name(contract_name): inner}

    return {_single_file_name(contract_name): source_code}


def parse_etherscan_response(payload: Dict[str, Any], address: str) -> ContractSources:
    """Parse an Etherscan ``getsourcecode`` response.

    Raises:
        ExplorerAPIError: when the API reports an error status.
        VerificationError: when the contract is not verified.
    """
    if not isinstance(payload, dict):
        raise ExplorerAPIError(f"Unexpected getsourcecode response for {address}: {payload!r}")

    if str(payload.get("status")) != "1":
        raise ExplorerAPIError(
            f"Etherscan API Error: {payload.get('message', 'Unknown error')} - {payload.get('result')}"
        )

    result = payload.get("result")
    if not isinstance(result, list) or not result or not isinstance(result[0], dict):
        raise VerificationError(address, "No contract data found")

    record = result[0]
    source_code = record.get("SourceCode") or ""
    abi = str(record.get("ABI") or "").strip()

    if not source_code:
        raise VerificationError(address)
    if not abi or "not verified" in abi.lower():
        raise VerificationError(address)

    contract_name = str(record.get("ContractName") or "")
    sources = decode_source_code(source_code, contract_name)

    proxy = None
    implementation = str(record.get("Implementation") or "").strip()
    if str(record.get("Proxy") or "") == "1" and implementation:
        proxy = ProxyInfo(implementation=implementation)

    meta = CompilerMeta(
        compiler_version=str(record.get("CompilerVersion") or ""),
        optimization_used=str(record.get("OptimizationUsed") or "") == "1",
        runs=_to_int(record.get("Runs")),
        evm_version=str(record.get("EVMVersion") or ""),
        contract_file_name=str(record.get("ContractFileName") or "") or next(iter(sources), ""),
        contract_name=contract_name,
    )

    return ContractSources(address=address, sources=sources, proxy=proxy, meta=meta)


def parse_blockscout_response(payload: Dict[str, Any], address: str) -> ContractSources:
    """Parse a Blockscout ``/v2/smart-contracts/<address>`` response.

    Raises:
        VerificationError: when the source or the ABI is missing.
    """
    if not isinstance(payload, dict):
        raise ExplorerAPIError(f"Unexpected smart-contracts response for {address}: {payload!r}")

    if not payload.get("source_code") or not payload.get("abi"):
        raise VerificationError(address)

    name = str(payload.get("name") or "")
    main_path = payload.get("file_path") or _single_file_name(name)
    sources = {main_path: payload["source_code"]}

    for dependency in payload.get("additional_sources") or []:
        if not isinstance(dependency, dict):
            logger.warning("Skipping malformed additional source for %s: %r", address, dependency)
            continue
        dep_path = dependency.get("file_path")
        dep_source = dependency.get("source_code")
        if not dep_path or not isinstance(dep_source, str):
            logger.warning("Skipping additional source without path or text for %s", address)
            continue
        sources[dep_path] = dep_source

    proxy = None
    implementations = payload.get("implementations") or []
    if implementations and isinstance(implementations[0], dict) and implementations[0].get("address"):
        proxy = ProxyInfo(implementation=implementations[0]["address"])

    settings = payload.get("compiler_settings") or {}
    meta = CompilerMeta(
        compiler_version=str(payload.get("compiler_version") or ""),
        optimization_used=bool(payload.get("optimization_enabled")),
        runs=_to_int(payload.get("optimization_runs")),
        evm_version=str(payload.get("evm_version") or settings.get("evmVersion") or ""),
        contract_file_name=main_path,
        contract_name=name,
    )

    return ContractSources(address=address, sources=sources, proxy=proxy, meta=meta)


def parse_source_response(
    payload: Dict[str, Any],
    address: str,
    endpoint_kind: Optional[EndpointKind] = EndpointKind.ETHERSCAN,
) -> ContractSources:
    """Parse ``payload`` with the parser matching the explorer flavour."""
    if endpoint_kind == EndpointKind.BLOCKSCOUT:
        return parse_blockscout_response(payload, address)
    return parse_etherscan_response(payload, address)
