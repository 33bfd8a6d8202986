"""
Shared test fixtures for the evm-mirror test suite.

Provides explorer payloads for both backends, a ConfigManager isolated
from the user's home directory, and sample Solidity sources.
"""

import json

import pytest

from mirror.config_manager import ConfigManager
from mirror.models import EndpointKind, Network


# ── Sample Solidity sources ─────────────────────────────────────

TOKEN_SOURCE = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

import "@openzeppelin/contracts/token/ERC20/IERC20.sol";

contract Token is IERC20 {
    mapping(address => uint256) public balances;
}
"""

IERC20_SOURCE = """\
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.20;

interface IERC20 {
    function totalSupply() external view returns (uint256);
}
"""

TOKEN_ADDRESS = "0x1234567890abcdef1234567890abcdef12345678"
IMPLEMENTATION_ADDRESS = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"


def standard_json_source(sources):
    """Etherscan's double-brace Standard JSON Input encoding."""
    document = {
        "language": "Solidity",
        "sources": {path: {"content": content} for path, content in sources.items()},
    }
    return "{" + json.dumps(document) + "}"


def etherscan_record(**overrides):
    record = {
        "SourceCode": "pragma solidity ^0.8.0;\n\ncontract Token {\n    string public name;\n}",
        "ABI": '[{"type":"function","name":"name","inputs":[],"outputs":[{"type":"string"}]}]',
        "ContractName": "Token",
        "CompilerVersion": "v0.8.19+commit.7dd6d404",
        "OptimizationUsed": "1",
        "Runs": "200",
        "ConstructorArguments": "",
        "EVMVersion": "Default",
        "Library": "",
        "LicenseType": "MIT",
        "Proxy": "0",
        "Implementation": "",
        "SwarmSource": "",
    }
    record.update(overrides)
    return record


def etherscan_response(**overrides):
    return {"status": "1", "message": "OK", "result": [etherscan_record(**overrides)]}


ETHERSCAN_MULTI_FILE_RESPONSE = etherscan_response(
    SourceCode=standard_json_source({
        "src/Token.sol": TOKEN_SOURCE,
        "@openzeppelin/contracts/token/ERC20/IERC20.sol": IERC20_SOURCE,
    }),
    ContractFileName="src/Token.sol",
    EVMVersion="Paris",
)

ETHERSCAN_UNVERIFIED_RESPONSE = etherscan_response(
    SourceCode="",
    ABI="Contract source code not verified",
    ContractName="",
    CompilerVersion="",
)

ETHERSCAN_ERROR_RESPONSE = {
    "status": "0",
    "message": "NOTOK",
    "result": "Invalid API Key",
}

BLOCKSCOUT_RESPONSE = {
    "name": "Vault",
    "file_path": "contracts/Vault.sol",
    "source_code": "pragma solidity ^0.8.20;\ncontract Vault {}",
    "additional_sources": [
        {
            "file_path": "node_modules/@openzeppelin/contracts/access/Ownable.sol",
            "source_code": "pragma solidity ^0.8.20;\nabstract contract Ownable {}",
        },
    ],
    "abi": [{"type": "constructor", "inputs": []}],
    "compiler_version": "v0.8.24+commit.e11b9ed9",
    "optimization_enabled": True,
    "optimization_runs": 10000,
    "evm_version": "cancun",
    "implementations": [],
    "language": "solidity",
}


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture
def etherscan_network():
    return Network(
        endpoint_kind=EndpointKind.ETHERSCAN,
        url_prefix="https://api.etherscan.io/v2/api?chainid=1&module=contract&action=getsourcecode",
        chain_id="1",
        requires_api_key=True,
    )


@pytest.fixture
def blockscout_network():
    return Network(
        endpoint_kind=EndpointKind.BLOCKSCOUT,
        url_prefix="https://explorer.katanarpc.com/api",
        chain_id="747474",
    )


@pytest.fixture
def config_manager(tmp_path, monkeypatch):
    """ConfigManager backed by a temporary file, with no API key from the environment."""
    monkeypatch.delenv("ETHERSCAN_API_KEY", raising=False)
    manager = ConfigManager(str(tmp_path / "config.yaml"))
    manager.config.etherscan_api_key = "test-fake-etherscan-key"
    manager.config.request_delay = 0
    return manager
