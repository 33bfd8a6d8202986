"""Tests for mirror.networks."""

import pytest

from mirror.errors import UnsupportedNetworkError
from mirror.models import EndpointKind
from mirror.networks import get_network, get_supported_chain_ids


def test_etherscan_chain_requires_key():
    network = get_network("8453")
    assert network.endpoint_kind == EndpointKind.ETHERSCAN
    assert network.requires_api_key is True
    assert network.chain_id == "8453"
    assert network.url_prefix.startswith("https://api.etherscan.io/v2/api?chainid=8453&")


def test_routescan_chain_is_keyless():
    network = get_network("43114")
    assert network.endpoint_kind == EndpointKind.ETHERSCAN
    assert network.requires_api_key is False
    assert "routescan.io" in network.url_prefix


def test_blockscout_chain():
    network = get_network(747474)
    assert network.endpoint_kind == EndpointKind.BLOCKSCOUT
    assert network.url_prefix == "https://explorer.katanarpc.com/api"
    assert network.chain_id == "747474"


def test_unknown_chain_raises():
    with pytest.raises(UnsupportedNetworkError) as exc_info:
        get_network("999999")
    assert "999999" in str(exc_info.value)


def test_every_supported_chain_resolves():
    for chain_id in get_supported_chain_ids():
        assert get_network(chain_id).chain_id == chain_id
