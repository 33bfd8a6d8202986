"""
Chain id to explorer endpoint lookup.
"""

from typing import List

from mirror.errors import UnsupportedNetworkError
from mirror.models import EndpointKind, Network


ETHERSCAN_CHAIN_IDS = ("1", "10", "137", "300", "324", "8453", "17000", "42161", "11155111")
ROUTESCAN_CHAIN_IDS = ("21000000", "43114", "88888")
BLOCKSCOUT_ENDPOINTS = {
    "747474": "https://explorer.katanarpc.com/api",
}


def get_network(chain_id) -> Network:
    """Return the explorer endpoint for ``chain_id``.

    Raises:
        UnsupportedNetworkError: when the chain is not in the table.
    """
    chain_id = str(chain_id).strip()

    if chain_id in ETHERSCAN_CHAIN_IDS:
        return Network(
            endpoint_kind=EndpointKind.ETHERSCAN,
            url_prefix=f"https://api.etherscan.io/v2/api?chainid={chain_id}&module=contract&action=getsourcecode",
            chain_id=chain_id,
            requires_api_key=True,
        )

    # Routescan speaks the Etherscan dialect without a key
    if chain_id in ROUTESCAN_CHAIN_IDS:
        return Network(
            endpoint_kind=EndpointKind.ETHERSCAN,
            url_prefix=(
                f"https://api.routescan.io/v2/network/mainnet/evm/{chain_id}"
                "/etherscan/api?module=contract&action=getsourcecode"
            ),
            chain_id=chain_id,
        )

    if chain_id in BLOCKSCOUT_ENDPOINTS:
        return Network(
            endpoint_kind=EndpointKind.BLOCKSCOUT,
            url_prefix=BLOCKSCOUT_ENDPOINTS[chain_id],
            chain_id=chain_id,
        )

    raise UnsupportedNetworkError(chain_id)


def get_supported_chain_ids() -> List[str]:
    """Get list of supported chain ids."""
    return list(ETHERSCAN_CHAIN_IDS) + list(ROUTESCAN_CHAIN_IDS) + list(BLOCKSCOUT_ENDPOINTS)
