"""
Data model shared by the parser, the diff engine and the materializer.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional


# Import prefix -> local directory prefix. Insertion order is significant.
Remappings = Dict[str, str]


class EndpointKind(Enum):
    """Explorer API flavour."""
    ETHERSCAN = "etherscan"
    BLOCKSCOUT = "blockscout"


@dataclass(frozen=True)
class Network:
    """Static description of an explorer endpoint for one chain."""
    endpoint_kind: EndpointKind
    url_prefix: str
    chain_id: str
    requires_api_key: bool = False


@dataclass(frozen=True)
class ProxyInfo:
    """Implementation address reported for a proxy contract."""
    implementation: str


@dataclass(frozen=True)
class CompilerMeta:
    """How the contract was compiled, as reported by the explorer."""
    compiler_version: str = ""
    optimization_used: bool = False
    runs: int = 0
    evm_version: str = ""
    contract_file_name: str = ""
    contract_name: str = ""


@dataclass(frozen=True)
class ContractSources:
    """Verified source files of one deployed contract.

    ``sources`` maps each reported file path to its verbatim content and
    is read-only once the object is built.
    """
    address: str
    sources: Mapping[str, str]
    proxy: Optional[ProxyInfo] = None
    meta: Optional[CompilerMeta] = None

    def __post_init__(self):
        object.__setattr__(self, "sources", MappingProxyType(dict(self.sources)))


class DiffStatus(Enum):
    """Classification of a single compared file."""
    MATCH = "match"
    DIFFER = "differ"
    NOT_FOUND = "not_found"
    ERROR = "error"


class Side(Enum):
    """Which source set is missing a file in a two-set comparison."""
    A = "A"
    B = "B"


@dataclass(frozen=True)
class DiffResult:
    """Base of the per-file comparison result variants."""
    path: str

    @property
    def status(self) -> DiffStatus:
        raise NotImplementedError


@dataclass(frozen=True)
class DiffMatch(DiffResult):
    @property
    def status(self) -> DiffStatus:
        return DiffStatus.MATCH


@dataclass(frozen=True)
class DiffDiffer(DiffResult):
    diff: str = ""

    @property
    def status(self) -> DiffStatus:
        return DiffStatus.DIFFER


@dataclass(frozen=True)
class DiffNotFound(DiffResult):
    """The file is absent locally, or absent from the set named by ``side``."""
    expected_path: str = ""
    side: Optional[Side] = None

    @property
    def status(self) -> DiffStatus:
        return DiffStatus.NOT_FOUND


@dataclass(frozen=True)
class DiffError(DiffResult):
    expected_path: str = ""
    reason: str = ""

    @property
    def status(self) -> DiffStatus:
        return DiffStatus.ERROR


@dataclass
class DiffSummary:
    """Per-status tally of a comparison run."""
    counts: Dict[DiffStatus, int] = field(default_factory=dict)
    total: int = 0

    @property
    def success(self) -> bool:
        return self.counts.get(DiffStatus.MATCH, 0) == self.total

    def count(self, status: DiffStatus) -> int:
        return self.counts.get(status, 0)
