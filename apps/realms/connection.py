from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Cluster = Literal['mainnet', 'devnet', 'localnet']

CLUSTERS: tuple[str, ...] = ('mainnet', 'devnet', 'localnet')


@dataclass(frozen=True)
class ConnectionContext:
    cluster: Cluster

    def __post_init__(self) -> None:
        if self.cluster not in CLUSTERS:
            raise ValueError(f'unknown cluster: {self.cluster!r}')


def registry_name_for(connection: ConnectionContext) -> str:
    # Every non-mainnet cluster shares the devnet registry.
    return 'mainnet-beta' if connection.cluster == 'mainnet' else 'devnet'
