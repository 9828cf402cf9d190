from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import base58

# spl-governance program version assumed for realms that do not declare one
PROGRAM_VERSION_V1 = 1

PUBLIC_KEY_LENGTH = 32


class RealmRegistryError(Exception):
    status_code = 500

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class MalformedAddress(RealmRegistryError, ValueError):
    status_code = 422


class MalformedRealmRecord(RealmRegistryError):
    pass


@dataclass(frozen=True)
class Address:
    """Base-58 encoded 32 byte account or program key."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not self.value:
            raise MalformedAddress(f'invalid address: {self.value!r}')
        try:
            decoded = base58.b58decode(self.value)
        except ValueError as exc:
            raise MalformedAddress(f'invalid address: {self.value!r}') from exc
        if len(decoded) != PUBLIC_KEY_LENGTH:
            raise MalformedAddress(
                f'invalid address: {self.value!r} decodes to {len(decoded)} bytes'
            )

    def __str__(self) -> str:
        return self.value

    def to_base58(self) -> str:
        return self.value


@dataclass(frozen=True)
class RealmInfo:
    symbol: str
    program_id: Address
    realm_id: Address
    is_certified: bool
    program_version: int | None = None
    website: str | None = None
    # Mainnet realm name used for resource lookups on other clusters
    display_name: str | None = None
    keywords: str | None = None
    twitter_handle: str | None = None
    og_image: str | None = None
    banner_image: str | None = None
    enable_notifications: bool = True
    # 3 featured, 2 new with active proposals, 1 active proposals
    sort_rank: int | None = None
    # Default shared wallet displayed on the home page (crowdfunding DAOs)
    shared_wallet_id: Address | None = None
    community_mint: Address | None = None


def get_program_version_for_realm(realm: RealmInfo) -> int:
    if realm.program_version is None:
        return PROGRAM_VERSION_V1
    return realm.program_version


_OPTIONAL_PAYLOAD_FIELDS = (
    ('website', 'website'),
    ('display_name', 'displayName'),
    ('keywords', 'keywords'),
    ('twitter_handle', 'twitter'),
    ('og_image', 'ogImage'),
    ('banner_image', 'bannerImage'),
    ('sort_rank', 'sortRank'),
    ('shared_wallet_id', 'sharedWalletId'),
    ('community_mint', 'communityMint')
)


def realm_info_payload(realm: RealmInfo) -> dict[str, Any]:
    payload: dict[str, Any] = {
        'symbol': realm.symbol,
        'programId': str(realm.program_id),
        'programVersion': get_program_version_for_realm(realm),
        'realmId': str(realm.realm_id),
        'isCertified': realm.is_certified,
        'enableNotifi': realm.enable_notifications
    }
    for attr, key in _OPTIONAL_PAYLOAD_FIELDS:
        value = getattr(realm, attr)
        if value is None:
            continue
        payload[key] = str(value) if isinstance(value, Address) else value
    return payload
