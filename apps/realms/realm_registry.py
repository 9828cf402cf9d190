from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import get_settings
from .connection import ConnectionContext, registry_name_for
from .realm_info import Address, MalformedRealmRecord, RealmInfo, RealmRegistryError

REGISTRY_NAMES: tuple[str, ...] = ('mainnet-beta', 'devnet')


class CertifiedRealmRecord(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, str_strip_whitespace=True)

    symbol: str = Field(min_length=1)
    program_id: str = Field(alias='programId', min_length=1)
    realm_id: str = Field(alias='realmId', min_length=1)
    program_version: int | None = Field(default=None, alias='programVersion')
    website: str | None = None
    display_name: str | None = Field(default=None, alias='displayName')
    keywords: str | None = None
    twitter: str | None = None
    og_image: str | None = Field(default=None, alias='ogImage')
    banner_image: str | None = Field(default=None, alias='bannerImage')
    enable_notifi: bool | None = Field(default=None, alias='enableNotifi')
    sort_rank: int | None = Field(default=None, alias='sortRank')
    shared_wallet_id: str | None = Field(default=None, alias='sharedWalletId')
    community_mint: str | None = Field(default=None, alias='communityMint')


def _optional_address(value: str | None) -> Address | None:
    if not value:
        return None
    return Address(value)


def parse_certified_realm(record: Mapping[str, Any]) -> RealmInfo:
    try:
        parsed = CertifiedRealmRecord.model_validate(record)
    except ValidationError as exc:
        raise MalformedRealmRecord(f'malformed realm record {record!r}: {exc}') from exc

    return RealmInfo(
        symbol=parsed.symbol,
        program_id=Address(parsed.program_id),
        realm_id=Address(parsed.realm_id),
        is_certified=True,
        program_version=parsed.program_version,
        website=parsed.website,
        display_name=parsed.display_name,
        keywords=parsed.keywords,
        twitter_handle=parsed.twitter,
        og_image=parsed.og_image,
        banner_image=parsed.banner_image,
        enable_notifications=True if parsed.enable_notifi is None else parsed.enable_notifi,
        sort_rank=parsed.sort_rank,
        shared_wallet_id=_optional_address(parsed.shared_wallet_id),
        community_mint=_optional_address(parsed.community_mint)
    )


def parse_certified_realms(records: Iterable[Mapping[str, Any]]) -> tuple[RealmInfo, ...]:
    return tuple(parse_certified_realm(record) for record in records)


@lru_cache(maxsize=None)
def load_certified_realms(registry_name: str) -> tuple[RealmInfo, ...]:
    """Parse ``<realms_data_dir>/<registry_name>.json`` once per process.

    The certification process is done through pull requests to the registry
    files until realm metadata is available on-chain.
    """
    path = get_settings().realms_data_dir / f'{registry_name}.json'
    try:
        payload = json.loads(path.read_text(encoding='utf-8'))
    except FileNotFoundError as exc:
        raise RealmRegistryError(f'realm registry not found: {path}') from exc
    except json.JSONDecodeError as exc:
        raise RealmRegistryError(f'realm registry is not valid JSON: {path}: {exc}') from exc

    if not isinstance(payload, list):
        raise RealmRegistryError(f'realm registry must be a JSON array: {path}')
    return parse_certified_realms(payload)


def get_certified_realm_infos(connection: ConnectionContext) -> tuple[RealmInfo, ...]:
    return load_certified_realms(registry_name_for(connection))


def _equals_ignore_case(left: str, right: str) -> bool:
    return left.casefold() == right.casefold()


def get_certified_realm_info(identifier: str | None, connection: ConnectionContext) -> RealmInfo | None:
    if not identifier:
        return None

    for realm in get_certified_realm_infos(connection):
        if _equals_ignore_case(str(realm.realm_id), identifier) or _equals_ignore_case(realm.symbol, identifier):
            return realm
    return None
