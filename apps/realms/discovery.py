from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pyuca import Collator

from .config import Settings, get_settings
from .connection import ConnectionContext
from .excluded_realms import is_excluded_realm
from .realm_info import Address, RealmInfo
from .realm_registry import get_certified_realm_infos

LOGGER = logging.getLogger('realms.discovery')

REALMS_QUERY = '''
    query realms($limit: Int!, $offset: Int!) {
      realms(limit: $limit, offset: $offset) {
        name
        programId
        address
      }
    }
'''


class DiscoveryUnavailable(Exception):
    def __init__(self, detail: str, status_code: int = 503) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class UnchartedRealm(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True)

    name: str = Field(min_length=1)
    program_id: str = Field(alias='programId', min_length=1)
    address: str = Field(min_length=1)


def discovery_url_for(connection: ConnectionContext, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    if connection.cluster == 'devnet':
        return settings.discovery_url_devnet
    return settings.discovery_url_mainnet


def _parse_uncharted_realm(raw: Any) -> UnchartedRealm:
    try:
        return UnchartedRealm.model_validate(raw)
    except ValidationError as exc:
        raise DiscoveryUnavailable(f'discovery returned a malformed realm record {raw!r}: {exc}') from exc


def _realm_records(body: Any) -> list[Any]:
    if not isinstance(body, dict):
        raise DiscoveryUnavailable('discovery response is not a JSON object')

    data = body.get('data')
    if not isinstance(data, dict):
        errors = body.get('errors')
        if errors:
            raise DiscoveryUnavailable(f'discovery query failed: {errors!r}')
        raise DiscoveryUnavailable('discovery response has no data')

    realms = data.get('realms')
    if not isinstance(realms, list):
        raise DiscoveryUnavailable('discovery response has no realms list')
    return realms


async def _post_query(client: httpx.AsyncClient, url: str, payload: dict[str, Any]) -> Any:
    try:
        response = await client.post(url, json=payload)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPError as exc:
        raise DiscoveryUnavailable(f'discovery request to {url} failed: {exc}') from exc
    except ValueError as exc:
        raise DiscoveryUnavailable(f'discovery response from {url} is not valid JSON') from exc


async def fetch_uncharted_realms(
    connection: ConnectionContext,
    *,
    client: httpx.AsyncClient | None = None
) -> list[UnchartedRealm]:
    settings = get_settings()
    url = discovery_url_for(connection, settings)
    # One page sized to hold every known realm; the indexer has no cursor we follow.
    payload = {
        'query': REALMS_QUERY,
        'variables': {'limit': settings.discovery_page_size, 'offset': 0}
    }
    LOGGER.debug('querying realms cluster=%s url=%s limit=%s', connection.cluster, url, settings.discovery_page_size)

    if client is None:
        async with httpx.AsyncClient(timeout=httpx.Timeout(settings.discovery_timeout_seconds)) as owned_client:
            body = await _post_query(owned_client, url, payload)
    else:
        body = await _post_query(client, url, payload)

    return [_parse_uncharted_realm(raw) for raw in _realm_records(body)]


@lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


def locale_sort_key(name: str) -> tuple[int, ...]:
    # Unicode collation: punctuation and symbols, then digits, then letters;
    # accents and case only break ties.
    return _collator().sort_key(name)


def create_uncharted_realm_info(realm: UnchartedRealm) -> RealmInfo:
    return RealmInfo(
        symbol=realm.name,
        program_id=Address(realm.program_id),
        realm_id=Address(realm.address),
        display_name=realm.name,
        is_certified=False,
        enable_notifications=True
    )


async def get_uncharted_realm_infos(
    connection: ConnectionContext,
    *,
    client: httpx.AsyncClient | None = None
) -> tuple[RealmInfo, ...]:
    """Return every discovered realm that is neither certified nor excluded.

    Raises ``DiscoveryUnavailable`` when the indexer cannot be queried or
    returns a malformed payload, and ``MalformedAddress`` when a record carries
    an invalid key. No partial result is returned in either case.
    """
    certified_ids = {str(realm.realm_id) for realm in get_certified_realm_infos(connection)}
    discovered = await fetch_uncharted_realms(connection, client=client)
    discovered.sort(key=lambda realm: locale_sort_key(realm.name))

    uncharted = tuple(
        create_uncharted_realm_info(realm)
        for realm in discovered
        if realm.address not in certified_ids and not is_excluded_realm(realm.address)
    )
    LOGGER.info(
        'resolved uncharted realms cluster=%s discovered=%s uncharted=%s',
        connection.cluster,
        len(discovered),
        len(uncharted)
    )
    return uncharted
