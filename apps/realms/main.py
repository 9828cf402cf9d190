from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from prometheus_client import Counter, make_asgi_app

from .config import get_settings
from .connection import Cluster, ConnectionContext
from .discovery import DiscoveryUnavailable, get_uncharted_realm_infos
from .excluded_realms import load_excluded_realms
from .realm_info import MalformedAddress, RealmRegistryError, realm_info_payload
from .realm_registry import REGISTRY_NAMES, get_certified_realm_info, get_certified_realm_infos, load_certified_realms

settings = get_settings()
logger = logging.getLogger(__name__)

_http_client: httpx.AsyncClient | None = None

DISCOVERY_REQUESTS_TOTAL = Counter(
    'realms_discovery_requests_total',
    'Uncharted realm discovery requests',
    ['cluster', 'outcome']
)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    global _http_client
    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.discovery_timeout_seconds))
    try:
        yield
    finally:
        await _http_client.aclose()
        _http_client = None


app = FastAPI(title=settings.app_name, default_response_class=ORJSONResponse, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[x.strip() for x in settings.cors_origins.split(',') if x.strip()],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*']
)
app.mount('/metrics', make_asgi_app())


@app.get('/health')
async def health() -> dict[str, str]:
    return {'status': 'ok'}


@app.get('/health/ready')
async def ready() -> dict:
    try:
        counts = {name: len(load_certified_realms(name)) for name in REGISTRY_NAMES}
        excluded = len(load_excluded_realms())
    except RealmRegistryError as exc:
        raise HTTPException(status_code=503, detail=exc.detail) from exc
    return {'status': 'ready', 'certified': counts, 'excluded': excluded}


@app.get('/realms')
async def certified_realms(cluster: Cluster = Query(default='mainnet')) -> dict:
    connection = ConnectionContext(cluster=cluster)
    try:
        realms = get_certified_realm_infos(connection)
    except RealmRegistryError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    return {'cluster': cluster, 'realms': [realm_info_payload(realm) for realm in realms]}


@app.get('/uncharted-realms')
async def uncharted_realms(cluster: Cluster = Query(default='mainnet')) -> dict:
    connection = ConnectionContext(cluster=cluster)
    try:
        realms = await get_uncharted_realm_infos(connection, client=_http_client)
    except DiscoveryUnavailable as exc:
        DISCOVERY_REQUESTS_TOTAL.labels(cluster=cluster, outcome='unavailable').inc()
        logger.warning('Uncharted realms degraded: discovery unavailable cluster=%s: %s', cluster, exc.detail)
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    except MalformedAddress as exc:
        DISCOVERY_REQUESTS_TOTAL.labels(cluster=cluster, outcome='malformed').inc()
        logger.warning('Uncharted realms degraded: malformed discovery record cluster=%s: %s', cluster, exc.detail)
        raise HTTPException(status_code=502, detail=exc.detail) from exc
    except RealmRegistryError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc

    DISCOVERY_REQUESTS_TOTAL.labels(cluster=cluster, outcome='ok').inc()
    return {'cluster': cluster, 'realms': [realm_info_payload(realm) for realm in realms]}


@app.get('/realms/{identifier}')
async def certified_realm(identifier: str, cluster: Cluster = Query(default='mainnet')) -> dict:
    connection = ConnectionContext(cluster=cluster)
    try:
        realm = get_certified_realm_info(identifier, connection)
    except RealmRegistryError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    if realm is None:
        raise HTTPException(status_code=404, detail=f'realm {identifier!r} not found on {cluster}')
    return realm_info_payload(realm)


@app.get('/')
async def root() -> dict:
    return {'service': settings.app_name, 'status': 'ok'}
