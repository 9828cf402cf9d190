from __future__ import annotations

import json
from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType

from .config import get_settings
from .realm_info import RealmRegistryError

# Realms hidden even from the uncharted category: test DAOs, duplicates and
# dead realms. Some autogenerated names (e.g. ckvq40oin3030171ylqhx37z53m) are
# listed one by one; a name pattern may be needed if they keep appearing.


@lru_cache(maxsize=1)
def load_excluded_realms() -> Mapping[str, str]:
    path = get_settings().excluded_realms_path
    try:
        payload = json.loads(path.read_text(encoding='utf-8'))
    except FileNotFoundError as exc:
        raise RealmRegistryError(f'excluded realms file not found: {path}') from exc
    except json.JSONDecodeError as exc:
        raise RealmRegistryError(f'excluded realms file is not valid JSON: {path}: {exc}') from exc

    if not isinstance(payload, dict):
        raise RealmRegistryError(f'excluded realms file must be a JSON object: {path}')

    return MappingProxyType({str(address): str(note or '') for address, note in payload.items()})


def is_excluded_realm(address: str) -> bool:
    return address in load_excluded_realms()
