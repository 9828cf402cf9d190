from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone

from .connection import CLUSTERS, ConnectionContext
from .discovery import DiscoveryUnavailable, get_uncharted_realm_infos
from .excluded_realms import load_excluded_realms
from .realm_info import RealmRegistryError
from .realm_registry import REGISTRY_NAMES, load_certified_realms

LOGGER = logging.getLogger('realms.check_registry')


def check_registry(registry_name: str, excluded: Mapping[str, str]) -> dict:
    realms = load_certified_realms(registry_name)
    symbols = Counter(realm.symbol.upper() for realm in realms)
    realm_ids = Counter(str(realm.realm_id) for realm in realms)
    return {
        'registry': registry_name,
        'certified_count': len(realms),
        'duplicate_symbols': sorted(symbol for symbol, count in symbols.items() if count > 1),
        'duplicate_realm_ids': sorted(realm_id for realm_id, count in realm_ids.items() if count > 1),
        'certified_but_excluded': sorted(realm_id for realm_id in realm_ids if realm_id in excluded)
    }


def summary_status(reports: Sequence[dict]) -> str:
    if any(report['duplicate_realm_ids'] for report in reports):
        return 'duplicates'
    # certified-and-excluded realms resolve by lookup but never reach discovery
    if any(report['certified_but_excluded'] for report in reports):
        return 'conflicts'
    return 'ok'


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description='Validate certified realm registries and the exclusion list')
    parser.add_argument('--discover', action='store_true', help='Also query the discovery indexer')
    parser.add_argument('--cluster', choices=CLUSTERS, default='mainnet', help='Cluster used with --discover')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    try:
        excluded = load_excluded_realms()
        reports = [check_registry(name, excluded) for name in REGISTRY_NAMES]
    except RealmRegistryError as exc:
        LOGGER.error('registry check failed: %s', exc.detail)
        return 1

    summary: dict = {
        'status': summary_status(reports),
        'checked_at': datetime.now(timezone.utc).isoformat(),
        'excluded_count': len(excluded),
        'registries': reports
    }

    if args.discover:
        connection = ConnectionContext(cluster=args.cluster)
        try:
            uncharted = asyncio.run(get_uncharted_realm_infos(connection))
        except (DiscoveryUnavailable, RealmRegistryError) as exc:
            LOGGER.error('discovery failed cluster=%s: %s', args.cluster, exc.detail)
            return 1
        summary['discovery'] = {'cluster': args.cluster, 'uncharted_count': len(uncharted)}

    print(json.dumps(summary, indent=2))
    return 0 if summary['status'] == 'ok' else 1


if __name__ == '__main__':
    raise SystemExit(main())
