from __future__ import annotations

import json
from pathlib import Path

GOVERNANCE_PROGRAM_ID = 'GovER5Lthms3bLBqWub97yVrMmEogzX7xNjdXpPPCVZw'
MANGO_REALM_ID = 'DPiH3H3c7t47BMxqTxLsuPQpEC6Kne8GA9VXbxpnZxFE'
MANGO_MINT = 'MangoCzJ36AjZyKwVj3VnYU4GTonjfVEnJmvvWaxLac'
USDC_MINT = 'EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v'
WRAPPED_SOL_MINT = 'So11111111111111111111111111111111111111112'
TOKEN_PROGRAM_ID = 'TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA'
GRAPE_TEST_REALM_ID = 'HxsBLUnTz4tTEbJzPbNY69At1B99T9yvVouskPJGEjF'

MAINNET_RECORDS = [
    {
        'symbol': 'MNGO',
        'displayName': 'Mango DAO',
        'programId': GOVERNANCE_PROGRAM_ID,
        'realmId': MANGO_REALM_ID,
        'communityMint': MANGO_MINT,
        'twitter': '@mangomarkets',
        'sortRank': 3
    }
]

DEVNET_RECORDS = [
    {
        'symbol': 'USDC',
        'programId': GOVERNANCE_PROGRAM_ID,
        'programVersion': 2,
        'realmId': USDC_MINT,
        'enableNotifi': False
    }
]

EXCLUDED = {GRAPE_TEST_REALM_ID: 'Grape Test'}


def write_realms_data(
    directory: str,
    mainnet: list | None = None,
    devnet: list | None = None,
    excluded: dict | None = None
) -> Path:
    root = Path(directory)
    (root / 'mainnet-beta.json').write_text(
        json.dumps(MAINNET_RECORDS if mainnet is None else mainnet), encoding='utf-8'
    )
    (root / 'devnet.json').write_text(json.dumps(DEVNET_RECORDS if devnet is None else devnet), encoding='utf-8')
    (root / 'excluded-realms.json').write_text(
        json.dumps(EXCLUDED if excluded is None else excluded), encoding='utf-8'
    )
    return root
