"""
Example: Attestation flows on devnet

This example walks through the attestation program end to end:
- Creating a credential owned by the payer
- Creating a schema with three string fields
- Creating an attestation against that schema
- Creating a tokenized attestation and sizing its mint

The payer keypair is read from SAS_KEYPAIR_PATH (default
~/.config/solana/id.json) and the cluster from SAS_RPC_URL (default devnet).
Pass step names on the command line to run a subset, e.g.
`python examples/sas_devnet_demo.py credential schema`.
"""

import asyncio
import logging
import os
import sys

# Add parent directory to path so we can import sasclient
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sasclient import AttestationService, ClientConfig
from sasclient.address import address
from sasclient.errors import SasError

NAME = "test28"
AUTHORIZED_SIGNERS = [
    "ELxUQkWLMBCoMatry9qzQR6RHiUYmVndUpmPwhZ8PKJK",
    "Du3X3wKN3LHfSbXtX2PW5jhnSHit8j8NSb19VZW6V9mu",
]
TOKENIZED_NONCE = "Dk5hHsjnaD7GZHGpgU8dunbaBVi7vW5mo4QQpjVWWt94"
TOKEN_URI = "https://example.com/attestation.json"

STEPS = ("credential", "schema", "attestation", "tokenized")


async def run(steps):
    config = ClientConfig.from_env()
    async with AttestationService.from_config(config) as service:
        if "credential" in steps:
            print("\n1. Creating credential...")
            outcome = await service.create_credential(NAME, signers=AUTHORIZED_SIGNERS)
            report(outcome)

        if "schema" in steps:
            print("\n2. Creating schema...")
            outcome = await service.create_schema(
                NAME,
                NAME,
                description="test desc",
                layout=bytes([12, 12, 12]),
                field_names=["name", "age", "country"],
            )
            report(outcome)

        if "attestation" in steps:
            print("\n3. Creating attestation...")
            outcome = await service.create_attestation(
                NAME, NAME, {"name": "john", "age": "11", "country": "spain"},
            )
            report(outcome)

        if "tokenized" in steps:
            print("\n4. Creating tokenized attestation...")
            outcome = await service.create_tokenized_attestation(
                NAME,
                NAME,
                {"name": "charlie", "age": "22", "country": "japan"},
                name="tName",
                symbol="PAT",
                uri=TOKEN_URI,
                nonce=address(TOKENIZED_NONCE),
            )
            print(f"   Mint account space: {outcome.mint_account_space}")
            report(outcome)

        print("\nService status:")
        for key, value in service.get_service_status().items():
            print(f"   {key}: {value}")


def report(outcome):
    for label, key in outcome.addresses.items():
        print(f"   {label}: {key}")
    if outcome.ok:
        print(f"   ✅ Confirmed: {outcome.result.explorer_url}")
    else:
        print(f"   ❌ Failed: {outcome.result.error}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    steps = sys.argv[1:] or STEPS
    unknown = [s for s in steps if s not in STEPS]
    if unknown:
        print(f"Unknown steps: {', '.join(unknown)} (choose from {', '.join(STEPS)})")
        return 2

    print("🔐 Solana Attestation Service Demo")
    print("=" * 50)
    try:
        asyncio.run(run(steps))
    except SasError as e:
        print(f"❌ {type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
