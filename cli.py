from __future__ import annotations

import asyncio
import json
import os

from monzo.client import MonzoClient
from monzo.constants import APP_VERSION, LOGGER
from monzo.env import load_env, setup_logging, validate_env


async def run(client: MonzoClient) -> None:
    """Print the authorization URL, then query the API if a token is configured."""
    print(f"monzo-api {APP_VERSION}")
    print(f"Authorize at: {client.authorization_url()}")

    access_token = os.getenv("MONZO_ACCESS_TOKEN", "").strip()
    if not access_token:
        LOGGER.info("MONZO_ACCESS_TOKEN not set; skipping API calls.")
        return

    client.access_token = access_token
    whoami = await client.ping()
    print(json.dumps(whoami, indent=2, sort_keys=True))
    accounts = await client.list_accounts()
    print(json.dumps(accounts, indent=2, sort_keys=True))


def main() -> None:
    load_env()
    setup_logging()
    validate_env()
    asyncio.run(run(MonzoClient.from_env()))


if __name__ == "__main__":
    main()
