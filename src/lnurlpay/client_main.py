from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional

from .client.resolver import PayResolver
from .domain.errors import LnurlPayError
from .envs.client_env import Settings, get_settings
from .infrastructure.lnd.lnd_rest_backend import LndRestBackend


def prompt_amount(min_sendable: int, max_sendable: int, rejected: int) -> Optional[int]:
    """Ask on the console until an integer is typed; EOF cancels."""
    if rejected:
        print(
            f"Invalid amount. Expected an amount between {min_sendable} and "
            f"{max_sendable}, got {rejected}"
        )
    while True:
        print(
            f"Enter an amount (in millisatoshis) between {min_sendable} and "
            f"{max_sendable}"
        )
        try:
            user_input = input().strip()
        except EOFError:
            return None
        try:
            return int(user_input)
        except ValueError as e:
            print(f"error parsing input: {e}")


async def run(settings: Settings) -> int:
    backend = LndRestBackend.from_settings(settings)
    async with PayResolver(
        backend, use_tls=not settings.no_tls, amount_strategy=prompt_amount
    ) as resolver:
        try:
            result = await resolver.pay(
                settings.target, settings.amount_msat, settings.max_fee_msat
            )
        finally:
            await backend.aclose()
    print(f"Successful payment! Preimage: {result.preimage}")
    return 0


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    try:
        settings = get_settings()
        sys.exit(asyncio.run(run(settings)))
    except (LnurlPayError, ValueError) as e:
        print(f"[lnurlpay-client] {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
