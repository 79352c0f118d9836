"""
Exchange rates from the Frankfurter API.

Frankfurter quotes "units of X per one base unit"; analytics needs the
opposite (base units per one X), so every quote is inverted. A failed fetch
yields an empty table, which analytics reports as "rates unavailable".
"""
from typing import Callable
import logging

import requests

from ..core.config import settings

logger = logging.getLogger(__name__)

RateTable = dict[str, float]
RateFetcher = Callable[[str], RateTable]


def fetch_rates(base: str) -> RateTable:
    try:
        response = requests.get(
            settings.EXCHANGE_RATE_URL,
            params={"base": base},
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        quotes = response.json().get("rates", {})
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Error fetching exchange rates for {base}: {str(e)}", exc_info=True)
        return {}

    rates: RateTable = {base: 1.0}
    for currency, quote in quotes.items():
        if quote:
            rates[currency] = 1 / float(quote)
    logger.info(f"Loaded {len(rates)} exchange rates into {base}")
    return rates
