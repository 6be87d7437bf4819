"""Rent market data: ZORI metro medians and the HUD fair market rent table."""

from market.hud_rents import HUD_RENTS, compare_rent_ranges, get_hud_rent_range
from market.zori_store import (
    OTHER_METRO_VALUE,
    MarketRentRange,
    ZoriDataStore,
    calculate_market_rent_range,
    compare_market_to_safe,
    normalize_key,
)

__all__ = [
    'HUD_RENTS',
    'OTHER_METRO_VALUE',
    'MarketRentRange',
    'ZoriDataStore',
    'calculate_market_rent_range',
    'compare_market_to_safe',
    'compare_rent_ranges',
    'get_hud_rent_range',
    'normalize_key',
]
