"""HUD Fair Market Rent ranges for 1-bedroom apartments (2024-2025 estimates).

Used when no ZORI metro matches the user's city.
"""

from typing import Dict, Optional

HUD_RENTS: Dict[str, Dict[str, int]] = {
    'Austin, TX': {'low': 1300, 'high': 1500},
    'New York, NY': {'low': 1800, 'high': 2200},
    'San Francisco Bay Area, CA': {'low': 2200, 'high': 2600},
    'Seattle, WA': {'low': 1700, 'high': 2000},
    'Boston, MA': {'low': 1900, 'high': 2200},
    'Chicago, IL': {'low': 1200, 'high': 1500},
}

CITY_TO_HUD_KEY = {
    'Austin': 'Austin, TX',
    'NYC': 'New York, NY',
    'SF Bay Area': 'San Francisco Bay Area, CA',
    'Seattle': 'Seattle, WA',
    'Boston': 'Boston, MA',
    'Chicago': 'Chicago, IL',
}


def get_hud_rent_range(city: str) -> Optional[Dict[str, int]]:
    key = CITY_TO_HUD_KEY.get(city)
    if key is None:
        return None
    return dict(HUD_RENTS[key])


def compare_rent_ranges(user_low: float, user_high: float, hud_low: float, hud_high: float) -> str:
    """'above' when the market is above what the user can afford, 'below' when under, else 'overlap'."""
    if user_high < hud_low:
        return 'above'
    if user_low > hud_high:
        return 'below'
    return 'overlap'
