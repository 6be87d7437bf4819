"""ZORI (Zillow Observed Rent Index) metro rent data.

The CSV is read once, the first time a lookup needs it. Construct one
ZoriDataStore per process and pass it to whatever needs market rents.
"""

import csv
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from calc.rounding import round_to_nearest_25

logger = logging.getLogger(__name__)

OTHER_METRO_VALUE = '__OTHER__'
OTHER_METRO_LABEL = 'Outside major metros / Not sure'

# (min median rent, tier, buffer pct, width pct), highest tier first
MARKET_TIERS = (
    (3000, 'T1', 0.08, 0.06),
    (2200, 'T2', 0.06, 0.07),
    (1500, 'T3', 0.04, 0.08),
    (0, 'T4', 0.02, 0.10),
)


@dataclass
class ZoriMetro:
    region_name: str
    state_name: str
    median_rent: float


@dataclass
class MarketRentRange:
    median_rent: float
    buffered: float
    market_low: int
    market_high: int
    tier: str
    buffer_pct: float
    width_pct: float


def normalize_key(value: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace."""
    text = re.sub(r'[^\w\s]', '', value.lower().strip())
    return re.sub(r'\s+', ' ', text)


def _parse_rent(text: str) -> Optional[float]:
    try:
        rent = float(text.replace('$', '').replace(',', '').strip())
    except ValueError:
        return None
    return rent if rent > 0 else None


class ZoriDataStore:
    """Metro median rents keyed by region and state, loaded lazily from CSV."""

    def __init__(self, csv_path):
        self.csv_path = Path(csv_path)
        self._by_region_state: Optional[Dict[Tuple[str, str], ZoriMetro]] = None
        self._metros_by_state: Dict[str, List[ZoriMetro]] = {}

    @property
    def loaded(self) -> bool:
        return self._by_region_state is not None

    def load(self) -> None:
        """Read the CSV. Only the first call does any work."""
        if self.loaded:
            return

        self._by_region_state = {}
        self._metros_by_state = {}
        if not self.csv_path.exists():
            logger.warning("ZORI CSV file not found at %s, using empty data store", self.csv_path)
            return

        with open(self.csv_path, newline='', encoding='utf-8') as f:
            reader = csv.reader(f)
            next(reader, None)
            for row in reader:
                if len(row) < 3:
                    continue
                region_name, state_name = row[0].strip(), row[1].strip()
                median_rent = _parse_rent(row[2])
                if median_rent is None:
                    logger.warning("Skipping invalid median rent for %s, %s: %s", region_name, state_name, row[2])
                    continue
                metro = ZoriMetro(region_name, state_name, median_rent)
                self._by_region_state[(normalize_key(region_name), state_name)] = metro
                self._metros_by_state.setdefault(state_name, []).append(metro)

        for metros in self._metros_by_state.values():
            metros.sort(key=lambda m: m.median_rent, reverse=True)
        logger.debug("Loaded %d ZORI metros from %s", len(self._by_region_state), self.csv_path)

    def metros_for_state(self, state_name: str) -> List[ZoriMetro]:
        self.load()
        return list(self._metros_by_state.get(state_name, []))

    def metro_options_for_state(self, state_name: str) -> List[Dict[str, str]]:
        """Dropdown options, highest rent first, ending with the "not sure" option."""
        options = [{'label': m.region_name, 'value': m.region_name} for m in self.metros_for_state(state_name)]
        options.append({'label': OTHER_METRO_LABEL, 'value': OTHER_METRO_VALUE})
        return options

    def median_rent_for_region(self, region_name: str, state_name: str) -> Tuple[Optional[float], Optional[str]]:
        """Median rent and the matched region name.

        Tries an exact normalized match first, then a contains match in
        either direction, choosing the highest rent when several match.
        """
        self.load()
        normalized = normalize_key(region_name)
        exact = self._by_region_state.get((normalized, state_name))
        if exact is not None:
            return exact.median_rent, exact.region_name

        matches = [
            metro for metro in self._metros_by_state.get(state_name, [])
            if normalized in normalize_key(metro.region_name) or normalize_key(metro.region_name) in normalized
        ]
        if not normalized or not matches:
            return None, None
        best = max(matches, key=lambda m: m.median_rent)
        return best.median_rent, best.region_name


def calculate_market_rent_range(median_rent: float) -> MarketRentRange:
    """Market band around a metro median, buffered up and widened by tier."""
    for floor, tier, buffer_pct, width_pct in MARKET_TIERS:
        if median_rent >= floor:
            break
    buffered = median_rent * (1 + buffer_pct)
    return MarketRentRange(
        median_rent=median_rent,
        buffered=buffered,
        market_low=round_to_nearest_25(buffered * (1 - width_pct)),
        market_high=round_to_nearest_25(buffered * (1 + width_pct)),
        tier=tier,
        buffer_pct=buffer_pct,
        width_pct=width_pct,
    )


def compare_market_to_safe(market_low: float, market_high: float, safe_low: float, safe_high: float) -> str:
    """'above' when the market starts above the safe range, 'below' when it ends under it, else 'overlap'."""
    if market_low > safe_high:
        return 'above'
    if market_high < safe_low:
        return 'below'
    return 'overlap'
