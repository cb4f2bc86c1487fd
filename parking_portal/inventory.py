"""Loading of the bundled inventory and admin config resources"""
from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import Generic, TypeVar

from .models import Inventory, Lot

T = TypeVar('T')


@dataclass
class LoadResult(Generic[T]):
    """Either a loaded value or a human-readable error"""
    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class AdminConfig:
    admin_password: str


@dataclass
class SpotStats:
    total: int = 0
    available: int = 0
    taken: int = 0

    @property
    def percent_available(self) -> int:
        if self.total == 0:
            return 0
        return round(self.available / self.total * 100)


def _read_json(path: str):
    with open(path, 'r', encoding='utf-8') as resource:
        return json.load(resource)


def load_inventory(path: str) -> LoadResult[Inventory]:
    """Parse the lots/spots resource; errors are reported, never raised"""
    try:
        inventory = Inventory.from_dict(_read_json(path))
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        getLogger(__name__).error('Error loading parking data from %s: %s', path, e)
        return LoadResult(error='Failed to load parking data. Please refresh the page.')
    getLogger(__name__).info('Parking data loaded: %i lots, %i spots',
                             len(inventory.lots), len(inventory.all_spots()))
    return LoadResult(value=inventory)


def load_admin_config(path: str) -> LoadResult[AdminConfig]:
    """Parse the admin config resource, which must carry adminPassword"""
    try:
        data = _read_json(path)
        config = AdminConfig(admin_password=str(data['adminPassword']))
    except (OSError, ValueError, KeyError, TypeError) as e:
        getLogger(__name__).error('Error loading config from %s: %s', path, e)
        return LoadResult(error='Error loading system configuration. Please refresh the page.')
    return LoadResult(value=config)


def spot_stats(inventory: Inventory, lot: Lot | None = None) -> SpotStats:
    """Count spots across all lots, or only within the given lot"""
    stats = SpotStats()
    spots = lot.spots if lot is not None else [spot for _, spot in inventory.all_spots()]
    for spot in spots:
        stats.total += 1
        if spot.is_taken:
            stats.taken += 1
        else:
            stats.available += 1
    return stats


class InventoryCache:
    """Process-wide in-memory inventory; edits here are never written back"""

    def __init__(self, path: str):
        self.path = path
        self._inventory: Inventory | None = None

    def load(self) -> LoadResult[Inventory]:
        """(Re)load from the resource, replacing any in-memory edits.

        A failed load leaves an empty inventory in the result and nothing cached,
        so the next page load tries the resource again.
        """
        result = load_inventory(self.path)
        if not result.ok:
            self._inventory = None
            return LoadResult(value=Inventory(), error=result.error)
        self._inventory = result.value
        return result

    def get(self) -> LoadResult[Inventory]:
        """The cached inventory, loading it on first use"""
        if self._inventory is None:
            return self.load()
        return LoadResult(value=self._inventory)
