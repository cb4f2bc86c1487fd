import json
import os
import tempfile
import unittest

from parking_portal.app import DATA_DIR
from parking_portal.inventory import InventoryCache, load_admin_config, load_inventory, spot_stats

INVENTORY_PATH = os.path.join(DATA_DIR, 'parkingData.json')


class LoadInventoryTestCase(unittest.TestCase):
    def test_bundled_inventory(self):
        result = load_inventory(INVENTORY_PATH)
        self.assertTrue(result.ok)
        inventory = result.value
        self.assertEqual(inventory.lot_names(), ['Lot A', 'Lot B', 'Lot C'])
        for lot in inventory.lots.values():
            self.assertEqual(len(lot.spots), 10)

    def test_missing_file(self):
        result = load_inventory('/nonexistent/parkingData.json')
        self.assertFalse(result.ok)
        self.assertIsNone(result.value)
        self.assertEqual(result.error, 'Failed to load parking data. Please refresh the page.')

    def test_unparseable_file(self):
        with tempfile.NamedTemporaryFile('w', suffix='.json', delete=False) as resource:
            resource.write('{"lota": ')
        self.addCleanup(os.remove, resource.name)
        self.assertFalse(load_inventory(resource.name).ok)

    def test_stats(self):
        inventory = load_inventory(INVENTORY_PATH).value
        stats = spot_stats(inventory)
        self.assertEqual((stats.total, stats.available, stats.taken), (30, 24, 6))
        lot_stats = spot_stats(inventory, inventory.get_lot('Lot A'))
        self.assertEqual((lot_stats.total, lot_stats.taken), (10, 2))
        self.assertEqual(lot_stats.percent_available, 80)


class AdminConfigTestCase(unittest.TestCase):
    def _write(self, data):
        with tempfile.NamedTemporaryFile('w', suffix='.json', delete=False) as resource:
            json.dump(data, resource)
        self.addCleanup(os.remove, resource.name)
        return resource.name

    def test_password_is_read(self):
        result = load_admin_config(self._write({'adminPassword': 'secret'}))
        self.assertTrue(result.ok)
        self.assertEqual(result.value.admin_password, 'secret')

    def test_password_is_required(self):
        result = load_admin_config(self._write({'somethingElse': 1}))
        self.assertFalse(result.ok)
        self.assertEqual(result.error,
                         'Error loading system configuration. Please refresh the page.')


class InventoryCacheTestCase(unittest.TestCase):
    def test_edits_survive_until_reload(self):
        cache = InventoryCache(INVENTORY_PATH)
        spot = cache.get().value.lots['lota'].find_spot('A-2')
        spot.release()
        self.assertFalse(cache.get().value.lots['lota'].find_spot('A-2').is_taken)
        cache.load()
        self.assertTrue(cache.get().value.lots['lota'].find_spot('A-2').is_taken)

    def test_failed_load_is_retried(self):
        cache = InventoryCache('/nonexistent/parkingData.json')
        result = cache.get()
        self.assertFalse(result.ok)
        self.assertFalse(result.value)
        cache.path = INVENTORY_PATH
        self.assertTrue(cache.get().ok)
