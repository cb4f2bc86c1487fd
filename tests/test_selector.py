import json

from tests import PortalTestCase


class SpotSelectorTestCase(PortalTestCase):
    def stored_selection(self):
        values = self.stored_values('selectedParkingSpot')
        return json.loads(values[0]) if values else None

    def test_default_lot_is_rendered(self):
        res = self.client.get('/')
        self.assertEqual(res.status_code, 200)
        body = res.get_data(as_text=True)
        self.assertIn('id="spot-A-1"', body)
        self.assertNotIn('id="spot-B-1"', body)
        self.assertIn('Lot A: 8/10 available (80%)', body)
        self.assertIn('id="continueBtn" disabled', body)

    def test_select_solo_spot(self):
        res = self.select('Lot A', 'A-5')
        self.assertEqual(res.status_code, 302)
        self.assertEqual(self.stored_selection(),
                         {'id': 'A-5', 'lot': 'Lot A', 'type': 'solo', 'half': None})
        body = self.client.get('/', query_string={'lot': 'Lot A'}).get_data(as_text=True)
        self.assertIn('Lot A - Spot A-5', body)
        self.assertIn('id="continueBtn" href="/register"', body)

    def test_select_shared_half(self):
        self.select('Lot B', 'B-8', half='B')
        self.assertEqual(self.stored_selection(),
                         {'id': 'B-8', 'lot': 'Lot B', 'type': 'shared', 'half': 'B'})
        body = self.client.get('/', query_string={'lot': 'Lot B'}).get_data(as_text=True)
        self.assertIn('Lot B - Spot B-8 (B - Tue/Thu)', body)

    def test_shared_spot_needs_a_half(self):
        self.select('Lot B', 'B-8')
        self.assertIsNone(self.stored_selection())

    def test_solo_spot_ignores_half(self):
        self.select('Lot A', 'A-5', half='A')
        self.assertIsNone(self.stored_selection()['half'])

    def test_taken_spot_is_inert(self):
        res = self.select('Lot A', 'A-2')
        self.assertEqual(res.status_code, 302)
        self.assertIsNone(self.stored_selection())
        body = self.client.get('/').get_data(as_text=True)
        self.assertIn('Spot A-2 is already taken', body)

    def test_unknown_spot(self):
        self.select('Lot A', 'Z-9')
        self.assertIsNone(self.stored_selection())

    def test_new_selection_replaces_old(self):
        self.select('Lot A', 'A-5')
        self.select('Lot C', 'C-3')
        self.assertEqual(self.stored_selection()['id'], 'C-3')
        self.assertEqual(len(self.stored_values('selectedParkingSpot')), 1)

    def test_switching_lots_keeps_selection(self):
        self.select('Lot A', 'A-5')
        body = self.client.get('/', query_string={'lot': 'Lot B'}).get_data(as_text=True)
        self.assertIn('Lot A - Spot A-5', body)
        self.assertNotIn('selected" id="spot-', body)
        body = self.client.get('/', query_string={'lot': 'Lot A'}).get_data(as_text=True)
        self.assertIn('solo selected" id="spot-A-5"', body)

    def test_clear_selection(self):
        self.select('Lot A', 'A-5')
        self.client.post('/parking/clear', data={'lot': 'Lot A'})
        self.assertIsNone(self.stored_selection())
        self.assertEqual(self.stored_values('selectedParkingSpotTime'), [])

    def test_unknown_lot_falls_back(self):
        body = self.client.get('/', query_string={'lot': 'Lot Z'}).get_data(as_text=True)
        self.assertIn('Lot not found: Lot Z', body)
        self.assertIn('id="spot-A-1"', body)

    def test_inventory_load_failure(self):
        with open(self.inventory_path, 'w', encoding='utf-8') as resource:
            resource.write('not json')
        res = self.client.get('/')
        self.assertEqual(res.status_code, 200)
        self.assertIn('Failed to load parking data', res.get_data(as_text=True))

    def test_selections_are_per_client(self):
        self.select('Lot A', 'A-5')
        other = self.client.application.test_client()
        body = other.get('/').get_data(as_text=True)
        self.assertIn('id="continueBtn" disabled', body)
