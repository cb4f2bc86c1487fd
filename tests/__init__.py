import json
import os
import shutil
import sqlite3
import tempfile
import unittest

from parking_portal.app import DATA_DIR, app

ADMIN_PASSWORD = 'letmein'

VALID_FORM = {
    'fullName': 'Jane Smith',
    'studentId': '654321',
    'email': 'jane.smith@example.com',
    'phone': '555-123-4567',
    'gradeLevel': '11',
    'terms': 'yes',
}


class PortalTestCase(unittest.TestCase):
    """Runs the app against a temporary database and resource copies"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.inventory_path = os.path.join(self.tmp.name, 'parkingData.json')
        shutil.copy(os.path.join(DATA_DIR, 'parkingData.json'), self.inventory_path)
        self.config_path = os.path.join(self.tmp.name, 'config.json')
        with open(self.config_path, 'w', encoding='utf-8') as config:
            json.dump({'adminPassword': ADMIN_PASSWORD}, config)
        self.db_path = os.path.join(self.tmp.name, 'parking.db')

        self._saved_config = {key: app.config.get(key) for key in
                              ('TESTING', 'DB_PATH', 'INVENTORY_PATH', 'ADMIN_CONFIG_PATH')}
        app.config.update(TESTING=True, DB_PATH=self.db_path,
                          INVENTORY_PATH=self.inventory_path,
                          ADMIN_CONFIG_PATH=self.config_path)
        app.extensions.pop('parking_inventory', None)
        self.client = app.test_client()

    def tearDown(self):
        app.config.update(self._saved_config)
        app.extensions.pop('parking_inventory', None)
        self.tmp.cleanup()

    # Helpers

    def select(self, lot, spot_id, half=None):
        data = {'lot': lot, 'spot_id': spot_id}
        if half is not None:
            data['half'] = half
        return self.client.post('/parking/select', data=data)

    def submit(self, **overrides):
        data = dict(VALID_FORM)
        data.update(overrides)
        return self.client.post('/register', data=data)

    def login(self, password=ADMIN_PASSWORD):
        return self.client.post('/admin/login', data={'password': password})

    def stored_values(self, key):
        """All raw values stored under a key, across namespaces"""
        if not os.path.exists(self.db_path):
            return []
        conn = sqlite3.connect(self.db_path)
        try:
            rows = conn.execute('SELECT value FROM kv WHERE key=?', (key,)).fetchall()
        finally:
            conn.close()
        return [row[0] for row in rows]

    def stored_registrations(self):
        values = self.stored_values('parkingSubmissions')
        if not values:
            return []
        return json.loads(values[0])
