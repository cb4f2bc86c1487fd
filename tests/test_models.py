import re
import unittest

from parking_portal.models import (AdminSession, Inventory, Registration, Selection, SpotHalf,
                                   SpotStatus, SpotType, generate_reference_id,
                                   generate_session_id, lot_key, to_base36)
from tests import VALID_FORM

REFERENCE_PATTERN = re.compile(r'^REF-[0-9A-Z]+-[0-9A-Z]{5}$')


class ScheduleTestCase(unittest.TestCase):
    def test_half_schedules(self):
        self.assertEqual(SpotHalf.A.schedule, 'Monday/Wednesday/Friday')
        self.assertEqual(SpotHalf.B.schedule, 'Tuesday/Thursday')
        self.assertEqual(SpotHalf.A.short_schedule, 'Mon/Wed/Fri')

    def test_shared_selection_schedule(self):
        selection = Selection('A-8', 'Lot A', SpotType.SHARED, SpotHalf.B)
        self.assertEqual(selection.schedule, 'Tuesday/Thursday')
        self.assertEqual(selection.label(), 'Lot A - Spot A-8 (Tuesday/Thursday)')
        self.assertEqual(selection.label(short=True), 'Lot A - Spot A-8 (B - Tue/Thu)')

    def test_solo_selection_has_no_schedule(self):
        selection = Selection('A-5', 'Lot A', SpotType.SOLO)
        self.assertIsNone(selection.schedule)
        self.assertEqual(selection.label(), 'Lot A - Spot A-5')


class IdentifierTestCase(unittest.TestCase):
    def test_reference_id_format(self):
        self.assertRegex(generate_reference_id(), REFERENCE_PATTERN)

    def test_reference_ids_are_distinct(self):
        # Ids minted within the same millisecond differ only by the 36**5 suffix
        references = {generate_reference_id() for _ in range(1000)}
        self.assertGreaterEqual(len(references), 998)

    def test_session_id_format(self):
        self.assertRegex(generate_session_id(), r'^SESSION-\d+-[0-9a-z]{9}$')

    def test_base36(self):
        self.assertEqual(to_base36(0), '0')
        self.assertEqual(to_base36(35), 'Z')
        self.assertEqual(to_base36(36), '10')

    def test_lot_key(self):
        self.assertEqual(lot_key('Lot A'), 'lota')


class RegistrationTestCase(unittest.TestCase):
    def test_solo_registration_merges_selection(self):
        selection = Selection('A-5', 'Lot A', SpotType.SOLO)
        registration = Registration.create(dict(VALID_FORM, partnerName='ignored'), selection)
        data = registration.to_dict()
        self.assertEqual(data['parkingLot'], 'Lot A')
        self.assertEqual(data['parkingSpot'], 'A-5')
        self.assertEqual(data['spotType'], 'solo')
        self.assertEqual(data['fullName'], 'Jane Smith')
        self.assertNotIn('parkingPartner', data)
        self.assertRegex(data['referenceId'], REFERENCE_PATTERN)
        self.assertTrue(data['submittedAt'].endswith('Z'))

    def test_shared_registration_carries_schedule(self):
        selection = Selection('B-9', 'Lot B', SpotType.SHARED, SpotHalf.A)
        form = dict(VALID_FORM, partnerName=' Sam Lee ', partnerDays='Tuesday/Thursday')
        data = Registration.create(form, selection).to_dict()
        self.assertEqual(data['spotType'], 'shared')
        self.assertEqual(data['parkingPartner'], 'Sam Lee')
        self.assertEqual(data['partnerDays'], 'Tuesday/Thursday')
        self.assertEqual(data['userSchedule'], 'Monday/Wednesday/Friday')

    def test_legacy_capitalised_spot_type(self):
        registration = Registration.from_dict({'fullName': 'Old Entry', 'spotType': 'Shared'})
        self.assertTrue(registration.is_shared)

    def test_summary(self):
        selection = Selection('A-5', 'Lot A', SpotType.SOLO)
        registration = Registration.create(dict(VALID_FORM, phone=''), selection)
        summary = registration.summary()
        self.assertIn('Name: Jane Smith', summary)
        self.assertIn('Phone: N/A', summary)
        self.assertIn('Parking Spot: Lot A-A-5', summary)
        self.assertTrue(summary.endswith(f'Reference: {registration.reference_id}'))


class AdminSessionTestCase(unittest.TestCase):
    def test_valid_record(self):
        session = AdminSession.from_dict({'authenticated': True, 'loginTime': '2025-01-01T00:00:00Z',
                                          'sessionId': 'SESSION-1-abc'})
        self.assertIsNotNone(session)

    def test_invalid_records(self):
        for data in (None, [], {'authenticated': True}, {'loginTime': 'x'},
                     {'authenticated': False, 'loginTime': 'x'}):
            self.assertIsNone(AdminSession.from_dict(data), data)

    def test_start_round_trips(self):
        session = AdminSession.start()
        self.assertEqual(AdminSession.from_dict(session.to_dict()), session)


class InventoryModelTestCase(unittest.TestCase):
    def test_lookup_and_release(self):
        inventory = Inventory.from_dict({'lota': {'name': 'Lot A', 'spots': [
            {'id': 'A-1', 'status': 'taken', 'type': 'solo', 'assignedTo': 'Someone'},
            {'id': 'A-2', 'status': 'available', 'type': 'shared', 'assignedTo': None},
        ]}})
        lot = inventory.get_lot('Lot A')
        self.assertIs(lot, inventory.get_lot('lota'))
        self.assertEqual(lot.find_spot('A-2').type, SpotType.SHARED)
        self.assertIsNone(lot.find_spot('A-3'))
        inventory.release_all()
        spot = lot.find_spot('A-1')
        self.assertEqual(spot.status, SpotStatus.AVAILABLE)
        self.assertIsNone(spot.assigned_to)
        self.assertEqual(inventory.to_dict()['lota']['spots'][0]['status'], 'available')
