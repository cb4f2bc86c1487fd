"""Application state: the only place persisted keys are read and written.

A ``ParkingState`` is built per request from the caller's client store (the
stand-in for that browser's local storage), the shared store holding the
registration list, and the process-wide inventory cache.
"""
from __future__ import annotations

import json
from enum import StrEnum
from logging import getLogger

from .inventory import InventoryCache, LoadResult
from .models import AdminSession, Inventory, Registration, Selection, now_iso
from .storage import KeyValueStore


class StorageKey(StrEnum):
    SELECTED_SPOT = 'selectedParkingSpot'
    SELECTED_SPOT_TIME = 'selectedParkingSpotTime'
    CURRENT_REGISTRATION = 'currentRegistration'
    SUBMISSIONS = 'parkingSubmissions'
    ADMIN_SESSION = 'adminSession'
    THEME = 'mhs_theme_mode'


class StoredValueError(ValueError):
    """A key holds a value that could not be decoded"""


class ParkingState:
    """Mediates all reads and writes of selection, registrations and admin session"""

    def __init__(self, client_store: KeyValueStore, shared_store: KeyValueStore,
                 inventory_cache: InventoryCache):
        self.client_store = client_store
        self.shared_store = shared_store
        self.inventory_cache = inventory_cache

    # Raw JSON helpers

    def _read(self, store: KeyValueStore, key: StorageKey):
        """Decode a stored JSON value, raising StoredValueError when corrupt"""
        raw = store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            getLogger(__name__).error('Error parsing stored %s: %s', key, e)
            raise StoredValueError(f'Stored {key} is corrupt') from e

    def _write(self, store: KeyValueStore, key: StorageKey, value):
        store.set(key, json.dumps(value))

    # Inventory

    def inventory(self) -> LoadResult[Inventory]:
        return self.inventory_cache.get()

    def reload_inventory(self) -> LoadResult[Inventory]:
        return self.inventory_cache.load()

    # Selection

    def get_selection(self) -> Selection | None:
        """Restore the selection; a corrupt record raises StoredValueError"""
        data = self._read(self.client_store, StorageKey.SELECTED_SPOT)
        if data is None:
            return None
        try:
            if not isinstance(data, dict):
                raise TypeError(f'expected an object, got {type(data).__name__}')
            return Selection.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            getLogger(__name__).error('Error decoding stored selection: %s', e)
            raise StoredValueError('Stored selection is malformed') from e

    def restore_selection(self) -> Selection | None:
        """Like get_selection, but drops a corrupt record and treats it as absent"""
        try:
            return self.get_selection()
        except StoredValueError:
            self.clear_selection()
            return None

    def set_selection(self, selection: Selection):
        self._write(self.client_store, StorageKey.SELECTED_SPOT, selection.to_dict())
        self._write(self.client_store, StorageKey.SELECTED_SPOT_TIME, now_iso())
        getLogger(__name__).info('Spot selected: %s', selection.label())

    def clear_selection(self):
        self.client_store.remove(StorageKey.SELECTED_SPOT)
        self.client_store.remove(StorageKey.SELECTED_SPOT_TIME)

    # Registrations

    def get_current_registration(self) -> Registration | None:
        try:
            data = self._read(self.client_store, StorageKey.CURRENT_REGISTRATION)
        except StoredValueError:
            return None
        if not isinstance(data, dict):
            return None
        try:
            return Registration.from_dict(data)
        except ValueError as e:
            getLogger(__name__).error('Error decoding current registration: %s', e)
            return None

    def _load_entries(self) -> list:
        """The stored list exactly as decoded, empty when absent or corrupt"""
        try:
            data = self._read(self.shared_store, StorageKey.SUBMISSIONS)
        except StoredValueError:
            return []
        if not isinstance(data, list):
            return []
        return data

    def _save_entries(self, entries: list):
        self._write(self.shared_store, StorageKey.SUBMISSIONS, entries)

    @staticmethod
    def _parse_entry(entry) -> Registration | None:
        try:
            return Registration.from_dict(entry)
        except (AttributeError, TypeError, ValueError) as e:
            getLogger(__name__).error('Skipping unreadable registration %r: %s', entry, e)
            return None

    def indexed_registrations(self) -> list[tuple[int, Registration]]:
        """Readable registrations paired with their position in the stored list"""
        pairs = []
        for index, entry in enumerate(self._load_entries()):
            registration = self._parse_entry(entry)
            if registration is not None:
                pairs.append((index, registration))
        return pairs

    def load_registrations(self) -> list[Registration]:
        """The readable registrations; unreadable entries stay stored but are skipped"""
        return [registration for _, registration in self.indexed_registrations()]

    def get_registration(self, index: int) -> Registration | None:
        """The registration stored at index, None when out of range or unreadable"""
        entries = self._load_entries()
        if not 0 <= index < len(entries):
            return None
        return self._parse_entry(entries[index])

    def export_entries(self) -> list:
        return self._load_entries()

    def submit_registration(self, registration: Registration):
        """Store as current registration, append to the list and consume the selection.

        Duplicate claims on the same spot are logged but not rejected. Existing
        entries are written back untouched.
        """
        self._write(self.client_store, StorageKey.CURRENT_REGISTRATION, registration.to_dict())
        entries = self._load_entries()
        for existing in filter(None, map(self._parse_entry, entries)):
            if existing.parking_spot == registration.parking_spot \
                    and existing.parking_lot == registration.parking_lot \
                    and existing.user_schedule == registration.user_schedule:
                getLogger(__name__).warning(
                    'Spot %s %s already claimed by %s, accepting %s anyway',
                    registration.parking_lot, registration.parking_spot,
                    existing.reference_id, registration.reference_id)
        entries.append(registration.to_dict())
        self._save_entries(entries)
        self.clear_selection()
        getLogger(__name__).info('Registration %s saved for %s', registration.reference_id,
                                 registration.parking_spot)

    def remove_registration(self, index: int) -> Registration:
        """Splice one registration out of the stored list.

        Raises:
            IndexError: Raised when no readable registration is stored at index
        """
        entries = self._load_entries()
        if not 0 <= index < len(entries):
            raise IndexError(index)
        removed = self._parse_entry(entries[index])
        if removed is None:
            raise IndexError(index)
        del entries[index]
        self._save_entries(entries)
        getLogger(__name__).info('Registration %s removed', removed.reference_id)
        return removed

    def clear_spot(self, lot_key: str, spot_id: str) -> list[Registration]:
        """Release a spot in memory and drop the registrations pointing at it.

        Raises:
            KeyError: Raised when the lot or spot does not exist
        """
        lot = self.inventory().value.lots.get(lot_key)
        spot = lot.find_spot(spot_id) if lot is not None else None
        if spot is None:
            raise KeyError(f'{lot_key}/{spot_id}')
        spot.release()

        kept, removed = [], []
        for entry in self._load_entries():
            registration = self._parse_entry(entry)
            if registration is not None and registration.parking_spot == spot_id:
                removed.append(registration)
            else:
                kept.append(entry)
        if removed:
            self._save_entries(kept)
        getLogger(__name__).info('Spot %s cleared, %i registration(s) removed',
                                 spot_id, len(removed))
        return removed

    def reset_all(self):
        """Release every spot and delete all registrations"""
        self.inventory().value.release_all()
        self.shared_store.remove(StorageKey.SUBMISSIONS)
        self.client_store.purge(StorageKey.CURRENT_REGISTRATION)
        getLogger(__name__).warning('All parking data reset')

    # Admin session

    def get_admin_session(self) -> AdminSession | None:
        """The admin session when structurally valid; stale records are removed"""
        try:
            session = AdminSession.from_dict(
                self._read(self.client_store, StorageKey.ADMIN_SESSION))
        except StoredValueError:
            session = None
        if session is None:
            self.client_store.remove(StorageKey.ADMIN_SESSION)
        return session

    def start_admin_session(self) -> AdminSession:
        session = AdminSession.start()
        self._write(self.client_store, StorageKey.ADMIN_SESSION, session.to_dict())
        getLogger(__name__).info('Admin session %s started', session.session_id)
        return session

    def end_admin_session(self):
        self.client_store.remove(StorageKey.ADMIN_SESSION)
        getLogger(__name__).info('Admin session cleared')
