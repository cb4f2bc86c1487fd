"""Data model for lots, spots, selections, registrations and admin sessions.

Everything here serialises to the camelCase JSON shapes kept in the
key-value store and in the bundled inventory resource.
"""
from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum

BASE36_ALPHABET = string.digits + string.ascii_uppercase


class SpotStatus(StrEnum):
    AVAILABLE = 'available'
    TAKEN = 'taken'


class SpotType(StrEnum):
    SOLO = 'solo'
    SHARED = 'shared'


class SpotHalf(StrEnum):
    """The two independently assignable halves of a shared spot"""
    A = 'A'
    B = 'B'

    @property
    def schedule(self) -> str:
        """Full day-schedule label shown on the form and confirmation"""
        match self:
            case SpotHalf.A:
                return 'Monday/Wednesday/Friday'
            case SpotHalf.B:
                return 'Tuesday/Thursday'

    @property
    def short_schedule(self) -> str:
        match self:
            case SpotHalf.A:
                return 'Mon/Wed/Fri'
            case SpotHalf.B:
                return 'Tue/Thu'


SCHEDULES = tuple(half.schedule for half in SpotHalf)


class GradeLevel(StrEnum):
    FRESHMAN = '9'
    SOPHOMORE = '10'
    JUNIOR = '11'
    SENIOR = '12'

    @property
    def label(self) -> str:
        return f'{self.value}th Grade'


def lot_key(lot_name: str) -> str:
    """'Lot A' -> 'lota'"""
    return lot_name.lower().replace(' ', '')


def to_base36(number: int) -> str:
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return ''.join(reversed(digits))


def now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def generate_reference_id() -> str:
    """REF-<base36 ms timestamp>-<5 random base36 chars>, uppercase"""
    stamp = to_base36(int(time.time() * 1000))
    suffix = ''.join(random.choices(BASE36_ALPHABET, k=5))
    return f'REF-{stamp}-{suffix}'


def generate_session_id() -> str:
    suffix = ''.join(random.choices(BASE36_ALPHABET.lower(), k=9))
    return f'SESSION-{int(time.time() * 1000)}-{suffix}'


@dataclass
class Spot:
    """A single parking spot within a lot"""
    id: str
    status: SpotStatus
    type: SpotType
    assigned_to: str | None = None

    @property
    def is_taken(self) -> bool:
        match self.status:
            case SpotStatus.TAKEN:
                return True
            case SpotStatus.AVAILABLE:
                return False

    def release(self):
        """Mark the spot available and drop its assignment"""
        self.status = SpotStatus.AVAILABLE
        self.assigned_to = None

    @classmethod
    def from_dict(cls, data: dict) -> Spot:
        return cls(id=str(data['id']),
                   status=SpotStatus(data.get('status', SpotStatus.AVAILABLE)),
                   type=SpotType(data.get('type', SpotType.SOLO)),
                   assigned_to=data.get('assignedTo'))

    def to_dict(self) -> dict:
        return {'id': self.id, 'status': str(self.status), 'type': str(self.type),
                'assignedTo': self.assigned_to}


@dataclass
class Lot:
    """A named, ordered collection of spots"""
    key: str
    name: str
    spots: list[Spot] = field(default_factory=list)

    def find_spot(self, spot_id: str) -> Spot | None:
        for spot in self.spots:
            if spot.id == spot_id:
                return spot
        return None

    @classmethod
    def from_dict(cls, key: str, data: dict) -> Lot:
        return cls(key=key, name=data['name'],
                   spots=[Spot.from_dict(spot) for spot in data.get('spots', [])])

    def to_dict(self) -> dict:
        return {'name': self.name, 'spots': [spot.to_dict() for spot in self.spots]}


@dataclass
class Inventory:
    """All lots, keyed by their lowercase no-space key, in resource order"""
    lots: dict[str, Lot] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.lots)

    def get_lot(self, name: str) -> Lot | None:
        """Look a lot up by display name ('Lot A') or key ('lota')"""
        return self.lots.get(lot_key(name))

    def lot_names(self) -> list[str]:
        return [lot.name for lot in self.lots.values()]

    def all_spots(self) -> list[tuple[Lot, Spot]]:
        return [(lot, spot) for lot in self.lots.values() for spot in lot.spots]

    def release_all(self):
        for _, spot in self.all_spots():
            spot.release()

    @classmethod
    def from_dict(cls, data: dict) -> Inventory:
        return cls(lots={key: Lot.from_dict(key, value) for key, value in data.items()})

    def to_dict(self) -> dict:
        return {key: lot.to_dict() for key, lot in self.lots.items()}


@dataclass
class Selection:
    """A student's chosen, not yet submitted spot"""
    id: str
    lot: str
    type: SpotType
    half: SpotHalf | None = None

    @property
    def schedule(self) -> str | None:
        match self.type:
            case SpotType.SHARED if self.half is not None:
                return self.half.schedule
            case _:
                return None

    def label(self, short: bool = False) -> str:
        text = f'{self.lot} - Spot {self.id}'
        if self.schedule is None:
            return text
        if short:
            return f'{text} ({self.half} - {self.half.short_schedule})'
        return f'{text} ({self.schedule})'

    @classmethod
    def from_dict(cls, data: dict) -> Selection:
        half = data.get('half')
        return cls(id=str(data['id']), lot=data['lot'], type=SpotType(data['type']),
                   half=SpotHalf(half) if half else None)

    def to_dict(self) -> dict:
        return {'id': self.id, 'lot': self.lot, 'type': str(self.type),
                'half': str(self.half) if self.half else None}


@dataclass
class Registration:
    """A submitted student parking assignment"""
    full_name: str
    student_id: str
    email: str
    phone: str
    spot_type: SpotType
    grade_level: str
    parking_lot: str
    parking_spot: str
    submitted_at: str
    reference_id: str
    parking_partner: str | None = None
    partner_days: str | None = None
    user_schedule: str | None = None

    @property
    def is_shared(self) -> bool:
        match self.spot_type:
            case SpotType.SHARED:
                return True
            case SpotType.SOLO:
                return False

    @classmethod
    def create(cls, fields: dict, selection: Selection) -> Registration:
        """Merge validated form fields with the selection, stamping time and reference"""
        registration = cls(full_name=fields['fullName'].strip(),
                           student_id=fields['studentId'].strip(),
                           email=fields['email'].strip(),
                           phone=fields.get('phone', '').strip(),
                           spot_type=selection.type,
                           grade_level=fields['gradeLevel'],
                           parking_lot=selection.lot,
                           parking_spot=selection.id,
                           submitted_at=now_iso(),
                           reference_id=generate_reference_id())
        if registration.is_shared:
            registration.parking_partner = fields.get('partnerName', '').strip()
            registration.partner_days = fields.get('partnerDays', '')
            registration.user_schedule = selection.schedule
        return registration

    @classmethod
    def from_dict(cls, data: dict) -> Registration:
        return cls(full_name=data.get('fullName', ''),
                   student_id=data.get('studentId', ''),
                   email=data.get('email', ''),
                   phone=data.get('phone', ''),
                   spot_type=SpotType(str(data.get('spotType') or SpotType.SOLO).lower()),
                   grade_level=data.get('gradeLevel', ''),
                   parking_lot=data.get('parkingLot', ''),
                   parking_spot=data.get('parkingSpot', ''),
                   submitted_at=data.get('submittedAt', ''),
                   reference_id=data.get('referenceId', ''),
                   parking_partner=data.get('parkingPartner'),
                   partner_days=data.get('partnerDays'),
                   user_schedule=data.get('userSchedule'))

    def to_dict(self) -> dict:
        data = {
            'fullName': self.full_name,
            'studentId': self.student_id,
            'email': self.email,
            'phone': self.phone,
            'spotType': str(self.spot_type),
            'gradeLevel': self.grade_level,
            'parkingLot': self.parking_lot,
            'parkingSpot': self.parking_spot,
        }
        if self.is_shared:
            data['parkingPartner'] = self.parking_partner
            data['partnerDays'] = self.partner_days
            data['userSchedule'] = self.user_schedule
        data['submittedAt'] = self.submitted_at
        data['referenceId'] = self.reference_id
        return data

    def summary(self) -> str:
        """Plain-text summary for the clipboard"""
        lines = [
            f'Name: {self.full_name}',
            f'ID: {self.student_id}',
            f'Email: {self.email}',
            f'Phone: {self.phone or "N/A"}',
            f'Parking Spot: {self.parking_lot}-{self.parking_spot}',
            f'Spot Type: {self.spot_type}',
            f'Grade: {self.grade_level}',
        ]
        if self.is_shared:
            lines.append(f'Partner: {self.parking_partner}')
            lines.append(f'Your Schedule: {self.user_schedule}')
        lines.append(f'Reference: {self.reference_id}')
        return '\n'.join(lines)


@dataclass
class AdminSession:
    """Record written on successful admin login"""
    authenticated: bool
    login_time: str
    session_id: str

    @classmethod
    def start(cls) -> AdminSession:
        return cls(authenticated=True, login_time=now_iso(), session_id=generate_session_id())

    @classmethod
    def from_dict(cls, data) -> AdminSession | None:
        """Returns None unless the record has an authenticated flag and a login time"""
        if not isinstance(data, dict):
            return None
        if not data.get('authenticated') or not data.get('loginTime'):
            return None
        return cls(authenticated=True, login_time=data['loginTime'],
                   session_id=data.get('sessionId', ''))

    def to_dict(self) -> dict:
        return {'authenticated': self.authenticated, 'loginTime': self.login_time,
                'sessionId': self.session_id}
