"""Field and form validation for the registration form"""
from __future__ import annotations

import re

from .models import SCHEDULES, GradeLevel, SpotType

STUDENT_ID_PATTERN = re.compile(r'^\d{6,8}$')
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

GRADE_LEVELS = tuple(str(grade) for grade in GradeLevel)

FIELDS = ('fullName', 'studentId', 'email', 'phone', 'gradeLevel', 'spotType',
          'partnerName', 'partnerDays', 'terms')


def validate_student_id(student_id: str) -> bool:
    return STUDENT_ID_PATTERN.match(student_id.strip()) is not None


def validate_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email.strip()) is not None


def validate_field(name: str, value: str) -> bool:
    """Single-field check run on change/blur; drives the is-invalid marker.

    An empty email is not flagged here, only on submit. Fields without a rule
    are always valid.
    """
    value = value or ''
    match name:
        case 'fullName':
            return len(value.strip()) > 0
        case 'studentId':
            return validate_student_id(value)
        case 'email':
            return validate_email(value) or value.strip() == ''
        case 'spotType':
            return value != ''
        case 'gradeLevel':
            return value in GRADE_LEVELS
        case _:
            return True


def validate_form(form, spot_type: SpotType | None) -> tuple[list[str], set[str]]:
    """Validate a submitted form against the selection's spot type.

    Returns:
        tuple[list[str], set[str]]: The ordered error messages and the names of
            the fields to mark invalid
    """
    errors = []
    invalid = set()

    def fail(field_name: str, message: str):
        errors.append(message)
        invalid.add(field_name)

    full_name = form.get('fullName', '')
    student_id = form.get('studentId', '')
    email = form.get('email', '')

    if not full_name.strip():
        fail('fullName', 'Full Name is required')

    if not student_id.strip():
        fail('studentId', 'Student ID is required')
    elif not validate_student_id(student_id):
        fail('studentId', 'Student ID must be 6-8 digits')

    if not email.strip():
        fail('email', 'Email is required')
    elif not validate_email(email):
        fail('email', 'Please enter a valid email address')

    if spot_type is None:
        fail('spotType', 'Please select a parking spot type')

    match spot_type:
        case SpotType.SHARED:
            if not form.get('partnerName', '').strip():
                fail('partnerName', 'Partner name is required for shared spots')
            if form.get('partnerDays', '') not in SCHEDULES:
                fail('partnerDays', 'Partner days schedule is required for shared spots')
        case SpotType.SOLO | None:
            pass

    if form.get('gradeLevel', '') not in GRADE_LEVELS:
        fail('gradeLevel', 'Grade level is required')

    if not form.get('terms'):
        fail('terms', 'You must agree to the parking rules')

    return errors, invalid
