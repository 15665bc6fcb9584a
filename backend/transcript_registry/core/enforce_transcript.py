"""Transcript Field Enforcement — stateless checks on issuance and update inputs.

Invariants:
    - All functions are PURE: no IO, no async, no state, no side effects
    - Return a violation dict on failure, None on success
    - validate_issuance_fields chains checks in a fixed order — first violation wins
    - Update inputs checked against a strict subset: GPA range, then course count

Design Decisions:
    - Student check exposed separately: issuance runs it BEFORE issuer authorization,
      while every other field check runs AFTER (ADR: failure precedence is user-visible)
    - Lengths are character counts (len of str), not encoded byte counts
"""

from collections.abc import Sequence

from transcript_registry.core.domain_types import (
    BURN_IDENTITY,
    CONTENT_HASH_LENGTH,
    MAX_COURSES,
    MAX_DEGREE_LENGTH,
    MAX_GPA,
    MAX_INSTITUTION_LENGTH,
    MAX_LOCATION_LENGTH,
    MAX_MAJOR_LENGTH,
    MIN_GPA,
    FailureKind,
)
from transcript_registry.core.records import IssuanceRequest
from transcript_registry.core.violations import violation


# --- Single-field checks ------------------------------------------------------

def check_student(student: str) -> dict | None:
    """Student must not be the burn/null sentinel identity."""
    if student == BURN_IDENTITY:
        return violation(
            FailureKind.INVALID_STUDENT,
            "Student identity cannot be the burn address.",
            field="student",
        )
    return None


def check_content_hash(content_hash: bytes) -> dict | None:
    if len(content_hash) != CONTENT_HASH_LENGTH:
        return violation(
            FailureKind.INVALID_HASH,
            f"Content hash must be exactly {CONTENT_HASH_LENGTH} bytes "
            f"(got {len(content_hash)}).",
            field="content_hash",
        )
    return None


def check_gpa(gpa: int) -> dict | None:
    if gpa < MIN_GPA or gpa > MAX_GPA:
        return violation(
            FailureKind.INVALID_GPA,
            f"GPA must be between {MIN_GPA} and {MAX_GPA} (got {gpa}).",
            field="gpa",
        )
    return None


def check_course_count(courses: Sequence[str]) -> dict | None:
    if len(courses) > MAX_COURSES:
        return violation(
            FailureKind.TOO_MANY_COURSES,
            f"At most {MAX_COURSES} courses allowed (got {len(courses)}).",
            field="courses",
        )
    return None


def check_degree(degree: str) -> dict | None:
    return _check_required_text(
        degree, MAX_DEGREE_LENGTH, FailureKind.INVALID_DEGREE, "degree",
    )


def check_major(major: str) -> dict | None:
    return _check_required_text(
        major, MAX_MAJOR_LENGTH, FailureKind.INVALID_MAJOR, "major",
    )


def check_institution(institution: str) -> dict | None:
    return _check_required_text(
        institution, MAX_INSTITUTION_LENGTH,
        FailureKind.INVALID_INSTITUTION, "institution",
    )


def check_graduation_date(graduation_date: int) -> dict | None:
    if graduation_date <= 0:
        return violation(
            FailureKind.INVALID_GRADUATION_DATE,
            "Graduation date must be a positive integer.",
            field="graduation_date",
        )
    return None


def check_credits(credits: int) -> dict | None:
    if credits < 0:
        return violation(
            FailureKind.INVALID_CREDITS,
            "Credits cannot be negative.",
            field="credits",
        )
    return None


def check_location(location: str) -> dict | None:
    """Location may be empty, but not longer than the limit."""
    if len(location) > MAX_LOCATION_LENGTH:
        return violation(
            FailureKind.INVALID_LOCATION,
            f"Location exceeds {MAX_LOCATION_LENGTH} characters.",
            field="location",
        )
    return None


# --- Composite validators -----------------------------------------------------

def validate_issuance_fields(request: IssuanceRequest) -> dict | None:
    """Chain every field check except the student check. Returns first violation or None."""
    return (
        check_content_hash(request.content_hash)
        or check_gpa(request.gpa)
        or check_course_count(request.courses)
        or check_degree(request.degree)
        or check_major(request.major)
        or check_institution(request.institution)
        or check_graduation_date(request.graduation_date)
        or check_credits(request.credits)
        or check_location(request.location)
    )


def validate_update_fields(gpa: int, courses: Sequence[str]) -> dict | None:
    """Update subset: GPA range, then course count."""
    return check_gpa(gpa) or check_course_count(courses)


# --- Helper -------------------------------------------------------------------

def _check_required_text(
    value: str, max_length: int, kind: FailureKind, field_name: str,
) -> dict | None:
    """Non-empty and at most max_length characters."""
    if not value or len(value) > max_length:
        return violation(
            kind,
            f"{field_name.capitalize()} must be 1-{max_length} characters.",
            field=field_name,
        )
    return None
