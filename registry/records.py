# registry/records.py
"""
Typed records for registrations and lands, mapped from ORM rows.

The JSON endpoints and map markers work with these instead of raw model
instances or value dicts.
"""
from dataclasses import dataclass, asdict
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class RegistrationRecord:
    id: int
    applicant_id: int
    title_deed_number: str
    land_size: Decimal
    land_use: str
    location_name: str
    latitude: Decimal
    longitude: Decimal
    district: str
    boundaries: str
    document: Optional[str]
    status: str
    submitted_at: datetime
    reviewed_at: Optional[datetime]
    reviewed_by_id: Optional[int]
    admin_notes: str

    @classmethod
    def from_model(cls, registration):
        return cls(
            id=registration.pk,
            applicant_id=registration.applicant_id,
            title_deed_number=registration.title_deed_number,
            land_size=registration.land_size,
            land_use=registration.land_use,
            location_name=registration.location_name,
            latitude=registration.latitude,
            longitude=registration.longitude,
            district=registration.district,
            boundaries=registration.boundaries,
            document=registration.document.name if registration.document else None,
            status=registration.status,
            submitted_at=registration.submitted_at,
            reviewed_at=registration.reviewed_at,
            reviewed_by_id=registration.reviewed_by_id,
            admin_notes=registration.admin_notes,
        )


@dataclass(frozen=True)
class LandRecord:
    id: int
    owner_id: int
    owner_name: str
    title_deed_number: str
    land_size: Decimal
    land_use: str
    location_name: str
    latitude: Decimal
    longitude: Decimal
    district: str
    boundaries: str
    status: str

    @classmethod
    def from_model(cls, land):
        return cls(
            id=land.pk,
            owner_id=land.owner_id,
            owner_name=land.owner_name,
            title_deed_number=land.title_deed_number,
            land_size=land.land_size,
            land_use=land.land_use,
            location_name=land.location_name,
            latitude=land.latitude,
            longitude=land.longitude,
            district=land.district,
            boundaries=land.boundaries,
            status=land.status,
        )


def to_json_dict(record):
    """asdict() with Decimal and datetime values made JSON-safe."""
    data = asdict(record)
    for key, value in data.items():
        if isinstance(value, Decimal):
            data[key] = str(value)
        elif isinstance(value, datetime):
            data[key] = value.isoformat()
    return data
