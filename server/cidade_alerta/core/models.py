"""Cidade Alerta server: core internal data models.

These are plain dataclasses with no framework dependencies.
Store documents are converted to/from these at the boundary.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from cidade_alerta.core.errors import InvalidDocumentError


class Severity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Category(str, Enum):
    TRAFFIC = "TRAFFIC"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    SECURITY = "SECURITY"
    ENVIRONMENT = "ENVIRONMENT"
    PUBLIC_LIGHTING = "PUBLIC_LIGHTING"
    OTHERS = "OTHERS"


class Status(str, Enum):
    REPORTED = "REPORTED"
    IN_REVIEW = "IN_REVIEW"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


RESOLVED_STATUSES = frozenset({Status.RESOLVED, Status.CLOSED})


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Location:
    """A report's location as stored. Components may be None when the
    source document carried something that is not a number."""
    latitude: float | None
    longitude: float | None
    address: str | None = None


@dataclass(frozen=True)
class Photo:
    url: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class Comment:
    id: str
    text: str
    user_id: str
    user_name: str | None = None
    is_official: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class Report:
    id: str
    location: Location
    severity: Severity
    category: Category
    status: Status = Status.REPORTED
    title: str = ""
    description: str = ""
    reported_by: str = ""
    reporter_name: str | None = None
    upvotes: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    assigned_to: str | None = None
    comments: tuple[Comment, ...] = ()
    photos: tuple[Photo, ...] = ()


@dataclass(frozen=True)
class DistanceAnnotatedReport:
    report: Report
    distance_m: float


@dataclass(frozen=True)
class Marker:
    """A bucket holding exactly one report, drawn at its exact position."""
    report: Report

    @property
    def latitude(self) -> float:
        return self.report.location.latitude

    @property
    def longitude(self) -> float:
        return self.report.location.longitude

    @property
    def count(self) -> int:
        return 1


@dataclass
class Cluster:
    """A bucket holding several reports, drawn at the rounded bucket center."""
    key: tuple[int, int]
    latitude: float
    longitude: float
    members: list[Report] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def id(self) -> str:
        return f"cluster-{self.latitude},{self.longitude}"


# --- Document boundary -------------------------------------------------------


def _parse_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return float(value)
    except OverflowError:
        # Integer too large for a float: not a usable number.
        return None


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # Epoch milliseconds
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidDocumentError(f"timestamp out of range {value!r}") from exc
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidDocumentError(f"invalid timestamp {value!r}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _parse_enum(enum_cls: type[Enum], value: Any, default: Enum | None = None) -> Any:
    if value is None and default is not None:
        return default
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise InvalidDocumentError(f"invalid {enum_cls.__name__.lower()} {value!r}") from exc


def _finite_or_none(value: Any) -> float | None:
    number = _parse_number(value)
    if number is None or not math.isfinite(number):
        return None
    return number


def _format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def _entries(data: dict, key: str) -> list[dict]:
    """The list of sub-documents under ``key``; every entry must be an object."""
    entries = data.get(key) or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise InvalidDocumentError(f"invalid {key} {entries!r}")
    return entries


def report_from_document(doc_id: str, data: dict) -> Report:
    """Convert a stored problem document (camelCase keys) into a Report."""
    loc = data.get("location") or {}
    if not isinstance(loc, dict):
        loc = {}

    comments = tuple(
        Comment(
            id=str(c.get("id", "")),
            text=c.get("text", ""),
            user_id=str(c.get("userId", "")),
            user_name=c.get("userName"),
            is_official=bool(c.get("isOfficial", False)),
            created_at=_parse_timestamp(c.get("createdAt")),
        )
        for c in _entries(data, "comments")
    )
    photos = tuple(
        Photo(url=p.get("url", ""), created_at=_parse_timestamp(p.get("createdAt")))
        for p in _entries(data, "photos")
    )

    upvotes = data.get("upvotes", 0)
    if isinstance(upvotes, bool) or not isinstance(upvotes, int) or upvotes < 0:
        raise InvalidDocumentError(f"invalid upvotes {upvotes!r}")

    return Report(
        id=str(doc_id),
        location=Location(
            latitude=_parse_number(loc.get("latitude")),
            longitude=_parse_number(loc.get("longitude")),
            address=loc.get("address"),
        ),
        severity=_parse_enum(Severity, data.get("severity")),
        category=_parse_enum(Category, data.get("category")),
        status=_parse_enum(Status, data.get("status"), Status.REPORTED),
        title=data.get("title", ""),
        description=data.get("description", ""),
        reported_by=str(data.get("reportedBy", "")),
        reporter_name=data.get("reporterName"),
        upvotes=upvotes,
        created_at=_parse_timestamp(data.get("createdAt")),
        updated_at=_parse_timestamp(data.get("updatedAt")),
        assigned_to=data.get("assignedTo"),
        comments=comments,
        photos=photos,
    )


def report_to_dict(report: Report) -> dict:
    """Return the JSON shape clients expect for a report."""
    lat = report.location.latitude
    lon = report.location.longitude
    return {
        "id": report.id,
        "title": report.title,
        "description": report.description,
        "location": {
            "latitude": _finite_or_none(lat),
            "longitude": _finite_or_none(lon),
            "address": report.location.address,
        },
        "severity": report.severity.value,
        "category": report.category.value,
        "status": report.status.value,
        "reportedBy": report.reported_by,
        "reporterName": report.reporter_name,
        "upvotes": report.upvotes,
        "createdAt": _format_timestamp(report.created_at),
        "updatedAt": _format_timestamp(report.updated_at),
        "assignedTo": report.assigned_to,
        "comments": [
            {
                "id": c.id,
                "text": c.text,
                "userId": c.user_id,
                "userName": c.user_name,
                "isOfficial": c.is_official,
                "createdAt": _format_timestamp(c.created_at),
            }
            for c in report.comments
        ],
        "photos": [
            {"url": p.url, "createdAt": _format_timestamp(p.created_at)}
            for p in report.photos
        ],
    }
