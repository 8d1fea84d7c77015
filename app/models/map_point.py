"""Map point model with its owned geographic location."""
from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum as PyEnum
from uuid import UUID

from sqlalchemy import Boolean, Enum as SqlEnum, Float, Integer, String, Uuid
from sqlalchemy.ext.mutable import MutableComposite
from sqlalchemy.orm import Mapped, composite, mapped_column

from .base import Auditable, Base, SoftDeletable, UTCDateTime


class MapPointType(str, PyEnum):
    CHARGING_STATION = "ChargingStation"
    SERVICE_CENTER = "ServiceCenter"
    MEETING_POINT = "MeetingPoint"
    OTHER = "Other"


class MapPointStatus(str, PyEnum):
    DRAFT = "Draft"
    PUBLISHED = "Published"
    VERIFIED = "Verified"
    ARCHIVED = "Archived"


@dataclasses.dataclass
class Location(MutableComposite):
    """Coordinate value stored inline in the owning row."""

    latitude: float
    longitude: float
    address: str | None = None

    def __setattr__(self, key: str, value: object) -> None:
        object.__setattr__(self, key, value)
        # propagate in-place edits to the parent's columns
        self.changed()


class MapPoint(Auditable, SoftDeletable, Base):
    """Represents a point of interest on the community map."""

    __tablename__ = "map_points"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(250), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    latitude: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False)
    longitude: Mapped[float] = mapped_column(Float(asdecimal=False), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    location: Mapped[Location] = composite(Location, "latitude", "longitude", "address")
    type: Mapped[MapPointType] = mapped_column(SqlEnum(MapPointType), nullable=False)
    status: Mapped[MapPointStatus] = mapped_column(SqlEnum(MapPointStatus), nullable=False, default=MapPointStatus.DRAFT)
    owner_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    average_rating: Mapped[float] = mapped_column(Float(asdecimal=False), default=0.0, nullable=False)
    rating_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    def publish(self, now: datetime) -> None:
        self.status = MapPointStatus.PUBLISHED
        self.published_at = now

    def verify(self, now: datetime) -> None:
        self.status = MapPointStatus.VERIFIED
        self.is_verified = True
        self.verified_at = now
