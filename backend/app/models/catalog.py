"""Archive catalog models: assets, events, sessions and the places behind them"""
import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, JSON, String, Text, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class ArchiveAsset(Base):
    """A media or document file harvested into the archive"""

    __tablename__ = "archive_assets"

    id = Column(String(36), primary_key=True, default=_uuid)
    metadata_source = Column(String(50), nullable=False, index=True)  # gdrive, youtube, ...

    # File identity
    name = Column(Text)
    title = Column(Text)
    filepath = Column(Text)
    is_media_file = Column(Boolean)
    asset_type = Column(String(50), index=True)  # video, audio, document
    file_format = Column(String(20))
    file_size_bytes = Column(Integer)
    duration = Column(String(20))

    # Dating
    original_date = Column(DateTime)
    created_date = Column(DateTime)

    # Language & transcription
    has_oral_translation = Column(Boolean)
    oral_translation_languages = Column(JSON(none_as_null=True))  # list of language names
    transcript_languages = Column(JSON(none_as_null=True))  # list of language names
    transcripts_available = Column(Boolean)
    has_timestamped_transcript = Column(String(10))  # Yes, Partial, No

    # Cataloging workflow
    session_id = Column(String(36), ForeignKey("sessions.id", ondelete="SET NULL"), index=True)
    cataloging_status = Column(String(30), index=True)  # NULL means not started
    needs_detailed_review = Column(Boolean)
    remove_file = Column(Boolean)
    safe_to_delete_from_gdrive = Column(Boolean)
    notes = Column(Text)

    additional_metadata = Column(JSON(none_as_null=True))

    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime)

    session = relationship("EventSession", back_populates="assets")


class Event(Base):
    """A teaching event; sub-events point at their parent"""

    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=_uuid)
    event_id = Column(String(100), nullable=False, unique=True)  # human-facing code
    event_name = Column(Text, nullable=False)
    event_date_start = Column(Date, index=True)
    event_date_end = Column(Date)
    event_type = Column(String(50))
    parent_event_id = Column(String(36), ForeignKey("events.id", ondelete="SET NULL"), index=True)
    location_id = Column(String(36), ForeignKey("locations.id", ondelete="SET NULL"), index=True)
    organizer_id = Column(String(36), ForeignKey("organizations.id", ondelete="SET NULL"), index=True)
    cataloging_status = Column(String(30), index=True)
    harvest_source = Column(String(50))
    event_description = Column(Text)
    notes = Column(Text)

    # Free-form harvest data; hosting_center, country_raw and location_raw are filterable
    additional_metadata = Column(JSON(none_as_null=True))

    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime)

    parent = relationship("Event", remote_side=[id], back_populates="children")
    children = relationship("Event", back_populates="parent")
    sessions = relationship("EventSession", back_populates="event", cascade="all, delete-orphan")


class EventSession(Base):
    """One session (talk, teaching block) of an event"""

    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=_uuid)
    session_id = Column(String(100), nullable=False, unique=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), index=True)
    session_name = Column(Text, nullable=False)
    session_date = Column(Date)
    session_time = Column(String(20))  # morning, afternoon, evening, night
    sequence_in_event = Column(Integer)
    topic = Column(Text)
    category = Column(Text)
    asset_count = Column(Integer, default=0)
    has_assets = Column(Boolean, default=False)
    cataloging_status = Column(String(30), index=True)
    notes = Column(Text)

    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime)

    event = relationship("Event", back_populates="sessions")
    assets = relationship("ArchiveAsset", back_populates="session")


class Location(Base):
    """A venue or center where events take place"""

    __tablename__ = "locations"

    id = Column(String(36), primary_key=True, default=_uuid)
    code = Column(String(50), unique=True)
    name = Column(Text, nullable=False)
    location_type = Column(String(50))
    city = Column(Text)
    country = Column(Text)
    notes = Column(Text)

    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


class Organization(Base):
    """An organizing body; its address comes through its primary location"""

    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=_uuid)
    code = Column(String(50), unique=True)
    name = Column(Text, nullable=False)
    org_type = Column(String(50))
    website = Column(Text)
    notes = Column(Text)

    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


class Address(Base):
    """A postal address; soft-deleted rows keep deleted_at"""

    __tablename__ = "addresses"

    id = Column(String(36), primary_key=True, default=_uuid)
    label = Column(Text)
    full_address = Column(Text)
    street = Column(Text)
    city = Column(Text)
    state_province = Column(Text)
    postal_code = Column(String(20))
    country = Column(Text)

    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
    deleted_at = Column(DateTime)


class OrganizationLocation(Base):
    """Organization <-> location link; at most one is_primary per organization"""

    __tablename__ = "organization_locations"

    id = Column(String(36), primary_key=True, default=_uuid)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    location_id = Column(String(36), ForeignKey("locations.id", ondelete="CASCADE"), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_org_locations_org_primary", "organization_id", "is_primary"),
    )


class LocationAddress(Base):
    """Location <-> address link; at most one is_primary per location"""

    __tablename__ = "location_addresses"

    id = Column(String(36), primary_key=True, default=_uuid)
    location_id = Column(String(36), ForeignKey("locations.id", ondelete="CASCADE"), nullable=False)
    address_id = Column(String(36), ForeignKey("addresses.id", ondelete="CASCADE"), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_location_addresses_loc_primary", "location_id", "is_primary"),
    )
