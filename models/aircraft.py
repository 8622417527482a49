import uuid

from sqlalchemy import Column, String, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class AircraftType(Base):
    __tablename__ = "aircraft_types"

    icao_type = Column(String(8), primary_key=True)
    manufacturer = Column(String(128), nullable=False)
    type = Column(String(128), nullable=False)
    variant = Column(String(128), nullable=True)

    def __repr__(self):
        return f"<AircraftType {self.icao_type} {self.manufacturer} {self.type}>"


class SpecificAircraft(Base):
    """One physical airframe, owned by the RegistrationHistory rows that name it."""
    __tablename__ = "specific_aircraft"

    uuid = Column(String(36), primary_key=True, default=_uuid)
    icao_type = Column(String(8), ForeignKey("aircraft_types.icao_type"), nullable=False)
    manufactured_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    aircraft_type = relationship("AircraftType", lazy="raise")

    def __repr__(self):
        return f"<SpecificAircraft uuid={self.uuid} type={self.icao_type}>"


class RegistrationHistory(Base):
    """A registration mark carried by an airframe for some period."""
    __tablename__ = "registration_history"

    uuid_rh = Column(String(36), primary_key=True, default=_uuid)
    uuid_sa = Column(String(36), ForeignKey("specific_aircraft.uuid"), nullable=False, index=True)
    registration = Column(String(16), nullable=False, index=True)
    airline = Column(String(8), ForeignKey("airlines.code"), nullable=True)
    is_current = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Only many-to-one links: deleting rows never triggers collection loads
    aircraft = relationship("SpecificAircraft", lazy="raise")
    operator = relationship("Airline", lazy="raise")

    def __repr__(self):
        return f"<RegistrationHistory {self.registration} uuid_rh={self.uuid_rh}>"
