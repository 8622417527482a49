from sqlalchemy import Column, String, Float

from .base import Base


class Airport(Base):
    __tablename__ = "airports"

    icao_code = Column(String(8), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    def __repr__(self):
        return f"<Airport {self.icao_code} name={self.name}>"
