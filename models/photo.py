from sqlalchemy import Column, Integer, BigInteger, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base


class Photo(Base):
    __tablename__ = "photos"

    id = Column(BigInteger, primary_key=True, index=True)
    user_id = Column(BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    uuid_rh = Column(String(36), ForeignKey("registration_history.uuid_rh"), nullable=True, index=True)
    airport_code = Column(String(8), ForeignKey("airports.icao_code"), nullable=True)
    s3_key = Column(String(length=255), nullable=False)

    taken_at = Column(DateTime(timezone=True), nullable=True)
    shutter_speed = Column(String(32), nullable=True)
    iso = Column(Integer, nullable=True)
    aperture = Column(String(32), nullable=True)
    camera_model = Column(String(128), nullable=True)
    focal_length = Column(String(32), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    registration = relationship("RegistrationHistory", lazy="raise")
    airport = relationship("Airport", lazy="raise")

    def __repr__(self):
        return f"<Photo id={self.id} key={self.s3_key}>"
