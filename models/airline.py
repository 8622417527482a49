from sqlalchemy import Column, String

from .base import Base


class Airline(Base):
    __tablename__ = "airlines"

    code = Column(String(8), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    country = Column(String(64), nullable=True)

    def __repr__(self):
        return f"<Airline {self.code} name={self.name}>"
