from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    Numeric,
    DateTime,
    Index,
    Enum as SQLEnum,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from skirent.core.database import Base
from skirent.rental.models.products import booking_products
from skirent.rental.models.status import ReservationStatus


class Booking(Base):
    """Equipment rental for an inclusive date range"""
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(30), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    personal_id = Column(String(50), nullable=False, default="")

    number_of_people = Column(Integer, nullable=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    status = Column(
        SQLEnum(ReservationStatus, name="reservation_status"),
        default=ReservationStatus.PENDING,
        nullable=False,
        index=True,
    )
    total_price = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    products = relationship(
        "Product", secondary=booking_products, back_populates="bookings"
    )

    __table_args__ = (
        # Для календаря гостей
        Index("ix_bookings_dates", "start_date", "end_date"),
    )

    @property
    def customer(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Booking(id={self.id}, {self.start_date}..{self.end_date}, status={self.status})>"
