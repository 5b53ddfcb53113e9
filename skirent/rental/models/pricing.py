from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Numeric,
    DateTime,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from skirent.core.database import Base


class PriceList(Base):
    """Display-only row of the public price table"""
    __tablename__ = "price_list"

    id = Column(Integer, primary_key=True)
    item_key = Column(String(100), nullable=False, unique=True)
    type = Column(String(100), nullable=False)
    includes = Column(Text, nullable=False, default="")
    price = Column(String(50), nullable=False)  # e.g. "60-150 ₾"

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<PriceList(item_key='{self.item_key}', price='{self.price}')>"


class LessonPricing(Base):
    """One cell of the people x duration lesson price matrix"""
    __tablename__ = "lesson_pricing"

    id = Column(Integer, primary_key=True)
    number_of_people = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint(
            "number_of_people", "duration", name="uq_lesson_pricing_people_duration"
        ),
    )

    def __repr__(self):
        return f"<LessonPricing(people={self.number_of_people}, hours={self.duration}, price={self.price})>"
