from enum import Enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    ForeignKey,
    Numeric,
    DateTime,
    JSON,
    Table,
    UniqueConstraint,
    Enum as SQLEnum,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from skirent.core.database import Base


class ProductType(str, Enum):
    SKI = "SKI"
    SNOWBOARD = "SNOWBOARD"
    SKI_BOOTS = "SKI_BOOTS"
    SNOWBOARD_BOOTS = "SNOWBOARD_BOOTS"
    HELMET = "HELMET"
    GOGGLES = "GOGGLES"
    ADULT_CLOTH = "ADULT_CLOTH"
    CHILD_CLOTH = "CHILD_CLOTH"
    OTHER = "OTHER"  # legacy, migrated to ADULT_CLOTH by init_db


# Types for which Product.size is meaningful; it is stored as NULL otherwise
SIZED_PRODUCT_TYPES = frozenset(
    {
        ProductType.SKI_BOOTS,
        ProductType.SNOWBOARD_BOOTS,
        ProductType.HELMET,
        ProductType.ADULT_CLOTH,
        ProductType.CHILD_CLOTH,
        ProductType.OTHER,
    }
)


booking_products = Table(
    "booking_products",
    Base.metadata,
    Column("id", Integer, primary_key=True),
    Column(
        "booking_id",
        Integer,
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "product_id",
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    UniqueConstraint("booking_id", "product_id", name="uq_booking_product"),
)


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    type = Column(SQLEnum(ProductType, name="product_type"), nullable=False, index=True)
    title = Column(String(200), nullable=False)

    # Price per day per person (GEL)
    price = Column(Numeric(10, 2), nullable=False)

    size = Column(String(50), nullable=True)
    standard = Column(Boolean, default=False, nullable=False)
    professional = Column(Boolean, default=False, nullable=False)

    # Image URLs from the upload service
    images = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    bookings = relationship(
        "Booking", secondary=booking_products, back_populates="products"
    )

    def __repr__(self):
        return f"<Product(id={self.id}, type='{self.type}', title='{self.title}', price={self.price})>"
