from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from skirent.core.database import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True)
    firstname = Column(String(100), nullable=False)
    lastname = Column(String(100), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    lessons = relationship("Lesson", back_populates="teacher", passive_deletes=True)

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}"

    def __repr__(self):
        return f"<Teacher(id={self.id}, name='{self.full_name}')>"
