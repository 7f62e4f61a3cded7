"""Book model definitions."""

from sqlalchemy import Column, Integer, Numeric, String, Text
from backend.database import Base


class Book(Base):
    """Represents a book in the catalog."""
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    isbn = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=False, default="")
    author = Column(String, nullable=False, default="")
    category = Column(String, nullable=False, default="")  # free-text label
    image = Column(String, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False, default=0)
