from sqlalchemy import Column, Integer, String, Text

from urban_harvest.data.database import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    category_id = Column(Integer, primary_key=True)
    category_name = Column(String(100), nullable=False)
    category_type = Column(String(20), nullable=False)  # event, workshop, product
    description = Column(Text)


class OrganizerModel(Base):
    __tablename__ = "organizers"

    organizer_id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    role = Column(String(100))
    image = Column(String(500))
    contact_email = Column(String(255))


class InstructorModel(Base):
    __tablename__ = "instructors"

    instructor_id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    role = Column(String(100))
    image = Column(String(500))
    bio = Column(Text)
    contact_email = Column(String(255))
