from sqlalchemy import select
from sqlalchemy.orm import Session

from urban_harvest.data.models.catalog import CategoryModel, OrganizerModel, InstructorModel
from urban_harvest.data.models.content import TestimonialModel, HeroSlideModel


class CatalogRepo:
    """Read-only lookups behind the public catalog and landing-page endpoints."""

    def __init__(self, db: Session):
        self.db = db

    def list_categories(self, category_type: str | None = None) -> list[CategoryModel]:
        stmt = select(CategoryModel)
        if category_type:
            stmt = stmt.where(CategoryModel.category_type == category_type)
        return self.db.execute(stmt.order_by(CategoryModel.category_name)).scalars().all()

    def list_organizers(self) -> list[OrganizerModel]:
        return self.db.execute(select(OrganizerModel).order_by(OrganizerModel.name)).scalars().all()

    def list_instructors(self) -> list[InstructorModel]:
        return self.db.execute(select(InstructorModel).order_by(InstructorModel.name)).scalars().all()

    def list_testimonials(self, featured_only: bool = False) -> list[TestimonialModel]:
        stmt = select(TestimonialModel).where(TestimonialModel.is_active.is_(True))
        if featured_only:
            stmt = stmt.where(TestimonialModel.is_featured.is_(True))
        return self.db.execute(stmt.order_by(TestimonialModel.testimonial_id)).scalars().all()

    def list_hero_slides(self) -> list[HeroSlideModel]:
        return self.db.execute(
            select(HeroSlideModel)
            .where(HeroSlideModel.is_active.is_(True))
            .order_by(HeroSlideModel.order_index)
        ).scalars().all()
