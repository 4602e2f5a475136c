# urban_harvest/api/routers/catalog.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from urban_harvest.data.database import get_db
from urban_harvest.data.models.content import TestimonialModel, HeroSlideModel
from urban_harvest.repos.catalog_repo import CatalogRepo

router = APIRouter(tags=["catalog"])


def _testimonial(t: TestimonialModel) -> dict:
    return {
        "id": t.testimonial_id,
        "name": t.customer_name,
        "role": t.customer_role,
        "image": t.customer_image,
        "rating": t.rating,
        "text": t.testimonial_text,
        "is_featured": t.is_featured,
    }


def _slide(s: HeroSlideModel) -> dict:
    data = s.to_dict()
    data["id"] = data.pop("slide_id")
    return data


@router.get("/categories")
def list_categories(type: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return {"categories": [c.to_dict() for c in CatalogRepo(db).list_categories(type)]}


@router.get("/organizers")
def list_organizers(db: Session = Depends(get_db)):
    return {"organizers": [o.to_dict() for o in CatalogRepo(db).list_organizers()]}


@router.get("/instructors")
def list_instructors(db: Session = Depends(get_db)):
    return {"instructors": [i.to_dict() for i in CatalogRepo(db).list_instructors()]}


@router.get("/testimonials")
def list_testimonials(db: Session = Depends(get_db)):
    return [_testimonial(t) for t in CatalogRepo(db).list_testimonials()]


@router.get("/testimonials/featured")
def list_featured_testimonials(db: Session = Depends(get_db)):
    return [_testimonial(t) for t in CatalogRepo(db).list_testimonials(featured_only=True)]


@router.get("/hero-slides")
def list_hero_slides(db: Session = Depends(get_db)):
    return [_slide(s) for s in CatalogRepo(db).list_hero_slides()]
