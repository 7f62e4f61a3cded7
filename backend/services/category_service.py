import logging

from sqlalchemy.orm import Session

from backend.models.category import Category

logger = logging.getLogger(__name__)


class CategoryNotFoundError(LookupError):
    pass


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.id).all()


def get_category(db: Session, category_id: int) -> Category | None:
    return db.query(Category).filter(Category.id == category_id).first()


def create_category(db: Session, name: str) -> Category:
    category = Category(name=name)
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Created category %s", category.id)
    return category


def update_category(db: Session, category_id: int, name: str) -> Category:
    category = get_category(db, category_id)
    if category is None:
        raise CategoryNotFoundError(f"Category is not found with Id {category_id}")

    category.name = name
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = get_category(db, category_id)
    if category is None:
        raise CategoryNotFoundError(f"Category is not found with Id {category_id}")

    db.delete(category)
    db.commit()
    logger.info("Deleted category %s", category_id)
