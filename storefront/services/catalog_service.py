# storefront/services/catalog_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel

from storefront.core.exceptions import ConflictError, NotFoundError
from storefront.models.catalog import Brand, Category, Color, Material, Size, Tag
from storefront.repositories.catalog_repo import TaxonomyRepository

logger = logging.getLogger(__name__)


class TaxonomyService:
    """
    CRUD rules shared by every taxonomy kind.

    - names are unique (per type for sizes): duplicates => 409
    - an entry still referenced by a product cannot be deleted => 409
    - public reads only see active entries
    """

    def __init__(self, repo: TaxonomyRepository, label: str):
        self.repo = repo
        self.label = label

    def list(
        self,
        session: Session,
        only_active: bool = True,
        skip: int = 0,
        limit: int = 100,
    ):
        return self.repo.list(session, only_active=only_active, skip=skip, limit=limit)

    def get(self, session: Session, item_id: uuid.UUID, only_active: bool = False):
        item = self.repo.get_by_id(session, item_id)
        if not item or (only_active and not item.is_active):
            raise NotFoundError(f"{self.label} not found")
        return item

    def create(self, session: Session, payload: SQLModel):
        item = self.repo.model(**payload.model_dump())
        try:
            item = self.repo.create(session, item)
        except IntegrityError:
            session.rollback()
            raise ConflictError(f"{self.label} already exists")
        logger.info("%s %s created (%s)", self.label, item.id, item.name)
        return item

    def update(self, session: Session, item_id: uuid.UUID, payload: SQLModel):
        item = self.get(session, item_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(item, field, value)
        item.updated_at = datetime.now(timezone.utc)
        try:
            return self.repo.update(session, item)
        except IntegrityError:
            session.rollback()
            raise ConflictError(f"{self.label} already exists")

    def delete(self, session: Session, item_id: uuid.UUID) -> None:
        item = self.get(session, item_id)
        in_use = self.repo.count_products_using(session, item.id)
        if in_use:
            raise ConflictError(f"{self.label} is used by {in_use} product(s)")
        self.repo.delete(session, item)
        logger.info("%s %s deleted", self.label, item_id)


# kind (URL segment) -> (model, product column, label)
TAXONOMY_KINDS = {
    "categories": (Category, "category_id", "Category"),
    "brands": (Brand, "brand_id", "Brand"),
    "sizes": (Size, "size_id", "Size"),
    "colors": (Color, "color_id", "Color"),
    "materials": (Material, "material_id", "Material"),
    "tags": (Tag, None, "Tag"),
}


def build_taxonomy_service(kind: str) -> TaxonomyService:
    model, product_column, label = TAXONOMY_KINDS[kind]
    return TaxonomyService(TaxonomyRepository(model, product_column), label)
