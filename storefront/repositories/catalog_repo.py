# storefront/repositories/catalog_repo.py
import uuid
from typing import Generic, TypeVar

from sqlmodel import Session, SQLModel, select, func

from storefront.models.product import Product, ProductTag

TaxonomyModel = TypeVar("TaxonomyModel", bound=SQLModel)


class TaxonomyRepository(Generic[TaxonomyModel]):
    """
    Data access layer shared by the taxonomy tables
    (categories, brands, sizes, colors, materials, tags).

    - One instance per model class.
    - Pure DB operations; uniqueness errors bubble up as IntegrityError.
    """

    def __init__(self, model: type[TaxonomyModel], product_column: str | None):
        self.model = model
        # Product column referencing this taxonomy (None for tags, which
        # use the product_tags link table)
        self.product_column = product_column

    def get_by_id(self, session: Session, item_id: uuid.UUID) -> TaxonomyModel | None:
        return session.get(self.model, item_id)

    def list(
        self,
        session: Session,
        only_active: bool = True,
        skip: int = 0,
        limit: int = 100,
    ) -> list[TaxonomyModel]:
        stmt = select(self.model)
        if only_active:
            stmt = stmt.where(self.model.is_active == True)  # noqa: E712
        stmt = stmt.order_by(self.model.name).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def create(self, session: Session, item: TaxonomyModel) -> TaxonomyModel:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: TaxonomyModel) -> TaxonomyModel:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: TaxonomyModel) -> None:
        session.delete(item)
        session.commit()

    def count_products_using(self, session: Session, item_id: uuid.UUID) -> int:
        """How many products reference this entry (tags: through product_tags)."""
        if self.product_column is None:
            stmt = (
                select(func.count())
                .select_from(ProductTag)
                .where(ProductTag.tag_id == item_id)
            )
            return session.exec(stmt).one()
        column = getattr(Product, self.product_column)
        stmt = select(func.count()).select_from(Product).where(column == item_id)
        return session.exec(stmt).one()
