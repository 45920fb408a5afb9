# storefront/repositories/product_repo.py
import uuid

from sqlalchemy import delete, or_, update
from sqlmodel import Session, select, func

from storefront.models.product import Product, ProductTag

SORT_COLUMNS = {
    "newest": (Product.created_at.desc(),),
    "price_asc": (Product.price.asc(),),
    "price_desc": (Product.price.desc(),),
    "popular": (Product.purchases.desc(), Product.created_at.desc()),
    "top_rated": (Product.average_rating.desc(), Product.review_count.desc()),
}


class ProductRepository:
    """
    Data access layer for Product & ProductTag.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def _filtered(
        self,
        stmt,
        *,
        only_active: bool = True,
        seller_id: uuid.UUID | None = None,
        category_id: uuid.UUID | None = None,
        brand_id: uuid.UUID | None = None,
        tag_id: uuid.UUID | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        min_rating: float | None = None,
        q: str | None = None,
    ):
        if only_active:
            stmt = stmt.where(Product.is_active == True)  # noqa: E712
        if seller_id is not None:
            stmt = stmt.where(Product.seller_id == seller_id)
        if category_id is not None:
            stmt = stmt.where(Product.category_id == category_id)
        if brand_id is not None:
            stmt = stmt.where(Product.brand_id == brand_id)
        if tag_id is not None:
            stmt = stmt.where(
                Product.id.in_(
                    select(ProductTag.product_id).where(ProductTag.tag_id == tag_id)
                )
            )
        if min_price is not None:
            stmt = stmt.where(Product.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(Product.price <= max_price)
        if min_rating is not None:
            stmt = stmt.where(Product.average_rating >= min_rating)
        if q:
            pattern = f"%{q.strip()}%"
            stmt = stmt.where(
                or_(Product.name.ilike(pattern), Product.description.ilike(pattern))
            )
        return stmt

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 20,
        sort: str = "newest",
        **filters,
    ) -> list[Product]:
        stmt = self._filtered(select(Product), **filters)
        stmt = stmt.order_by(*SORT_COLUMNS[sort]).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def list_related(
        self, session: Session, product: Product, tag_ids: list[uuid.UUID], limit: int = 8
    ) -> list[Product]:
        """
        Active products sharing the category or at least one tag with
        `product`, best sellers first.
        """
        shares = Product.category_id == product.category_id
        if tag_ids:
            shares = or_(
                shares,
                Product.id.in_(
                    select(ProductTag.product_id).where(ProductTag.tag_id.in_(tag_ids))
                ),
            )
        stmt = (
            select(Product)
            .where(Product.is_active == True, Product.id != product.id, shares)  # noqa: E712
            .order_by(*SORT_COLUMNS["popular"])
            .limit(limit)
        )
        return session.exec(stmt).all()

    def count(self, session: Session, **filters) -> int:
        stmt = self._filtered(select(func.count()).select_from(Product), **filters)
        return session.exec(stmt).one()

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    # ----- Stock (used inside the checkout transaction, no commit) -----

    def decrement_stock(
        self, session: Session, product_id: uuid.UUID, quantity: int
    ) -> bool:
        """
        Atomically take `quantity` units out of stock and count them as
        purchases. Returns False when not enough stock is left.
        """
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(
                stock=Product.stock - quantity,
                purchases=Product.purchases + quantity,
            )
        )
        return session.exec(stmt).rowcount == 1

    def restore_stock(
        self, session: Session, product_id: uuid.UUID, quantity: int
    ) -> None:
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(
                stock=Product.stock + quantity,
                purchases=Product.purchases - quantity,
            )
        )
        session.exec(stmt)

    # ----- Tags -----

    def list_tag_ids(self, session: Session, product_id: uuid.UUID) -> list[uuid.UUID]:
        stmt = select(ProductTag.tag_id).where(ProductTag.product_id == product_id)
        return list(session.exec(stmt).all())

    def set_tags(
        self, session: Session, product_id: uuid.UUID, tag_ids: list[uuid.UUID]
    ) -> None:
        """Replace the tag links of a product (no commit)."""
        session.exec(delete(ProductTag).where(ProductTag.product_id == product_id))
        for tag_id in dict.fromkeys(tag_ids):
            session.add(ProductTag(product_id=product_id, tag_id=tag_id))

    def tag_ids_by_product(
        self, session: Session, product_ids: list[uuid.UUID]
    ) -> dict[uuid.UUID, list[uuid.UUID]]:
        if not product_ids:
            return {}
        stmt = select(ProductTag).where(ProductTag.product_id.in_(product_ids))
        result: dict[uuid.UUID, list[uuid.UUID]] = {}
        for link in session.exec(stmt).all():
            result.setdefault(link.product_id, []).append(link.tag_id)
        return result
