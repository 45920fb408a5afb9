# storefront/services/product_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlmodel import Session

from storefront.core.exceptions import AuthorizationError, NotFoundError
from storefront.models.catalog import Brand, Category, Color, Material, Size, Tag
from storefront.models.product import Product
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.common import Pagination
from storefront.schemas.product import (
    FeaturedProductsRead,
    ProductCreate,
    ProductListRead,
    ProductRead,
    ProductUpdate,
)

logger = logging.getLogger(__name__)

# Shelf -> (sort, extra filters)
FEATURED_SHELVES = {
    "top_rated": ("top_rated", {"min_rating": 4.0}),
    "best_selling": ("popular", {}),
    "new_arrivals": ("newest", {}),
}

# Product column -> (taxonomy model, label used in 404 messages)
REFERENCES = {
    "category_id": (Category, "Category"),
    "brand_id": (Brand, "Brand"),
    "size_id": (Size, "Size"),
    "color_id": (Color, "Color"),
    "material_id": (Material, "Material"),
}


class ProductService:
    """
    Business logic for Product.

    Responsibilities:
      - validate taxonomy references (and tags) before writes
      - sellers manage only their own listings
      - public reads only see active products
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Helpers -----

    def _check_references(self, session: Session, values: dict) -> None:
        for column, (model, label) in REFERENCES.items():
            ref_id = values.get(column)
            if ref_id is not None and session.get(model, ref_id) is None:
                raise NotFoundError(f"{label} not found")
        for tag_id in values.get("tag_ids") or []:
            if session.get(Tag, tag_id) is None:
                raise NotFoundError(f"Tag {tag_id} not found")

    def _to_read(self, product: Product, tag_ids: list[uuid.UUID]) -> ProductRead:
        return ProductRead.model_validate(product, update={"tag_ids": tag_ids})

    def _read_one(self, session: Session, product: Product) -> ProductRead:
        return self._to_read(product, self.repo.list_tag_ids(session, product.id))

    def _page(
        self,
        session: Session,
        page: int,
        limit: int,
        sort: str = "newest",
        **filters,
    ) -> ProductListRead:
        total = self.repo.count(session, **filters)
        products = self.repo.list_products(
            session, skip=(page - 1) * limit, limit=limit, sort=sort, **filters
        )
        tags = self.repo.tag_ids_by_product(session, [p.id for p in products])
        return ProductListRead(
            products=[self._to_read(p, tags.get(p.id, [])) for p in products],
            pagination=Pagination.build(page, limit, total),
        )

    def _get_owned(self, session: Session, seller: User, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        if product.seller_id != seller.id:
            raise AuthorizationError("You can only manage your own products")
        return product

    # ----- Public -----

    def list_public(
        self,
        session: Session,
        page: int = 1,
        limit: int = 20,
        sort: str = "newest",
        **filters,
    ) -> ProductListRead:
        """
        Storefront listing: active products only, optional
        category/brand/tag/price/text filters.
        """
        return self._page(session, page, limit, sort, only_active=True, **filters)

    def get_public(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        product = self.repo.get_by_id(session, product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")
        return self._read_one(session, product)

    def list_featured(
        self, session: Session, shelf: str = "all", limit: int = 8
    ) -> FeaturedProductsRead:
        """
        Top rated (average 4+), best selling and newest active products.
        """
        shelves = FEATURED_SHELVES if shelf == "all" else {shelf: FEATURED_SHELVES[shelf]}
        result = {}
        for name, (sort, filters) in shelves.items():
            products = self.repo.list_products(
                session, limit=limit, sort=sort, only_active=True, **filters
            )
            tags = self.repo.tag_ids_by_product(session, [p.id for p in products])
            result[name] = [self._to_read(p, tags.get(p.id, [])) for p in products]
        return FeaturedProductsRead(type=shelf, **result)

    def list_related(
        self, session: Session, product_id: uuid.UUID, limit: int = 8
    ) -> list[ProductRead]:
        product = self.repo.get_by_id(session, product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")
        related = self.repo.list_related(
            session, product, self.repo.list_tag_ids(session, product.id), limit
        )
        tags = self.repo.tag_ids_by_product(session, [p.id for p in related])
        return [self._to_read(p, tags.get(p.id, [])) for p in related]

    # ----- Seller -----

    def list_for_seller(
        self,
        session: Session,
        seller: User,
        page: int = 1,
        limit: int = 20,
    ) -> ProductListRead:
        """All listings of the seller, inactive included."""
        return self._page(session, page, limit, only_active=False, seller_id=seller.id)

    def create_product(
        self,
        session: Session,
        seller: User,
        payload: ProductCreate,
    ) -> ProductRead:
        values = payload.model_dump()
        self._check_references(session, values)

        tag_ids = values.pop("tag_ids")
        product = Product(**values, seller_id=seller.id)
        try:
            session.add(product)
            session.flush()
            self.repo.set_tags(session, product.id, tag_ids)
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(product)

        logger.info("Seller %s created product %s", seller.id, product.id)
        return self._read_one(session, product)

    def update_product(
        self,
        session: Session,
        seller: User,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> ProductRead:
        """
        Partial update of the seller's own product.
        `tag_ids`, when present, replaces the tag set.
        """
        product = self._get_owned(session, seller, product_id)
        values = payload.model_dump(exclude_unset=True)
        self._check_references(session, values)

        tag_ids = values.pop("tag_ids", None)
        for field, value in values.items():
            setattr(product, field, value)
        product.updated_at = datetime.now(timezone.utc)

        try:
            session.add(product)
            if tag_ids is not None:
                self.repo.set_tags(session, product.id, tag_ids)
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(product)
        return self._read_one(session, product)

    def deactivate_product(
        self,
        session: Session,
        seller: User,
        product_id: uuid.UUID,
    ) -> ProductRead:
        """
        Sellers never hard-delete: order lines keep pointing at products.
        """
        product = self._get_owned(session, seller, product_id)
        product.is_active = False
        product.updated_at = datetime.now(timezone.utc)
        product = self.repo.update(session, product)
        logger.info("Seller %s deactivated product %s", seller.id, product.id)
        return self._read_one(session, product)

    # ----- Admin -----

    def list_all(
        self,
        session: Session,
        page: int = 1,
        limit: int = 20,
        **filters,
    ) -> ProductListRead:
        return self._page(session, page, limit, only_active=False, **filters)

    def set_active(
        self,
        session: Session,
        product_id: uuid.UUID,
        is_active: bool,
    ) -> ProductRead:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        product.is_active = is_active
        product.updated_at = datetime.now(timezone.utc)
        product = self.repo.update(session, product)
        return self._read_one(session, product)
