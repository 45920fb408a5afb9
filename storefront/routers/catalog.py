# storefront/routers/catalog.py
"""
Taxonomy endpoints, one router per kind:

    GET    /catalog/{kind}            public, active entries
    GET    /catalog/{kind}/{id}       public
    POST   /catalog/{kind}            admin
    PATCH  /catalog/{kind}/{id}       admin
    DELETE /catalog/{kind}/{id}       admin (409 while products use it)
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.core.responses import ApiResponse, success_response
from storefront.database import get_session
from storefront.schemas.catalog import (
    ColorCreate,
    ColorRead,
    ColorUpdate,
    SizeCreate,
    SizeRead,
    SizeUpdate,
    TagCreate,
    TagRead,
    TagUpdate,
    TaxonomyCreate,
    TaxonomyRead,
    TaxonomyUpdate,
)
from storefront.services.catalog_service import build_taxonomy_service

# kind -> (create schema, update schema, read schema)
KIND_SCHEMAS = {
    "categories": (TaxonomyCreate, TaxonomyUpdate, TaxonomyRead),
    "brands": (TaxonomyCreate, TaxonomyUpdate, TaxonomyRead),
    "sizes": (SizeCreate, SizeUpdate, SizeRead),
    "colors": (ColorCreate, ColorUpdate, ColorRead),
    "materials": (TaxonomyCreate, TaxonomyUpdate, TaxonomyRead),
    "tags": (TagCreate, TagUpdate, TagRead),
}


def build_router(kind: str) -> APIRouter:
    create_schema, update_schema, read_schema = KIND_SCHEMAS[kind]
    service = build_taxonomy_service(kind)
    router = APIRouter(prefix=f"/catalog/{kind}", tags=["Catalog"])

    @router.get("", response_model=ApiResponse[list[read_schema]])
    def list_entries(
        session: Session = Depends(get_session),
        skip: int = Query(0, ge=0),
        limit: int = Query(100, ge=1, le=500),
    ):
        items = service.list(session, only_active=True, skip=skip, limit=limit)
        return success_response([read_schema.model_validate(i) for i in items])

    @router.get("/{item_id}", response_model=ApiResponse[read_schema])
    def get_entry(
        item_id: uuid.UUID,
        session: Session = Depends(get_session),
    ):
        item = service.get(session, item_id, only_active=True)
        return success_response(read_schema.model_validate(item))

    @router.post(
        "",
        response_model=ApiResponse[read_schema],
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(require_admin)],
    )
    def create_entry(
        payload: create_schema,
        session: Session = Depends(get_session),
    ):
        item = service.create(session, payload)
        return success_response(
            read_schema.model_validate(item), "CREATE", status.HTTP_201_CREATED
        )

    @router.patch(
        "/{item_id}",
        response_model=ApiResponse[read_schema],
        dependencies=[Depends(require_admin)],
    )
    def update_entry(
        item_id: uuid.UUID,
        payload: update_schema,
        session: Session = Depends(get_session),
    ):
        item = service.update(session, item_id, payload)
        return success_response(read_schema.model_validate(item), "UPDATE")

    @router.delete(
        "/{item_id}",
        response_model=ApiResponse,
        dependencies=[Depends(require_admin)],
    )
    def delete_entry(
        item_id: uuid.UUID,
        session: Session = Depends(get_session),
    ):
        service.delete(session, item_id)
        return success_response(None, "DELETE")

    return router


routers = [build_router(kind) for kind in KIND_SCHEMAS]
