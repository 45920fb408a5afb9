# storefront/routers/addresses.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_customer
from storefront.core.responses import ApiResponse, success_response
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.address_repo import AddressRepository
from storefront.schemas.address import AddressCreate, AddressRead, AddressUpdate
from storefront.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["Addresses"])

service = AddressService(AddressRepository())


@router.get("", response_model=ApiResponse[list[AddressRead]])
def list_addresses(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """Address book, default address first."""
    addresses = service.list_addresses(session, current_user)
    return success_response([AddressRead.model_validate(a) for a in addresses])


@router.post(
    "",
    response_model=ApiResponse[AddressRead],
    status_code=status.HTTP_201_CREATED,
)
def create_address(
    payload: AddressCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    address = service.create_address(session, current_user, payload)
    return success_response(
        AddressRead.model_validate(address), "CREATE", status.HTTP_201_CREATED
    )


@router.get("/{address_id}", response_model=ApiResponse[AddressRead])
def get_address(
    address_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    address = service.get_address(session, current_user, address_id)
    return success_response(AddressRead.model_validate(address))


@router.patch("/{address_id}", response_model=ApiResponse[AddressRead])
def update_address(
    address_id: uuid.UUID,
    payload: AddressUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    address = service.update_address(session, current_user, address_id, payload)
    return success_response(AddressRead.model_validate(address), "UPDATE")


@router.put("/{address_id}/default", response_model=ApiResponse[AddressRead])
def set_default_address(
    address_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    address = service.set_default(session, current_user, address_id)
    return success_response(AddressRead.model_validate(address), "UPDATE")


@router.delete("/{address_id}", response_model=ApiResponse)
def delete_address(
    address_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    service.delete_address(session, current_user, address_id)
    return success_response(None, "DELETE")
