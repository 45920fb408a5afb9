# storefront/services/address_service.py
import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.exceptions import ConflictError, NotFoundError
from storefront.models.address import Address
from storefront.models.user import User
from storefront.repositories.address_repo import AddressRepository
from storefront.schemas.address import AddressCreate, AddressUpdate

logger = logging.getLogger(__name__)
settings = get_settings()


class AddressService:
    """
    Customer address book.

    At most one default address per user: making an address the default
    clears the previous default in the same transaction (the partial
    unique index catches anything that slips through).
    """

    def __init__(self, repo: AddressRepository):
        self.repo = repo

    def _commit(self, session: Session) -> None:
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            raise ConflictError("Another default address was set concurrently")

    def list_addresses(self, session: Session, user: User) -> list[Address]:
        return self.repo.list_for_user(session, user.id)

    def get_address(self, session: Session, user: User, address_id: uuid.UUID) -> Address:
        address = self.repo.get_for_user(session, user.id, address_id)
        if not address:
            raise NotFoundError("Address not found")
        return address

    def create_address(self, session: Session, user: User, payload: AddressCreate) -> Address:
        """The first address of a user becomes the default automatically."""
        values = payload.model_dump()
        values["country"] = values.get("country") or settings.DEFAULT_COUNTRY
        if not self.repo.list_for_user(session, user.id):
            values["is_default"] = True

        if values["is_default"]:
            self.repo.unset_default(session, user.id)
        address = self.repo.add(session, Address(user_id=user.id, **values))
        self._commit(session)
        session.refresh(address)
        return address

    def update_address(
        self,
        session: Session,
        user: User,
        address_id: uuid.UUID,
        payload: AddressUpdate,
    ) -> Address:
        address = self.get_address(session, user, address_id)
        values = payload.model_dump(exclude_unset=True)
        if values.get("is_default"):
            self.repo.unset_default(session, user.id)
        for field, value in values.items():
            if field == "country" and value is None:
                value = settings.DEFAULT_COUNTRY
            setattr(address, field, value)
        address.updated_at = datetime.now(timezone.utc)
        session.add(address)
        self._commit(session)
        session.refresh(address)
        return address

    def set_default(self, session: Session, user: User, address_id: uuid.UUID) -> Address:
        address = self.get_address(session, user, address_id)
        self.repo.unset_default(session, user.id)
        address.is_default = True
        address.updated_at = datetime.now(timezone.utc)
        session.add(address)
        self._commit(session)
        session.refresh(address)
        logger.info("Address %s is now default for user %s", address.id, user.id)
        return address

    def delete_address(self, session: Session, user: User, address_id: uuid.UUID) -> None:
        address = self.get_address(session, user, address_id)
        self.repo.delete(session, address)
        session.commit()
