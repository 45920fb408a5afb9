# storefront/repositories/address_repo.py
import uuid

from sqlalchemy import update
from sqlmodel import Session, select

from storefront.models.address import Address


class AddressRepository:
    """Data access layer for the address book (no commits)."""

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Address]:
        stmt = (
            select(Address)
            .where(Address.user_id == user_id)
            .order_by(Address.is_default.desc(), Address.created_at.desc())
        )
        return session.exec(stmt).all()

    def get_for_user(
        self, session: Session, user_id: uuid.UUID, address_id: uuid.UUID
    ) -> Address | None:
        stmt = select(Address).where(Address.id == address_id, Address.user_id == user_id)
        return session.exec(stmt).first()

    def unset_default(self, session: Session, user_id: uuid.UUID) -> None:
        session.exec(
            update(Address)
            .where(Address.user_id == user_id, Address.is_default == True)  # noqa: E712
            .values(is_default=False)
        )

    def add(self, session: Session, address: Address) -> Address:
        session.add(address)
        session.flush()
        return address

    def delete(self, session: Session, address: Address) -> None:
        session.delete(address)

    def delete_for_user(self, session: Session, user_id: uuid.UUID) -> None:
        for address in self.list_for_user(session, user_id):
            session.delete(address)
