# storefront/repositories/user_repo.py
import uuid

from sqlmodel import Session, select, func

from storefront.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Basic CRUD -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def list(
        self,
        session: Session,
        role: str | None = None,
        seller_status: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[User]:
        """
        Paginated user listing, newest first.

        Args:
            role: only users with this role
            seller_status: only sellers in this approval state
            skip: offset rows (for paging)
            limit: max number of rows returned
        """
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        if seller_status is not None:
            stmt = stmt.where(User.seller_status == seller_status)
        stmt = stmt.order_by(User.created_at.desc()).offset(skip).limit(limit)
        return session.exec(stmt).all()

    def count(
        self,
        session: Session,
        role: str | None = None,
        seller_status: str | None = None,
    ) -> int:
        stmt = select(func.count()).select_from(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        if seller_status is not None:
            stmt = stmt.where(User.seller_status == seller_status)
        return session.exec(stmt).one()

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def delete(self, session: Session, user: User) -> None:
        """Delete a User (no commit; account removal spans several tables)."""
        session.delete(user)
