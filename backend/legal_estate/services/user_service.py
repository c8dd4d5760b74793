# legal_estate/services/user_service.py

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select

from legal_estate.core.logger import logger
from legal_estate.core.security import verify_password
from legal_estate.db.models import User
from legal_estate.db.schemas import UserFilter
from legal_estate.services.base_service import BaseService
from legal_estate.utils.exceptions import UserNotFoundError
from legal_estate.utils.helpers import utcnow


class UserService(BaseService):
    """
    Staff accounts. Only active users are listed or allowed to sign in.
    """

    async def list_users(self, filters: UserFilter) -> List[User]:
        stmt = select(User).where(User.is_active.is_(True))
        if filters.role:
            stmt = stmt.where(User.role == filters.role)
        return await self.fetch_all(stmt.order_by(User.last_name, User.first_name))

    async def get_user(self, user_id: UUID) -> User:
        user = await self.fetch_first(select(User).where(User.id == user_id))
        if user is None:
            raise UserNotFoundError()
        return user

    async def get_active_user(self, user_id: UUID) -> Optional[User]:
        return await self.fetch_first(select(User).where(User.id == user_id, User.is_active.is_(True)))

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """
        Return the user when the credentials match, stamping ``last_login_at``.
        """
        async with self.db.transaction() as session:
            user = await session.scalar(select(User).where(func.lower(User.email) == email.lower()))
            if user is None or not user.is_active or not verify_password(password, user.password_hash):
                logger.info(f"Failed login attempt for {email}")
                return None
            user.last_login_at = utcnow()

        logger.info(f"User logged in: {user.email}")
        return user
