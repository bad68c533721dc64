"""
User Repository.
"""

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from gumboard.backend.models.organization import User
from gumboard.backend.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Read access to users and their organization membership."""

    model = User

    async def get_with_organization(self, user_id: str) -> User | None:
        """
        Get a user with the owning organization eagerly loaded.

        The organization carries the webhook URLs used by note notifications.
        """
        result = await self.session.execute(
            select(User)
            .options(selectinload(User.organization))
            .where(User.id == str(user_id))
        )
        return result.scalar_one_or_none()
