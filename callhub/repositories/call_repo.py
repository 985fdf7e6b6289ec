"""
Call repository for database operations.
Stores calls with their embedded participant history.
"""
from typing import List, Optional

from sqlalchemy import select, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from callhub.models.call import Call, CallParticipant
from callhub.repositories.base import BaseRepository


class CallRepository(BaseRepository[Call]):
    """Repository for call database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Call, db)

    async def insert(self, call: Call) -> Call:
        """
        Insert a new call together with its initial participants.

        Args:
            call: Transient call instance

        Returns:
            Persisted call
        """
        return await self.add(call)

    async def find_by_id(self, call_id: str) -> Optional[Call]:
        """
        Get a call with participants loaded.

        Rows already present in the session are overwritten with the current
        database state, so a read inside a retry sees concurrent writes.

        Args:
            call_id: Call ID

        Returns:
            Call or None
        """
        result = await self.db.execute(
            select(Call)
            .where(Call.id == call_id)
            .options(selectinload(Call.participants))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def update(self, call: Call) -> Call:
        """
        Persist a mutated call.

        The UPDATE is guarded by the version column; a concurrent writer
        makes the flush raise StaleDataError.

        Args:
            call: Persistent call with modified attributes

        Returns:
            Saved call
        """
        return await self.save(call)

    async def find_by_participant_or_creator(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0
    ) -> List[Call]:
        """
        Get calls a user created or took part in, newest first.

        Historical participant entries count, so calls the user already
        left are included.

        Args:
            user_id: User ID
            limit: Maximum calls to return
            offset: Number of calls to skip

        Returns:
            Calls ordered by started_at descending
        """
        participant_subquery = (
            select(CallParticipant.call_id)
            .where(CallParticipant.user_id == user_id)
        )

        query = (
            select(Call)
            .where(
                or_(
                    Call.created_by == user_id,
                    Call.id.in_(participant_subquery),
                )
            )
            .options(selectinload(Call.participants))
            .order_by(desc(Call.started_at), desc(Call.id))
            .limit(limit)
            .offset(offset)
        )

        result = await self.db.execute(query)
        return list(result.scalars().all())
