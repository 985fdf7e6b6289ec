"""
Call service containing the call lifecycle rules.
Handles call creation, membership changes, termination and history.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from callhub.config import settings
from callhub.core.exceptions import (
    Forbidden,
    InvalidState,
    NotFound,
    PersistenceError,
    SignalingProviderError,
    ValidationError,
)
from callhub.core.locks import KeyedLock, call_locks
from callhub.core.signaling import SignalingProvider
from callhub.models.base import generate_id
from callhub.models.call import Call, CallParticipant, CallStatus, CallType
from callhub.models.user import UserRole
from callhub.repositories.call_repo import CallRepository
from callhub.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

# Applies a change to a freshly read call at the given time.
# Returns False when nothing changed and no write is needed.
CallMutation = Callable[[Call, datetime], bool]


class CallService:
    """
    Service for call lifecycle operations.

    Every mutation runs as read-modify-write under a per-call lock and is
    committed with an optimistic version check, retried on conflict.
    """

    def __init__(
        self,
        db: AsyncSession,
        signaling: SignalingProvider,
        clock: Callable[[], datetime] = utc_now,
        locks: KeyedLock = call_locks,
        max_retries: Optional[int] = None,
    ):
        """
        Initialize call service.

        Args:
            db: Database session
            signaling: Signaling provider used for external calls
            clock: Source of the current time
            locks: Per-call lock registry
            max_retries: Attempts per mutation (defaults to settings)
        """
        self.db = db
        self.signaling = signaling
        self.clock = clock
        self.locks = locks
        self.max_retries = max_retries or settings.call_update_max_retries
        self.call_repo = CallRepository(db)

    async def _apply(self, call_id: str, mutation: CallMutation) -> Call:
        """Run a mutation against the current state of a call and persist it."""
        async with self.locks.acquire(call_id):
            for attempt in range(1, self.max_retries + 1):
                call = await self.call_repo.find_by_id(call_id)
                if call is None:
                    raise NotFound("Call not found")

                if not mutation(call, self.clock()):
                    return call

                try:
                    await self.call_repo.update(call)
                    await self.db.commit()
                    return call
                except (StaleDataError, IntegrityError) as e:
                    await self.db.rollback()
                    logger.warning(
                        f"Concurrent update on call {call_id} "
                        f"(attempt {attempt}/{self.max_retries}): {type(e).__name__}"
                    )
                except SQLAlchemyError as e:
                    await self.db.rollback()
                    raise PersistenceError(f"Failed to update call {call_id}: {e}") from e

        raise PersistenceError(
            f"Gave up updating call {call_id} after {self.max_retries} conflicting attempts"
        )

    async def _teardown_external(self, call_id: str, handle: Optional[str]) -> None:
        """End the external call. Failures are logged, local state stays as is."""
        if not handle:
            return
        try:
            await self.signaling.end_call(handle)
        except SignalingProviderError as e:
            logger.warning(f"Failed to end external call {handle} for call {call_id}: {e.message}")

    async def create_call(
        self,
        user_id: str,
        call_id: Optional[str] = None,
        name: Optional[str] = None,
        call_type: CallType = CallType.DEFAULT,
        audio: Optional[bool] = None,
        video: Optional[bool] = None,
    ) -> Call:
        """
        Create a call owned by the caller, who becomes its first participant.

        The external call is requested first; if the provider fails nothing
        is stored.

        Args:
            user_id: Caller user ID
            call_id: Client-chosen call ID (generated when omitted)
            name: Display name; audio rooms without one get "Room-<epoch ms>"
            call_type: Provider call type
            audio: Audio enabled (default on)
            video: Video enabled (default on, off for audio rooms)

        Returns:
            Created call

        Raises:
            ValidationError: If a call with the given ID already exists
            SignalingProviderError: If the external call cannot be created
            PersistenceError: If the call cannot be saved
        """
        if call_id is None:
            call_id = generate_id()
        elif await self.call_repo.get(call_id) is not None:
            raise ValidationError("Call already exists with this id")

        handle = await self.signaling.create_call(call_id, user_id, call_type)

        now = self.clock()
        if name is None and call_type == CallType.AUDIO_ROOM:
            name = f"Room-{int(now.timestamp() * 1000)}"

        call = Call(
            id=call_id,
            created_by=user_id,
            status=CallStatus.CREATED,
            name=name,
            call_type=call_type,
            audio_enabled=True if audio is None else audio,
            video_enabled=(call_type != CallType.AUDIO_ROOM) if video is None else video,
            started_at=now,
            updated_at=now,
            external_call_handle=handle,
            participants=[CallParticipant(user_id=user_id, joined_at=now)],
        )

        try:
            await self.call_repo.insert(call)
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            await self._teardown_external(call_id, handle)
            if await self.call_repo.get(call_id) is not None:
                raise ValidationError("Call already exists with this id") from e
            raise PersistenceError(f"Failed to save call {call_id}: {e}") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            await self._teardown_external(call_id, handle)
            raise PersistenceError(f"Failed to save call {call_id}: {e}") from e

        logger.info(f"User {user_id} created {call_type.value} call {call_id}")
        return call

    async def join_call(self, call_id: str, user_id: str) -> Call:
        """
        Add the caller to a call.

        Joining again while still active changes nothing. The first new
        participant moves a created call to active.

        Raises:
            NotFound: If the call does not exist
            InvalidState: If the call has ended
        """
        def join(call: Call, now: datetime) -> bool:
            if call.is_ended:
                raise InvalidState("This call has ended")

            if call.find_active_participant(user_id) is not None:
                return False

            call.participants.append(CallParticipant(user_id=user_id, joined_at=now))
            if call.status == CallStatus.CREATED:
                call.status = CallStatus.ACTIVE
            call.updated_at = now
            return True

        call = await self._apply(call_id, join)
        logger.info(f"User {user_id} joined call {call_id} (status={call.status.value})")
        return call

    async def leave_call(self, call_id: str, user_id: str) -> Call:
        """
        Remove the caller from a call.

        Ownership passes to the earliest-joined remaining participant when the
        owner leaves. The last participant out ends the call. Leaving a call
        the caller is not active in is a no-op.

        Raises:
            NotFound: If the call does not exist
        """
        # Outcome of the attempt that was committed; reset on every retry
        ended_by_departure = False
        previous_owner: Optional[str] = None

        def leave(call: Call, now: datetime) -> bool:
            nonlocal ended_by_departure, previous_owner
            ended_by_departure = False
            previous_owner = call.created_by

            participant = call.find_active_participant(user_id)
            if participant is None:
                return False

            participant.left_at = now
            remaining = call.active_participants()

            if not remaining:
                call.status = CallStatus.ENDED
                call.ended_at = now
                ended_by_departure = True
            elif call.created_by == user_id:
                call.created_by = remaining[0].user_id

            call.updated_at = now
            return True

        call = await self._apply(call_id, leave)

        if ended_by_departure:
            logger.info(f"Call {call_id} ended after last participant {user_id} left")
            await self._teardown_external(call_id, call.external_call_handle)
        elif call.created_by != previous_owner:
            logger.info(f"Call {call_id} ownership moved from {previous_owner} to {call.created_by}")

        return call

    async def end_call(self, call_id: str, user_id: str, role: UserRole) -> Call:
        """
        End a call for everyone.

        Only the owner or an admin may end a call. Open membership spans are
        closed at the end time. The external call is torn down after the
        local commit and its failure does not undo the end.

        Raises:
            NotFound: If the call does not exist
            Forbidden: If the caller is neither owner nor admin
            InvalidState: If the call has already ended
        """
        def end(call: Call, now: datetime) -> bool:
            if call.created_by != user_id and role != UserRole.ADMIN:
                raise Forbidden("Not authorized to end this call")

            if call.is_ended:
                raise InvalidState("Call is already ended")

            call.status = CallStatus.ENDED
            call.ended_at = now
            for participant in call.participants:
                if participant.left_at is None:
                    participant.left_at = now
            call.updated_at = now
            return True

        call = await self._apply(call_id, end)
        logger.info(f"User {user_id} ended call {call_id} after {call.duration:.1f}s")

        await self._teardown_external(call_id, call.external_call_handle)
        return call

    async def get_call_details(self, call_id: str) -> Call:
        """
        Get a call with its participant history.

        Raises:
            NotFound: If the call does not exist
        """
        call = await self.call_repo.find_by_id(call_id)
        if call is None:
            raise NotFound("Call not found")
        return call

    async def list_calls_for_identity(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0
    ) -> List[Call]:
        """
        Get calls the caller created or took part in, newest first.

        Args:
            user_id: Caller user ID
            limit: Maximum calls to return
            offset: Number of calls to skip

        Returns:
            Calls ordered by started_at descending
        """
        return await self.call_repo.find_by_participant_or_creator(
            user_id,
            limit=limit,
            offset=offset
        )
