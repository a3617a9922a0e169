"""Poll voting and results."""

import logging
from collections import Counter
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from community.models.member import Member
from community.models.poll import Poll, PollOption, PollVote
from community.schemas.post import PollCreate, PollOptionResponse, PollResponse

logger = logging.getLogger(__name__)


def build_poll_response(poll: Poll, member_id: UUID | None = None) -> PollResponse:
    """Results of a poll whose options and votes are loaded."""
    counts = Counter(vote.option_id for vote in poll.votes)
    my_vote = next(
        (vote.option_id for vote in poll.votes if member_id and vote.member_id == member_id),
        None,
    )

    return PollResponse(
        id=poll.id,
        question=poll.question,
        options=[
            PollOptionResponse(
                id=option.id,
                text=option.text,
                order=option.order,
                votes=counts.get(option.id, 0),
            )
            for option in poll.options
        ],
        total_votes=len(poll.votes),
        my_vote_option_id=my_vote,
    )


class PollService:
    """Service for polls attached to posts."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def create_poll(self, shop_id: UUID, data: PollCreate) -> Poll:
        """Build a poll with its options in submission order; the caller attaches it to a post."""
        return Poll(
            shop_id=shop_id,
            question=data.question,
            options=[
                PollOption(shop_id=shop_id, text=option.text, order=index)
                for index, option in enumerate(data.options)
            ],
            votes=[],
        )

    async def get_poll_for_post(self, post_id: UUID, shop_id: UUID) -> Poll | None:
        """Get a post's poll with options and votes, scoped to shop."""
        query = (
            select(Poll)
            .where(
                Poll.post_id == post_id,
                Poll.shop_id == shop_id,
            )
            .options(
                selectinload(Poll.options),
                selectinload(Poll.votes),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def vote(self, poll: Poll, member: Member, option_id: UUID) -> PollVote | None:
        """Cast or move a member's vote.

        Returns:
            The vote, or None when the option is not part of this poll
        """
        if option_id not in {option.id for option in poll.options}:
            return None

        existing = next((v for v in poll.votes if v.member_id == member.id), None)
        if existing:
            existing.option_id = option_id
            await self.db.flush()
            return existing

        vote = PollVote(
            shop_id=poll.shop_id,
            poll_id=poll.id,
            option_id=option_id,
            member_id=member.id,
        )
        poll.votes.append(vote)
        await self.db.flush()
        logger.debug("Member %s voted in poll %s", member.id, poll.id)
        return vote

    async def withdraw_vote(self, poll: Poll, member: Member) -> bool:
        """Remove a member's vote. Returns False when they had not voted."""
        existing = next((v for v in poll.votes if v.member_id == member.id), None)
        if existing is None:
            return False

        poll.votes.remove(existing)
        await self.db.delete(existing)
        await self.db.flush()
        return True
