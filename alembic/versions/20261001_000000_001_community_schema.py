"""Community schema: shops, members, content, gamification.

Revision ID: 001
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _shop_fk(table: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint(
        ["shop_id"],
        ["shops.id"],
        name=op.f(f"fk_{table}_shop_id_shops"),
        ondelete="CASCADE",
    )


def upgrade() -> None:
    # Create enum types
    op.execute("CREATE TYPE member_role AS ENUM ('ADMIN', 'MODERATOR', 'MEMBER')")
    op.execute("CREATE TYPE post_status AS ENUM ('DRAFT', 'PUBLISHED', 'ARCHIVED')")
    op.execute(
        "CREATE TYPE reaction_type AS ENUM ('LIKE', 'LOVE', 'LAUGH', 'WOW', 'APPLAUSE')"
    )

    # Create shops table
    op.create_table(
        "shops",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_domain", sa.String(255), nullable=False),
        sa.Column("shop_name", sa.String(255), nullable=False),
        sa.Column("owner_id", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("settings", postgresql.JSONB(), nullable=False, server_default="{}"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_shops")),
    )
    op.create_index(op.f("ix_shops_shop_domain"), "shops", ["shop_domain"], unique=True)

    # Create members table
    op.create_table(
        "members",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        sa.Column(
            "role",
            postgresql.ENUM("ADMIN", "MODERATOR", "MEMBER", name="member_role", create_type=False),
            nullable=False,
            server_default="MEMBER",
        ),
        sa.Column("is_shop_owner", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        _shop_fk("members"),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_members")),
        sa.UniqueConstraint("shop_id", "email", name="uq_members_shop_id_email"),
    )
    op.create_index(op.f("ix_members_shop_id"), "members", ["shop_id"], unique=False)
    op.create_index(op.f("ix_members_email"), "members", ["email"], unique=False)

    # Create categories table
    op.create_table(
        "categories",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("color", sa.String(50), nullable=False, server_default="bg-gray-500"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        _shop_fk("categories"),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_categories")),
        sa.UniqueConstraint("shop_id", "name", name="uq_categories_shop_id_name"),
    )
    op.create_index(op.f("ix_categories_shop_id"), "categories", ["shop_id"], unique=False)

    # Create posts table
    op.create_table(
        "posts",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_id", sa.UUID(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("category_id", sa.UUID(), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("slug", sa.String(300), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(
                "DRAFT", "PUBLISHED", "ARCHIVED", name="post_status", create_type=False
            ),
            nullable=False,
            server_default="PUBLISHED",
        ),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        _shop_fk("posts"),
        sa.ForeignKeyConstraint(
            ["author_id"],
            ["members.id"],
            name=op.f("fk_posts_author_id_members"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["categories.id"],
            name=op.f("fk_posts_category_id_categories"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_posts")),
        sa.UniqueConstraint("shop_id", "slug", name="uq_posts_shop_id_slug"),
    )
    op.create_index(op.f("ix_posts_shop_id"), "posts", ["shop_id"], unique=False)
    op.create_index(op.f("ix_posts_author_id"), "posts", ["author_id"], unique=False)
    op.create_index(op.f("ix_posts_category_id"), "posts", ["category_id"], unique=False)

    # Create comments table
    op.create_table(
        "comments",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_id", sa.UUID(), nullable=False),
        sa.Column("post_id", sa.UUID(), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("parent_id", sa.UUID(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        _shop_fk("comments"),
        sa.ForeignKeyConstraint(
            ["post_id"],
            ["posts.id"],
            name=op.f("fk_comments_post_id_posts"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["author_id"],
            ["members.id"],
            name=op.f("fk_comments_author_id_members"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["parent_id"],
            ["comments.id"],
            name=op.f("fk_comments_parent_id_comments"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_comments")),
    )
    for column in ("shop_id", "post_id", "author_id", "parent_id"):
        op.create_index(op.f(f"ix_comments_{column}"), "comments", [column], unique=False)

    # Create reactions table
    op.create_table(
        "reactions",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_id", sa.UUID(), nullable=False),
        sa.Column("member_id", sa.UUID(), nullable=False),
        sa.Column("post_id", sa.UUID(), nullable=True),
        sa.Column("comment_id", sa.UUID(), nullable=True),
        sa.Column(
            "type",
            postgresql.ENUM(
                "LIKE", "LOVE", "LAUGH", "WOW", "APPLAUSE", name="reaction_type", create_type=False
            ),
            nullable=False,
        ),
        *_timestamps(),
        _shop_fk("reactions"),
        sa.ForeignKeyConstraint(
            ["member_id"],
            ["members.id"],
            name=op.f("fk_reactions_member_id_members"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["post_id"],
            ["posts.id"],
            name=op.f("fk_reactions_post_id_posts"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["comment_id"],
            ["comments.id"],
            name=op.f("fk_reactions_comment_id_comments"),
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(
            "(post_id IS NULL) <> (comment_id IS NULL)",
            name=op.f("ck_reactions_single_target"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_reactions")),
        sa.UniqueConstraint("post_id", "member_id", name="uq_reactions_post_id_member_id"),
        sa.UniqueConstraint("comment_id", "member_id", name="uq_reactions_comment_id_member_id"),
    )
    for column in ("shop_id", "member_id", "post_id", "comment_id"):
        op.create_index(op.f(f"ix_reactions_{column}"), "reactions", [column], unique=False)

    # Create polls, poll_options and poll_votes tables
    op.create_table(
        "polls",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_id", sa.UUID(), nullable=False),
        sa.Column("post_id", sa.UUID(), nullable=False),
        sa.Column("question", sa.String(500), nullable=False),
        *_timestamps(),
        _shop_fk("polls"),
        sa.ForeignKeyConstraint(
            ["post_id"],
            ["posts.id"],
            name=op.f("fk_polls_post_id_posts"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_polls")),
        sa.UniqueConstraint("post_id", name=op.f("uq_polls_post_id")),
    )
    op.create_index(op.f("ix_polls_shop_id"), "polls", ["shop_id"], unique=False)

    op.create_table(
        "poll_options",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_id", sa.UUID(), nullable=False),
        sa.Column("poll_id", sa.UUID(), nullable=False),
        sa.Column("text", sa.String(255), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        _shop_fk("poll_options"),
        sa.ForeignKeyConstraint(
            ["poll_id"],
            ["polls.id"],
            name=op.f("fk_poll_options_poll_id_polls"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_poll_options")),
    )
    op.create_index(op.f("ix_poll_options_shop_id"), "poll_options", ["shop_id"], unique=False)
    op.create_index(op.f("ix_poll_options_poll_id"), "poll_options", ["poll_id"], unique=False)

    op.create_table(
        "poll_votes",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_id", sa.UUID(), nullable=False),
        sa.Column("poll_id", sa.UUID(), nullable=False),
        sa.Column("option_id", sa.UUID(), nullable=False),
        sa.Column("member_id", sa.UUID(), nullable=False),
        *_timestamps(),
        _shop_fk("poll_votes"),
        sa.ForeignKeyConstraint(
            ["poll_id"],
            ["polls.id"],
            name=op.f("fk_poll_votes_poll_id_polls"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["option_id"],
            ["poll_options.id"],
            name=op.f("fk_poll_votes_option_id_poll_options"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["member_id"],
            ["members.id"],
            name=op.f("fk_poll_votes_member_id_members"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_poll_votes")),
        sa.UniqueConstraint("poll_id", "member_id", name="uq_poll_votes_poll_id_member_id"),
    )
    for column in ("shop_id", "poll_id", "option_id", "member_id"):
        op.create_index(op.f(f"ix_poll_votes_{column}"), "poll_votes", [column], unique=False)

    # Create badges table
    op.create_table(
        "badges",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=False),
        sa.Column("required_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        _shop_fk("badges"),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_badges")),
        sa.UniqueConstraint("shop_id", "name", name="uq_badges_shop_id_name"),
    )
    op.create_index(op.f("ix_badges_shop_id"), "badges", ["shop_id"], unique=False)

    # Create follows table
    op.create_table(
        "follows",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("shop_id", sa.UUID(), nullable=False),
        sa.Column("follower_id", sa.UUID(), nullable=False),
        sa.Column("following_id", sa.UUID(), nullable=False),
        *_timestamps(),
        _shop_fk("follows"),
        sa.ForeignKeyConstraint(
            ["follower_id"],
            ["members.id"],
            name=op.f("fk_follows_follower_id_members"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["following_id"],
            ["members.id"],
            name=op.f("fk_follows_following_id_members"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_follows")),
        sa.UniqueConstraint(
            "follower_id", "following_id", name="uq_follows_follower_id_following_id"
        ),
    )
    for column in ("shop_id", "follower_id", "following_id"):
        op.create_index(op.f(f"ix_follows_{column}"), "follows", [column], unique=False)


def downgrade() -> None:
    for table in (
        "follows",
        "badges",
        "poll_votes",
        "poll_options",
        "polls",
        "reactions",
        "comments",
        "posts",
        "categories",
        "members",
        "shops",
    ):
        op.drop_table(table)

    op.execute("DROP TYPE IF EXISTS reaction_type")
    op.execute("DROP TYPE IF EXISTS post_status")
    op.execute("DROP TYPE IF EXISTS member_role")
