"""Create users and friend graph schema

Revision ID: v1
Revises: 
Create Date: 2025-10-01 00:00:00

Creates users, friend_requests, friendships (directed friend edges) and
favorites (subset of friendships).
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'v1'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("full_name", sa.String(), nullable=False, server_default=""),
        sa.Column("profile_pic", sa.String(), nullable=False, server_default=""),
        sa.Column("bio", sa.Text(), nullable=False, server_default=""),
        sa.Column("native_language", sa.String(), nullable=False, server_default=""),
        sa.Column("learning_language", sa.String(), nullable=False, server_default=""),
        sa.Column("location", sa.String(), nullable=False, server_default=""),
        sa.Column("is_onboarded", sa.Boolean(), nullable=False, server_default='false'),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_is_onboarded"), "users", ["is_onboarded"], unique=False)

    # Create friend_requests table; user_low_id and user_high_id hold the two user ids in sorted order
    op.create_table(
        "friend_requests",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("sender_id", sa.String(), nullable=False),
        sa.Column("recipient_id", sa.String(), nullable=False),
        sa.Column("user_low_id", sa.String(), nullable=False),
        sa.Column("user_high_id", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recipient_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_low_id", "user_high_id", name="unique_friend_request_pair"),
    )
    op.create_index(op.f("ix_friend_requests_id"), "friend_requests", ["id"], unique=False)
    op.create_index(op.f("ix_friend_requests_sender_id"), "friend_requests", ["sender_id"], unique=False)
    op.create_index(op.f("ix_friend_requests_recipient_id"), "friend_requests", ["recipient_id"], unique=False)
    op.create_index(op.f("ix_friend_requests_status"), "friend_requests", ["status"], unique=False)

    # Create friendships table (one row per direction)
    op.create_table(
        "friendships",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("friend_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["friend_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("user_id", "friend_id"),
    )
    op.create_index(op.f("ix_friendships_friend_id"), "friendships", ["friend_id"], unique=False)

    # Create favorites table; the composite key must reference an existing friend edge
    op.create_table(
        "favorites",
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("friend_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["user_id", "friend_id"],
            ["friendships.user_id", "friendships.friend_id"],
            ondelete="CASCADE",
            name="fk_favorites_friendship",
        ),
        sa.PrimaryKeyConstraint("user_id", "friend_id"),
    )


def downgrade() -> None:
    op.drop_table("favorites")
    op.drop_index(op.f("ix_friendships_friend_id"), table_name="friendships")
    op.drop_table("friendships")
    op.drop_index(op.f("ix_friend_requests_status"), table_name="friend_requests")
    op.drop_index(op.f("ix_friend_requests_recipient_id"), table_name="friend_requests")
    op.drop_index(op.f("ix_friend_requests_sender_id"), table_name="friend_requests")
    op.drop_index(op.f("ix_friend_requests_id"), table_name="friend_requests")
    op.drop_table("friend_requests")
    op.drop_index(op.f("ix_users_is_onboarded"), table_name="users")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")
