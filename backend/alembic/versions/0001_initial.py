"""Initial schema: schools, users, availability, messaging, pregames, reviews.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "schools",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_schools"),
    )
    op.create_index("ix_schools_id", "schools", ["id"])
    op.create_index("ix_schools_slug", "schools", ["slug"], unique=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("profile_image", sa.Text(), nullable=True),
        sa.Column("gallery_images", sa.JSON(), nullable=True),
        sa.Column("group_size_min", sa.Integer(), nullable=True),
        sa.Column("group_size_max", sa.Integer(), nullable=True),
        sa.Column("preferences", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_is_active", "users", ["is_active"])

    op.create_table(
        "school_memberships",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("school_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.Enum("member", "admin", name="membership_role"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_school_memberships"),
        sa.ForeignKeyConstraint(
            ["school_id"], ["schools.id"], ondelete="CASCADE", name="fk_school_memberships_school_id_schools"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE", name="fk_school_memberships_user_id_users"),
        sa.UniqueConstraint("school_id", "user_id", name="uq_school_memberships_school_user"),
    )
    op.create_index("ix_school_memberships_id", "school_memberships", ["id"])
    op.create_index("ix_school_memberships_school_id", "school_memberships", ["school_id"])
    op.create_index("ix_school_memberships_user_id", "school_memberships", ["user_id"])

    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("school_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("member_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("group_type", sa.String(length=100), nullable=True),
        sa.Column("established_year", sa.Integer(), nullable=True),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("social_media", sa.JSON(), nullable=True),
        sa.Column("profile_image", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_organizations"),
        sa.ForeignKeyConstraint(
            ["school_id"], ["schools.id"], ondelete="CASCADE", name="fk_organizations_school_id_schools"
        ),
    )
    op.create_index("ix_organizations_id", "organizations", ["id"])
    op.create_index("ix_organizations_school_id", "organizations", ["school_id"])
    op.create_index("ix_organizations_contact_email", "organizations", ["contact_email"])

    op.create_table(
        "user_availability",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("state", sa.Enum("available", "planned", name="availability_state"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_user_availability"),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="fk_user_availability_user_id_users"
        ),
        sa.UniqueConstraint("user_id", "date", name="uq_user_availability_user_date"),
    )
    op.create_index("ix_user_availability_id", "user_availability", ["id"])
    op.create_index("ix_user_availability_user_id", "user_availability", ["user_id"])
    op.create_index("ix_user_availability_date", "user_availability", ["date"])

    op.create_table(
        "conversations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("school_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_conversations"),
        sa.ForeignKeyConstraint(
            ["school_id"], ["schools.id"], ondelete="CASCADE", name="fk_conversations_school_id_schools"
        ),
    )
    op.create_index("ix_conversations_id", "conversations", ["id"])
    op.create_index("ix_conversations_school_id", "conversations", ["school_id"])

    op.create_table(
        "conversation_participants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("conversation_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_conversation_participants"),
        sa.ForeignKeyConstraint(
            ["conversation_id"],
            ["conversations.id"],
            ondelete="CASCADE",
            name="fk_conversation_participants_conversation_id_conversations",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], ondelete="CASCADE", name="fk_conversation_participants_user_id_users"
        ),
        sa.UniqueConstraint(
            "conversation_id", "user_id", name="uq_conversation_participants_conversation_user"
        ),
    )
    op.create_index("ix_conversation_participants_id", "conversation_participants", ["id"])
    op.create_index("ix_conversation_participants_conversation_id", "conversation_participants", ["conversation_id"])
    op.create_index("ix_conversation_participants_user_id", "conversation_participants", ["user_id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("conversation_id", sa.Integer(), nullable=False),
        sa.Column("sender_id", sa.Integer(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_messages"),
        sa.ForeignKeyConstraint(
            ["conversation_id"],
            ["conversations.id"],
            ondelete="CASCADE",
            name="fk_messages_conversation_id_conversations",
        ),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"], name="fk_messages_sender_id_users"),
    )
    op.create_index("ix_messages_id", "messages", ["id"])
    op.create_index("ix_messages_conversation_id", "messages", ["conversation_id"])
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"])

    op.create_table(
        "pregames",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("school_id", sa.Integer(), nullable=False),
        sa.Column("creator_id", sa.Integer(), nullable=False),
        sa.Column("participant_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(length=5), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_pregames"),
        sa.ForeignKeyConstraint(["school_id"], ["schools.id"], ondelete="CASCADE", name="fk_pregames_school_id_schools"),
        sa.ForeignKeyConstraint(["creator_id"], ["users.id"], name="fk_pregames_creator_id_users"),
        sa.ForeignKeyConstraint(["participant_id"], ["users.id"], name="fk_pregames_participant_id_users"),
    )
    op.create_index("ix_pregames_id", "pregames", ["id"])
    op.create_index("ix_pregames_school_id", "pregames", ["school_id"])
    op.create_index("ix_pregames_creator_id", "pregames", ["creator_id"])
    op.create_index("ix_pregames_participant_id", "pregames", ["participant_id"])
    op.create_index("ix_pregames_date", "pregames", ["date"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("pregame_id", sa.Integer(), nullable=False),
        sa.Column("reviewer_id", sa.Integer(), nullable=False),
        sa.Column("reviewee_id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_reviews"),
        sa.ForeignKeyConstraint(["pregame_id"], ["pregames.id"], ondelete="CASCADE", name="fk_reviews_pregame_id_pregames"),
        sa.ForeignKeyConstraint(["reviewer_id"], ["users.id"], name="fk_reviews_reviewer_id_users"),
        sa.ForeignKeyConstraint(["reviewee_id"], ["users.id"], name="fk_reviews_reviewee_id_users"),
        sa.UniqueConstraint("pregame_id", "reviewer_id", name="uq_reviews_pregame_reviewer"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
    )
    op.create_index("ix_reviews_id", "reviews", ["id"])
    op.create_index("ix_reviews_pregame_id", "reviews", ["pregame_id"])
    op.create_index("ix_reviews_reviewer_id", "reviews", ["reviewer_id"])
    op.create_index("ix_reviews_reviewee_id", "reviews", ["reviewee_id"])

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("actor_user_id", sa.Integer(), nullable=True),
        sa.Column("type", sa.String(length=64), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("payload_json", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_activity_logs"),
        sa.ForeignKeyConstraint(["actor_user_id"], ["users.id"], name="fk_activity_logs_actor_user_id_users"),
    )
    op.create_index("ix_activity_logs_id", "activity_logs", ["id"])
    op.create_index("ix_activity_logs_actor_user_id", "activity_logs", ["actor_user_id"])
    op.create_index("ix_activity_logs_type", "activity_logs", ["type"])


def downgrade() -> None:
    for table in (
        "activity_logs",
        "reviews",
        "pregames",
        "messages",
        "conversation_participants",
        "conversations",
        "user_availability",
        "organizations",
        "school_memberships",
        "users",
        "schools",
    ):
        op.drop_table(table)
    bind = op.get_bind()
    if bind.dialect.name != "sqlite":
        sa.Enum(name="availability_state").drop(bind, checkfirst=True)
        sa.Enum(name="membership_role").drop(bind, checkfirst=True)
