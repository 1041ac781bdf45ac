"""Create questions tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates users, questions, encounters, votes, answers and comments.
How:   PostgreSQL UUID keys generated server-side, TIMESTAMP WITH TIME ZONE,
       native enum types for question type and vote.

Rollback: downgrade() drops every table and both enum types (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

QUESTION_TYPES = ("CODING", "SYSTEM_DESIGN", "BEHAVIORAL", "THEORY")
VOTE_VALUES = ("NO_VOTE", "UPVOTE", "DOWNVOTE")


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=True),
        server_default=sa.text("gen_random_uuid()"),
        nullable=False,
    )


def _timestamp_column(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def _user_fk_column() -> sa.Column:
    return sa.Column(
        "user_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )


def _question_fk_column() -> sa.Column:
    return sa.Column(
        "question_id",
        postgresql.UUID(as_uuid=True),
        sa.ForeignKey("questions_questions.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Create all tables, constraints and indexes."""
    op.create_table(
        "users",
        _id_column(),
        sa.Column("name", sa.String(255), nullable=True),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "questions_questions",
        _id_column(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "question_type",
            sa.Enum(*QUESTION_TYPES, name="questions_question_type"),
            nullable=False,
        ),
        _user_fk_column(),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_questions_created_at",
        "questions_questions",
        [sa.text("created_at DESC")],
    )
    op.create_index(
        "idx_questions_question_type",
        "questions_questions",
        ["question_type"],
    )

    # Encounters are read in (created_at, id) order; the first is canonical
    op.create_table(
        "questions_question_encounters",
        _id_column(),
        _question_fk_column(),
        _user_fk_column(),
        sa.Column("company", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("role", sa.String(255), nullable=True),
        sa.Column("seen_at", sa.TIMESTAMP(timezone=True), nullable=False),
        _timestamp_column("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_question_encounters_question_id",
        "questions_question_encounters",
        ["question_id", "created_at"],
    )

    op.create_table(
        "questions_question_votes",
        _id_column(),
        _question_fk_column(),
        _user_fk_column(),
        sa.Column(
            "vote",
            sa.Enum(*VOTE_VALUES, name="questions_vote"),
            nullable=False,
        ),
        _timestamp_column("created_at"),
        _timestamp_column("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "question_id", "user_id", name="uq_question_votes_question_user"
        ),
    )

    for table in ("questions_question_answers", "questions_question_comments"):
        op.create_table(
            table,
            _id_column(),
            _question_fk_column(),
            _user_fk_column(),
            sa.Column("content", sa.Text(), nullable=False),
            _timestamp_column("created_at"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(f"ix_{table}_question_id", table, ["question_id"])


def downgrade() -> None:
    """Drop every table and enum type (all data is lost)."""
    for table in ("questions_question_comments", "questions_question_answers"):
        op.drop_index(f"ix_{table}_question_id", table_name=table)
        op.drop_table(table)
    op.drop_table("questions_question_votes")
    op.drop_index(
        "idx_question_encounters_question_id",
        table_name="questions_question_encounters",
    )
    op.drop_table("questions_question_encounters")
    op.drop_index("idx_questions_question_type", table_name="questions_questions")
    op.drop_index("idx_questions_created_at", table_name="questions_questions")
    op.drop_table("questions_questions")
    op.drop_table("users")
    sa.Enum(name="questions_vote").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="questions_question_type").drop(op.get_bind(), checkfirst=True)
