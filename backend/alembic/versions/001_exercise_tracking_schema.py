"""Exercise tracking schema

Creates the tables for the exercise attempt tracker:
users, exercises, exercise_attempts and topic_progress.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ===========================================
    # Learners
    # ===========================================
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True),
        # beginner | intermediate
        sa.Column(
            "skill_level", sa.String(20), nullable=False, server_default="beginner"
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # ===========================================
    # Exercises (written by the content pipeline)
    # ===========================================
    op.create_table(
        "exercises",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("topic_id", sa.String(64), nullable=False, index=True),
        sa.Column("learning_path_id", sa.String(64), nullable=True),
        # multiple-choice | code-completion | debugging | coding
        sa.Column("exercise_type", sa.String(30), nullable=False),
        sa.Column("question", sa.Text(), nullable=False, server_default=""),
        sa.Column("correct_answer", sa.Text(), nullable=False, server_default=""),
        sa.Column("evaluation_criteria", sa.Text(), nullable=True),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )

    # ===========================================
    # Attempts (append-only)
    # ===========================================
    op.create_table(
        "exercise_attempts",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column(
            "content_id",
            sa.String(64),
            sa.ForeignKey("exercises.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("attempt_number", sa.Integer(), nullable=False),
        sa.Column("user_answer", sa.Text(), nullable=False),
        sa.Column("correct_answer", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_correct", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("score", sa.Float(), nullable=True),
        # AI feedback
        sa.Column("ai_feedback", sa.Text(), nullable=True),
        sa.Column("ai_suggestions", sa.JSON(), nullable=True),
        sa.Column("related_concepts", sa.JSON(), nullable=True),
        sa.Column("response_time", sa.Float(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "user_id", "content_id", "attempt_number", name="uq_attempt_number"
        ),
    )
    op.create_index(
        "ix_attempts_user_content", "exercise_attempts", ["user_id", "content_id"]
    )

    # ===========================================
    # Topic progress
    # ===========================================
    op.create_table(
        "topic_progress",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False, index=True),
        sa.Column("learning_path_id", sa.String(64), nullable=False),
        sa.Column("topic_id", sa.String(64), nullable=False),
        # not_started | in_progress | completed | mastered
        sa.Column(
            "status", sa.String(20), nullable=False, server_default="not_started"
        ),
        sa.Column("score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("time_spent", sa.Float(), nullable=False, server_default="0"),
        sa.Column("recent_scores", sa.JSON(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint(
            "user_id", "learning_path_id", "topic_id", name="uq_topic_progress"
        ),
    )


def downgrade() -> None:
    op.drop_table("topic_progress")
    op.drop_index("ix_attempts_user_content", table_name="exercise_attempts")
    op.drop_table("exercise_attempts")
    op.drop_table("exercises")
    op.drop_table("users")
