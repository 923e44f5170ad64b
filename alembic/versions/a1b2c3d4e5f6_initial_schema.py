"""Initial schema: runs, streaks, freezes, workouts, sets and personal records

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19

Table and column names match the on-device schema of earlier app versions so
existing databases keep working.
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "runs",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("distance", sa.Float(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("pace", sa.Float(), nullable=False),
        sa.Column("runType", sa.String(length=20), nullable=False),
        sa.Column("routeName", sa.String(length=255), nullable=True),
        sa.Column("weather", sa.String(length=100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("createdAt", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updatedAt", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_runs_date"), "runs", ["date"], unique=False)

    op.create_table(
        "streaks",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("startDate", sa.Date(), nullable=False),
        sa.Column("endDate", sa.Date(), nullable=True),
        sa.Column("currentLength", sa.Integer(), nullable=False),
        sa.Column("isActive", sa.Boolean(), nullable=False),
        sa.Column("freezesUsed", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
    )
    # At most one active streak
    op.create_index(
        "ix_streaks_single_active",
        "streaks",
        ["isActive"],
        unique=True,
        sqlite_where=sa.text('"isActive" = 1'),
        postgresql_where=sa.text('"isActive"'),
    )

    op.create_table(
        "streak_freezes",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("streakId", sa.String(length=36), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["streakId"], ["streaks.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_streak_freezes_streakId"), "streak_freezes", ["streakId"], unique=False
    )

    op.create_table(
        "workouts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("tags", sa.Text(), nullable=True),
        sa.Column("createdAt", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updatedAt", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_workouts_date"), "workouts", ["date"], unique=False)

    op.create_table(
        "exercises",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("workoutId", sa.String(length=36), nullable=False),
        sa.Column("exerciseLibraryId", sa.String(length=255), nullable=False),
        sa.Column("exerciseName", sa.String(length=255), nullable=False),
        sa.Column("muscleGroups", sa.Text(), nullable=False),
        sa.Column("orderIndex", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["workoutId"], ["workouts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_exercises_workoutId"), "exercises", ["workoutId"], unique=False)
    op.create_index(
        op.f("ix_exercises_exerciseLibraryId"), "exercises", ["exerciseLibraryId"], unique=False
    )

    op.create_table(
        "sets",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("exerciseId", sa.String(length=36), nullable=False),
        sa.Column("setNumber", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("rpe", sa.Float(), nullable=True),
        sa.Column("isWarmup", sa.Boolean(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["exerciseId"], ["exercises.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sets_exerciseId"), "sets", ["exerciseId"], unique=False)

    op.create_table(
        "personal_records",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("exerciseLibraryId", sa.String(length=255), nullable=False),
        sa.Column("recordType", sa.String(length=20), nullable=False),
        sa.Column("value", sa.Float(), nullable=False),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("reps", sa.Integer(), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("workoutId", sa.String(length=36), nullable=True),
        sa.Column("setId", sa.String(length=36), nullable=True),
        sa.ForeignKeyConstraint(["workoutId"], ["workouts.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_personal_records_exercise_type",
        "personal_records",
        ["exerciseLibraryId", "recordType"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_personal_records_exercise_type", table_name="personal_records")
    op.drop_table("personal_records")
    op.drop_index(op.f("ix_sets_exerciseId"), table_name="sets")
    op.drop_table("sets")
    op.drop_index(op.f("ix_exercises_exerciseLibraryId"), table_name="exercises")
    op.drop_index(op.f("ix_exercises_workoutId"), table_name="exercises")
    op.drop_table("exercises")
    op.drop_index(op.f("ix_workouts_date"), table_name="workouts")
    op.drop_table("workouts")
    op.drop_index(op.f("ix_streak_freezes_streakId"), table_name="streak_freezes")
    op.drop_table("streak_freezes")
    op.drop_index("ix_streaks_single_active", table_name="streaks")
    op.drop_table("streaks")
    op.drop_index(op.f("ix_runs_date"), table_name="runs")
    op.drop_table("runs")
