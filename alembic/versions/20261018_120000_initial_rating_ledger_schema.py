"""Initial rating ledger schema

Revision ID: 5e1d0c7a3b92
Revises:
Create Date: 2026-10-18 12:00:00.000000+00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers, used by Alembic.
revision: str = "5e1d0c7a3b92"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "groups",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("current_season_id", sa.String(length=64), nullable=True),
        sa.Column("game_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "seasons",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("start_date", sa.DateTime(), nullable=True),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        sa.Column("game_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_seasons_group", "seasons", ["group_id"])

    op.create_table(
        "ratings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("season_id", sa.String(length=64), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=False),
        sa.Column("participant_id", sa.String(length=128), nullable=False),
        sa.Column("current_rating", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("games_played", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("wins", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("losses", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("draws", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("last_updated", sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "games_played >= 0 AND wins >= 0 AND losses >= 0 AND draws >= 0",
            name="ck_ratings_counters_non_negative",
        ),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"]),
        sa.ForeignKeyConstraint(["season_id"], ["seasons.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("season_id", "participant_id", name="uq_ratings_season_participant"),
    )
    op.create_index("idx_ratings_season_rating", "ratings", ["season_id", "current_rating"])
    op.create_index("idx_ratings_participant", "ratings", ["participant_id"])

    op.create_table(
        "match_results",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("season_id", sa.String(length=64), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=False),
        sa.Column("mode", sa.String(length=20), nullable=False),
        sa.Column("created_by", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("mode IN ('individual', 'team')", name="ck_match_results_mode"),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"]),
        sa.ForeignKeyConstraint(["season_id"], ["seasons.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_match_results_group_created", "match_results", ["group_id", "created_at"])
    op.create_index("idx_match_results_season", "match_results", ["season_id"])

    op.create_table(
        "participant_outcomes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("match_id", sa.String(length=36), nullable=False),
        sa.Column("participant_id", sa.String(length=128), nullable=False),
        sa.Column("placement", sa.Integer(), nullable=False),
        sa.Column("is_tied", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("team_id", sa.String(length=128), nullable=True),
        sa.Column("rating_before", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("rating_after", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("rating_change", sa.Integer(), nullable=False),
        sa.CheckConstraint("placement >= 1", name="ck_participant_outcomes_placement"),
        sa.ForeignKeyConstraint(["match_id"], ["match_results.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "match_id", "participant_id", name="uq_participant_outcomes_match_participant"
        ),
    )

    op.create_table(
        "rating_changes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("match_id", sa.String(length=36), nullable=False),
        sa.Column("participant_id", sa.String(length=128), nullable=False),
        sa.Column("season_id", sa.String(length=64), nullable=False),
        sa.Column("group_id", sa.String(length=64), nullable=False),
        sa.Column("rating_before", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("rating_after", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("rating_change", sa.Integer(), nullable=False),
        sa.Column("placement", sa.Integer(), nullable=False),
        sa.Column("is_tied", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("team_id", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"]),
        sa.ForeignKeyConstraint(["match_id"], ["match_results.id"]),
        sa.ForeignKeyConstraint(["season_id"], ["seasons.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("match_id", "participant_id", name="uq_rating_changes_match_participant"),
    )
    op.create_index(
        "idx_rating_changes_participant_season",
        "rating_changes",
        ["participant_id", "season_id", "created_at"],
    )
    op.create_index(
        "idx_rating_changes_participant_group",
        "rating_changes",
        ["participant_id", "group_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("idx_rating_changes_participant_group", table_name="rating_changes")
    op.drop_index("idx_rating_changes_participant_season", table_name="rating_changes")
    op.drop_table("rating_changes")
    op.drop_table("participant_outcomes")
    op.drop_index("idx_match_results_season", table_name="match_results")
    op.drop_index("idx_match_results_group_created", table_name="match_results")
    op.drop_table("match_results")
    op.drop_index("idx_ratings_participant", table_name="ratings")
    op.drop_index("idx_ratings_season_rating", table_name="ratings")
    op.drop_table("ratings")
    op.drop_index("idx_seasons_group", table_name="seasons")
    op.drop_table("seasons")
    op.drop_table("groups")
