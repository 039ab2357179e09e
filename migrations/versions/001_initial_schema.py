"""Route query history table.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── route_queries ─────────────────────────────────────────────────
    op.create_table(
        "route_queries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("origin_lat", sa.Float, nullable=False),
        sa.Column("origin_lng", sa.Float, nullable=False),
        sa.Column(
            "mode",
            sa.Enum(
                "TIME",
                "DISTANCE",
                "FUEL",
                "COST",
                "BALANCED",
                name="optimizationmode",
            ),
            nullable=False,
        ),
        sa.Column("candidate_count", sa.Integer, default=0, nullable=False),
        sa.Column("best_label", sa.String(120), nullable=True),
        sa.Column("best_destination_lat", sa.Float, nullable=True),
        sa.Column("best_destination_lng", sa.Float, nullable=True),
        sa.Column("best_distance_km", sa.Float, nullable=True),
        sa.Column("best_score", sa.Float, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_route_queries_created", "route_queries", ["created_at"])
    op.create_index("idx_route_queries_mode", "route_queries", ["mode"])


def downgrade() -> None:
    op.drop_table("route_queries")
    op.execute("DROP TYPE IF EXISTS optimizationmode")
