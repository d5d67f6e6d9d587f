# File: /alembic/versions/0001_grid_tables.py | Version: 1.0 | Title: Bases, tables, columns, rows and saved views
"""grid tables"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_grid_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        # trigram GIN indexes are created on demand by the index advisor
        op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")

    cell_map = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")

    op.create_table(
        "grid_base",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(80), nullable=False),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_grid_base_owner_id", "grid_base", ["owner_id"])

    op.create_table(
        "data_table",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("base_id", sa.String(), sa.ForeignKey("grid_base.id"), nullable=False),
        sa.Column("name", sa.String(80), nullable=False),
        sa.Column("next_row_index", sa.Integer(), nullable=False),
        sa.Column("row_count", sa.Integer(), nullable=False),
        sa.Column("next_column_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_data_table_base_id", "data_table", ["base_id"])

    op.create_table(
        "table_column",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("table_id", sa.String(), sa.ForeignKey("data_table.id"), nullable=False),
        sa.Column("name", sa.String(80), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.UniqueConstraint("table_id", "order", name="uq_table_column_order"),
    )
    op.create_index("ix_table_column_table_id", "table_column", ["table_id"])

    op.create_table(
        "table_row",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("table_id", sa.String(), sa.ForeignKey("data_table.id"), nullable=False),
        sa.Column("row_index", sa.Integer(), nullable=False),
        sa.Column("cells", cell_map, nullable=False),
        sa.Column("search_text", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("table_id", "row_index", name="uq_table_row_index"),
    )
    op.create_index("ix_table_row_table_id", "table_row", ["table_id"])

    op.create_table(
        "views",
        sa.Column("id", sa.String(), primary_key=True, nullable=False),
        sa.Column("table_id", sa.String(), sa.ForeignKey("data_table.id"), nullable=False),
        sa.Column("name", sa.String(80), nullable=False),
        sa.Column("config", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    )
    op.create_index("ix_views_table", "views", ["table_id"])


def downgrade():
    op.drop_index("ix_views_table", table_name="views")
    op.drop_table("views")
    op.drop_index("ix_table_row_table_id", table_name="table_row")
    op.drop_table("table_row")
    op.drop_index("ix_table_column_table_id", table_name="table_column")
    op.drop_table("table_column")
    op.drop_index("ix_data_table_base_id", table_name="data_table")
    op.drop_table("data_table")
    op.drop_index("ix_grid_base_owner_id", table_name="grid_base")
    op.drop_table("grid_base")
