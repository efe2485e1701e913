from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "5c1f3a9d2b74"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "properties",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("price_min", sa.Numeric(14, 2), nullable=False),
        sa.Column("price_max", sa.Numeric(14, 2)),
        sa.Column("bedrooms_min", sa.Integer, nullable=False),
        sa.Column("bedrooms_max", sa.Integer),
        sa.Column("ai_overview", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    # Search filters on these; default ordering is created_at desc
    op.create_index("idx_properties_location", "properties", ["location"])
    op.create_index("idx_properties_bedrooms_min", "properties", ["bedrooms_min"])
    op.create_index("idx_properties_price_min", "properties", ["price_min"])
    op.create_index("idx_properties_created_at", "properties", [sa.text("created_at DESC")])

def downgrade():
    op.drop_index("idx_properties_created_at", table_name="properties")
    op.drop_index("idx_properties_price_min", table_name="properties")
    op.drop_index("idx_properties_bedrooms_min", table_name="properties")
    op.drop_index("idx_properties_location", table_name="properties")
    op.drop_table("properties")
