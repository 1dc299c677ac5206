"""002: create products and pickup_locations tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id              BIGSERIAL       PRIMARY KEY,
            version         INT             NOT NULL DEFAULT 0,
            name            VARCHAR(255)    NOT NULL,
            price           INT             NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_products_name     UNIQUE (name),
            CONSTRAINT ck_products_price    CHECK (price >= 0 AND price <= 100000)
        );
    """)
    op.execute("""
        CREATE TABLE pickup_locations (
            id              BIGSERIAL       PRIMARY KEY,
            version         INT             NOT NULL DEFAULT 0,
            name            VARCHAR(255)    NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_pickup_locations_name UNIQUE (name)
        );
    """)
    for table in ("products", "pickup_locations"):
        op.execute(f"""
            CREATE TRIGGER trg_{table}_updated_at
                BEFORE UPDATE ON {table}
                FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
        """)
    op.execute("COMMENT ON COLUMN products.price IS 'Unit price in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS pickup_locations CASCADE;")
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
