"""003: create customers, orders, order_items and history_items tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE customers (
            id              BIGSERIAL       PRIMARY KEY,
            version         INT             NOT NULL DEFAULT 0,
            full_name       VARCHAR(255)    NOT NULL,
            phone_number    VARCHAR(20)     NOT NULL,
            details         VARCHAR(255)
        );
    """)
    op.execute("""
        CREATE TABLE orders (
            id                  BIGSERIAL       PRIMARY KEY,
            version             INT             NOT NULL DEFAULT 0,
            state               VARCHAR(16)     NOT NULL DEFAULT 'NEW',
            due_date            DATE            NOT NULL,
            due_time            TIME            NOT NULL,
            paid                BOOLEAN         NOT NULL DEFAULT FALSE,
            customer_id         BIGINT          NOT NULL REFERENCES customers (id),
            pickup_location_id  BIGINT          NOT NULL
                                REFERENCES pickup_locations (id) ON DELETE RESTRICT,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_state CHECK (
                state IN ('NEW', 'CONFIRMED', 'READY', 'DELIVERED', 'PROBLEM', 'CANCELLED')
            )
        );
    """)
    op.execute("CREATE INDEX idx_orders_due ON orders (due_date, due_time, id);")
    op.execute("CREATE INDEX idx_orders_state ON orders (state);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE order_items (
            id              BIGSERIAL       PRIMARY KEY,
            order_id        BIGINT          NOT NULL REFERENCES orders (id) ON DELETE CASCADE,
            position        INT             NOT NULL,
            product_id      BIGINT          NOT NULL
                            REFERENCES products (id) ON DELETE RESTRICT,
            quantity        INT             NOT NULL,
            comment         VARCHAR(255),
            CONSTRAINT ck_order_items_quantity CHECK (quantity >= 1)
        );
    """)
    op.execute("CREATE INDEX idx_order_items_order ON order_items (order_id, position);")
    op.execute("""
        CREATE TABLE history_items (
            id              BIGSERIAL       PRIMARY KEY,
            order_id        BIGINT          NOT NULL REFERENCES orders (id) ON DELETE CASCADE,
            message         VARCHAR(255)    NOT NULL,
            new_state       VARCHAR(16),
            timestamp       TIMESTAMPTZ     NOT NULL,
            created_by_id   BIGINT          NOT NULL
                            REFERENCES users (id) ON DELETE RESTRICT
        );
    """)
    op.execute("CREATE INDEX idx_history_items_order ON history_items (order_id, id);")
    op.execute("COMMENT ON TABLE history_items IS 'Append-only order audit trail';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS history_items CASCADE;")
    op.execute("DROP TABLE IF EXISTS order_items CASCADE;")
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
    op.execute("DROP TABLE IF EXISTS customers CASCADE;")
