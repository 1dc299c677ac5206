"""004: seed initial data

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

from src.bk_gateway.auth.password import hash_password

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# email, password, first name, last name, role, locked
_USERS = [
    ("admin@bakery.example", "admin", "Göran", "Rich", "admin", True),
    ("baker@bakery.example", "baker", "Heidi", "Carter", "baker", False),
    ("barista@bakery.example", "barista", "Malin", "Castro", "barista", True),
]

_PRODUCTS = [
    ("Strawberry Bun", 350),
    ("Blueberry Cheese Cake", 1250),
    ("Raspberry Tart", 825),
    ("Vanilla Cracker", 199),
    ("Bluebell Cake", 2400),
    ("Cinnamon Roll", 275),
]

_LOCATIONS = ["Store", "Bakery"]


def upgrade() -> None:
    conn = op.get_bind()
    # Demo accounts are locked so nobody can delete or edit them
    conn.execute(
        sa.text("""
            INSERT INTO users (email, password_hash, first_name, last_name, role, locked)
            VALUES (:email, :password_hash, :first_name, :last_name, :role, :locked)
        """),
        [
            {
                "email": email,
                "password_hash": hash_password(password),
                "first_name": first_name,
                "last_name": last_name,
                "role": role,
                "locked": locked,
            }
            for email, password, first_name, last_name, role, locked in _USERS
        ],
    )
    conn.execute(
        sa.text("INSERT INTO products (name, price) VALUES (:name, :price)"),
        [{"name": name, "price": price} for name, price in _PRODUCTS],
    )
    conn.execute(
        sa.text("INSERT INTO pickup_locations (name) VALUES (:name)"),
        [{"name": name} for name in _LOCATIONS],
    )


def downgrade() -> None:
    op.execute("DELETE FROM pickup_locations WHERE name IN ('Store', 'Bakery');")
    op.execute("""
        DELETE FROM products WHERE name IN (
            'Strawberry Bun', 'Blueberry Cheese Cake', 'Raspberry Tart',
            'Vanilla Cracker', 'Bluebell Cake', 'Cinnamon Roll'
        );
    """)
    op.execute("DELETE FROM users WHERE email LIKE '%@bakery.example';")
