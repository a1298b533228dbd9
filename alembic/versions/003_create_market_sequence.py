"""003: create market_sequence and seed the market id counter

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Not a PostgreSQL SEQUENCE: the counter must roll back with a failed create.
    op.execute("""
        CREATE TABLE market_sequence (
            name        VARCHAR(32)     PRIMARY KEY,
            next_id     BIGINT          NOT NULL,
            CONSTRAINT ck_market_sequence_positive CHECK (next_id >= 1)
        );
    """)
    op.execute("INSERT INTO market_sequence (name, next_id) VALUES ('markets', 1);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS market_sequence;")
