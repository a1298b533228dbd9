"""002: create positions table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE positions (
            market_id       BIGINT          NOT NULL REFERENCES markets (id),
            user_id         VARCHAR(255)    NOT NULL,
            yes_shares      NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            no_shares       NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            yes_amount      NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            no_amount       NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            claimed         BOOLEAN         NOT NULL DEFAULT FALSE,
            last_bet_time   TIMESTAMPTZ,
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (market_id, user_id),
            CONSTRAINT ck_positions_non_negative
                CHECK (yes_shares >= 0 AND no_shares >= 0
                       AND yes_amount >= 0 AND no_amount >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_positions_user ON positions (user_id, market_id);")
    op.execute("""
        CREATE TRIGGER trg_positions_updated_at
            BEFORE UPDATE ON positions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS positions CASCADE;")
