"""001: create markets table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    # Pools and share totals are u64: NUMERIC(20, 0) holds 0 .. 2^64-1.
    op.execute("""
        CREATE TABLE markets (
            id                  BIGINT          PRIMARY KEY,
            question            TEXT            NOT NULL,
            category_kind       VARCHAR(16)     NOT NULL,
            category_data       JSONB           NOT NULL,
            end_time            TIMESTAMPTZ     NOT NULL,
            yes_pool            NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            no_pool             NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            total_yes_shares    NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            total_no_shares     NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            status              VARCHAR(16)     NOT NULL DEFAULT 'Active',
            winning_outcome     VARCHAR(8),
            creator             VARCHAR(255)    NOT NULL,
            oracle_address      VARCHAR(255)    NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL,
            resolved_at         TIMESTAMPTZ,
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_markets_question_len
                CHECK (char_length(question) BETWEEN 10 AND 500),
            CONSTRAINT ck_markets_category_kind
                CHECK (category_kind IN ('Sports', 'Crypto', 'Binary')),
            CONSTRAINT ck_markets_status
                CHECK (status IN ('Active', 'Resolved', 'Cancelled')),
            CONSTRAINT ck_markets_winning_outcome
                CHECK ((status = 'Resolved') = (winning_outcome IS NOT NULL)),
            CONSTRAINT ck_markets_outcome_value
                CHECK (winning_outcome IS NULL OR winning_outcome IN ('Yes', 'No')),
            CONSTRAINT ck_markets_non_negative
                CHECK (yes_pool >= 0 AND no_pool >= 0
                       AND total_yes_shares >= 0 AND total_no_shares >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_markets_status_end_time ON markets (status, end_time);")
    op.execute("CREATE INDEX idx_markets_category ON markets (category_kind);")
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE markets IS 'Pari-mutuel binary markets';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
