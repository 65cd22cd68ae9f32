"""002: create markets table

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
        CREATE TABLE markets (
            id                  BIGINT          PRIMARY KEY,
            creator             VARCHAR(128)    NOT NULL,
            question            VARCHAR(500)    NOT NULL,
            categories          TEXT[]          NOT NULL DEFAULT '{}',
            end_time            TIMESTAMPTZ     NOT NULL,
            initial_liquidity   NUMERIC(39,0)   NOT NULL,
            yes_pool            NUMERIC(39,0)   NOT NULL,
            no_pool             NUMERIC(39,0)   NOT NULL,
            total_yes_shares    NUMERIC(39,0)   NOT NULL,
            total_no_shares     NUMERIC(39,0)   NOT NULL,
            resolved            BOOLEAN         NOT NULL DEFAULT FALSE,
            outcome             BOOLEAN,
            volume              NUMERIC(39,0)   NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_markets_yes_pool_gte_0      CHECK (yes_pool >= 0),
            CONSTRAINT ck_markets_no_pool_gte_0       CHECK (no_pool >= 0),
            CONSTRAINT ck_markets_yes_shares_gte_0    CHECK (total_yes_shares >= 0),
            CONSTRAINT ck_markets_no_shares_gte_0     CHECK (total_no_shares >= 0),
            CONSTRAINT ck_markets_liquidity_gte_2     CHECK (initial_liquidity >= 2),
            CONSTRAINT ck_markets_outcome_iff_resolved CHECK (
                (resolved AND outcome IS NOT NULL) OR (NOT resolved AND outcome IS NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_markets_resolved ON markets (resolved);")
    op.execute("CREATE INDEX idx_markets_categories ON markets USING GIN (categories);")
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON TABLE markets IS "
        "'Binary markets with constant-product YES/NO pools, attos amounts';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
