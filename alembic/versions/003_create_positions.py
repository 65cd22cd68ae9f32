"""003: create positions table

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
        CREATE TABLE positions (
            owner           VARCHAR(128)    NOT NULL,
            market_id       BIGINT          NOT NULL REFERENCES markets(id),
            yes_shares      NUMERIC(39,0)   NOT NULL DEFAULT 0,
            no_shares       NUMERIC(39,0)   NOT NULL DEFAULT 0,
            claimed         BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (owner, market_id),
            CONSTRAINT ck_positions_yes_gte_0 CHECK (yes_shares >= 0),
            CONSTRAINT ck_positions_no_gte_0  CHECK (no_shares >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_positions_market ON positions (market_id);")
    op.execute("""
        CREATE TRIGGER trg_positions_updated_at
            BEFORE UPDATE ON positions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS positions CASCADE;")
