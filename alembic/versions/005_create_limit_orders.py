"""005: create limit_orders table

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE limit_orders (
            id                  BIGINT          PRIMARY KEY,
            owner               VARCHAR(128)    NOT NULL,
            market_id           BIGINT          NOT NULL REFERENCES markets(id),
            is_yes              BOOLEAN         NOT NULL,
            side                VARCHAR(4)      NOT NULL,
            price               NUMERIC(39,0)   NOT NULL,
            original_amount     NUMERIC(39,0)   NOT NULL,
            filled_amount       NUMERIC(39,0)   NOT NULL DEFAULT 0,
            duration            VARCHAR(3)      NOT NULL DEFAULT 'GTC',
            status              VARCHAR(20)     NOT NULL DEFAULT 'OPEN',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_limit_orders_side     CHECK (side IN ('BUY', 'SELL')),
            CONSTRAINT ck_limit_orders_duration CHECK (duration IN ('GTC', 'IOC')),
            CONSTRAINT ck_limit_orders_status CHECK (
                status IN ('OPEN', 'PARTIALLY_FILLED', 'FILLED', 'CANCELLED', 'EXPIRED')
            ),
            CONSTRAINT ck_limit_orders_filled_lte_original CHECK (filled_amount <= original_amount)
        );
    """)
    op.execute(
        "CREATE INDEX idx_limit_orders_market_status ON limit_orders (market_id, status);"
    )
    op.execute("""
        CREATE TRIGGER trg_limit_orders_updated_at
            BEFORE UPDATE ON limit_orders
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS limit_orders CASCADE;")
