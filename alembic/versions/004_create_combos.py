"""004: create combos and combo_legs tables

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE combos (
            id                  BIGINT          PRIMARY KEY,
            owner               VARCHAR(128)    NOT NULL,
            name                VARCHAR(200)    NOT NULL,
            stake               NUMERIC(39,0)   NOT NULL,
            potential_payout    NUMERIC(39,0)   NOT NULL,
            status              VARCHAR(20)     NOT NULL DEFAULT 'ACTIVE',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_combos_stake_gt_0 CHECK (stake > 0),
            CONSTRAINT ck_combos_status CHECK (
                status IN ('ACTIVE', 'PARTIALLY_RESOLVED', 'WON', 'LOST', 'CANCELLED')
            )
        );
    """)
    op.execute("CREATE INDEX idx_combos_owner ON combos (owner);")
    op.execute("""
        CREATE TRIGGER trg_combos_updated_at
            BEFORE UPDATE ON combos
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE combo_legs (
            combo_id        BIGINT          NOT NULL REFERENCES combos(id) ON DELETE CASCADE,
            leg_index       SMALLINT        NOT NULL,
            market_id       BIGINT          NOT NULL REFERENCES markets(id),
            prediction      BOOLEAN         NOT NULL,
            odds            NUMERIC(39,0)   NOT NULL,
            resolved        BOOLEAN         NOT NULL DEFAULT FALSE,
            won             BOOLEAN,
            PRIMARY KEY (combo_id, leg_index),
            CONSTRAINT ck_combo_legs_odds_gt_0 CHECK (odds > 0),
            CONSTRAINT ck_combo_legs_won_iff_resolved CHECK (
                (resolved AND won IS NOT NULL) OR (NOT resolved AND won IS NULL)
            )
        );
    """)
    # Reverse index: market resolution cascades only touch combos on that market
    op.execute("CREATE INDEX idx_combo_legs_market ON combo_legs (market_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS combo_legs CASCADE;")
    op.execute("DROP TABLE IF EXISTS combos CASCADE;")
