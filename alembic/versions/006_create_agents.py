"""006: create agents and agent_followers tables

Revision ID: 006
Revises: 005
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE agents (
            id                  BIGINT          PRIMARY KEY,
            owner               VARCHAR(128)    NOT NULL,
            name                VARCHAR(100)    NOT NULL,
            strategy            VARCHAR(20)     NOT NULL,
            config              JSONB           NOT NULL DEFAULT '{}',
            capital             NUMERIC(39,0)   NOT NULL,
            is_active           BOOLEAN         NOT NULL DEFAULT TRUE,
            followers_count     BIGINT          NOT NULL DEFAULT 0,
            total_trades        BIGINT          NOT NULL DEFAULT 0,
            total_volume        NUMERIC(39,0)   NOT NULL DEFAULT 0,
            profit_loss         NUMERIC(40,0)   NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_agents_strategy CHECK (
                strategy IN (
                    'MOMENTUM', 'MEAN_REVERSION', 'ARBITRAGE',
                    'MARKET_MAKER', 'SENTIMENT', 'CUSTOM'
                )
            ),
            CONSTRAINT ck_agents_followers_gte_0 CHECK (followers_count >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_agents_profit ON agents (profit_loss DESC, id);")
    op.execute("""
        CREATE TRIGGER trg_agents_updated_at
            BEFORE UPDATE ON agents
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE agent_followers (
            agent_id            BIGINT          NOT NULL REFERENCES agents(id),
            follower            VARCHAR(128)    NOT NULL,
            allocation          NUMERIC(39,0)   NOT NULL,
            started_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (agent_id, follower),
            CONSTRAINT ck_agent_followers_allocation_gt_0 CHECK (allocation > 0)
        );
    """)
    op.execute(
        "INSERT INTO counters (name, value) VALUES ('agent', 0) ON CONFLICT (name) DO NOTHING;"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS agent_followers CASCADE;")
    op.execute("DROP TABLE IF EXISTS agents CASCADE;")
    op.execute("DELETE FROM counters WHERE name = 'agent';")
