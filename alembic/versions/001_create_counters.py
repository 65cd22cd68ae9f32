"""001: create common functions and id counters

Revision ID: 001
Revises: 
Create Date: 2026-10-18
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
    op.execute("""
        CREATE TABLE counters (
            name        VARCHAR(32)     PRIMARY KEY,
            value       NUMERIC(39,0)   NOT NULL DEFAULT 0,
            CONSTRAINT ck_counters_value_gte_0 CHECK (value >= 0)
        );
    """)
    op.execute("""
        INSERT INTO counters (name, value) VALUES
            ('market', 0), ('order', 0), ('combo', 0), ('total_volume', 0);
    """)
    op.execute(
        "COMMENT ON TABLE counters IS "
        "'Monotonic id counters per entity kind, plus cumulative total_volume';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS counters CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
