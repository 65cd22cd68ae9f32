"""007: create feed_items, feed_likes and user_follows tables

Revision ID: 007
Revises: 006
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "007"
down_revision: Union[str, None] = "006"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE feed_items (
            id                  BIGINT          PRIMARY KEY,
            author              VARCHAR(128)    NOT NULL,
            item_type           VARCHAR(20)     NOT NULL,
            content             TEXT            NOT NULL,
            market_id           BIGINT          REFERENCES markets(id),
            data                JSONB           NOT NULL DEFAULT '{}',
            likes_count         BIGINT          NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_feed_items_type CHECK (
                item_type IN ('TRADE', 'MARKET_CREATED', 'COMMENT', 'FOLLOW', 'ACHIEVEMENT')
            ),
            CONSTRAINT ck_feed_items_likes_gte_0 CHECK (likes_count >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_feed_items_market ON feed_items (market_id, id DESC);")
    op.execute("CREATE INDEX idx_feed_items_type ON feed_items (item_type, id DESC);")
    op.execute("""
        CREATE TABLE feed_likes (
            item_id             BIGINT          NOT NULL REFERENCES feed_items(id),
            user_id             VARCHAR(128)    NOT NULL,
            PRIMARY KEY (item_id, user_id)
        );
    """)
    op.execute("""
        CREATE TABLE user_follows (
            follower            VARCHAR(128)    NOT NULL,
            followee            VARCHAR(128)    NOT NULL,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            PRIMARY KEY (follower, followee),
            CONSTRAINT ck_user_follows_not_self CHECK (follower <> followee)
        );
    """)
    op.execute("CREATE INDEX idx_user_follows_followee ON user_follows (followee);")
    op.execute(
        "INSERT INTO counters (name, value) VALUES ('feed', 0) ON CONFLICT (name) DO NOTHING;"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS user_follows CASCADE;")
    op.execute("DROP TABLE IF EXISTS feed_likes CASCADE;")
    op.execute("DROP TABLE IF EXISTS feed_items CASCADE;")
    op.execute("DELETE FROM counters WHERE name = 'feed';")
