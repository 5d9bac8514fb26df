# migrations/versions/20261016_0001_trade_events.py
"""Create the append-only trade_events ledger table."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# Revision identifiers, used by Alembic.
revision = "20261016_0001_trade_events"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "trade_events",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("owner_id", sa.String(length=128), nullable=False),
        sa.Column("symbol", sa.String(length=20), nullable=False),
        sa.Column("action", sa.String(length=4), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(precision=18, scale=4), nullable=False),
        sa.Column("occurred_on", sa.Date(), nullable=False),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_trade_events"),
        sa.CheckConstraint("action IN ('BUY', 'SELL')", name="ck_trade_events_action_valid"),
        sa.CheckConstraint("quantity > 0", name="ck_trade_events_quantity_positive"),
        sa.CheckConstraint("price > 0", name="ck_trade_events_price_positive"),
    )
    op.create_index(
        "ix_trade_events_owner_symbol",
        "trade_events",
        ["owner_id", "symbol"],
    )


def downgrade() -> None:
    op.drop_index("ix_trade_events_owner_symbol", table_name="trade_events")
    op.drop_table("trade_events")
