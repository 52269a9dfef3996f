"""Trade journal schema baseline

Revision ID: 20261019_01
Revises: None
Create Date: 2026-10-19
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "20261019_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "app_user",
        sa.Column("user_id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_app_user_created_at_utc", "app_user", ["created_at_utc"])

    op.create_table(
        "trade",
        sa.Column("trade_id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("symbol", sa.Text(), nullable=False),
        sa.Column("strategy", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'open'")),
        sa.Column("opened_at", sa.Date(), nullable=False, server_default=sa.text("current_date")),
        sa.Column("closed_at", sa.Date(), nullable=True),
        sa.Column("net_credit", sa.Numeric(12, 2), nullable=True),
        sa.Column("net_debit", sa.Numeric(12, 2), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("status in ('open', 'closed', 'rolled')", name="ck_trade_status"),
        sa.CheckConstraint("net_credit is null or net_credit >= 0", name="ck_trade_net_credit_non_negative"),
        sa.CheckConstraint("net_debit is null or net_debit >= 0", name="ck_trade_net_debit_non_negative"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.user_id"], ondelete="CASCADE"),
    )
    op.create_index("ix_trade_user_opened", "trade", ["user_id", sa.text("opened_at desc")])

    op.create_table(
        "option_leg",
        sa.Column("option_leg_id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("trade_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("leg_index", sa.Integer(), nullable=False),
        sa.Column("leg_type", sa.Text(), nullable=False),
        sa.Column("position", sa.Text(), nullable=False),
        sa.Column("strike", sa.Numeric(12, 2), nullable=False),
        sa.Column("expiry", sa.Date(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(12, 4), nullable=True),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("leg_type in ('call', 'put')", name="ck_option_leg_leg_type"),
        sa.CheckConstraint("position in ('long', 'short')", name="ck_option_leg_position"),
        sa.CheckConstraint("quantity > 0", name="ck_option_leg_quantity_positive"),
        sa.ForeignKeyConstraint(["trade_id"], ["trade.trade_id"], ondelete="CASCADE"),
        sa.UniqueConstraint("trade_id", "leg_index", name="uq_option_leg_trade_index"),
    )

    op.create_table(
        "analytics_summary",
        sa.Column(
            "analytics_summary_id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("label", sa.Text(), nullable=False, server_default=sa.text("'portfolio'")),
        sa.Column("report_date", sa.Date(), nullable=False, server_default=sa.text("current_date")),
        sa.Column("snapshot", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("calculated_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.user_id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "label", "report_date", name="uq_analytics_summary_user_label_date"),
    )
    op.create_index("ix_analytics_summary_label_report_date", "analytics_summary", ["label", "report_date"])


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_analytics_summary_label_report_date", table_name="analytics_summary")
    op.drop_table("analytics_summary")
    op.drop_table("option_leg")
    op.drop_index("ix_trade_user_opened", table_name="trade")
    op.drop_table("trade")
    op.drop_index("ix_app_user_created_at_utc", table_name="app_user")
    op.drop_table("app_user")
