"""create ledger tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None

# Enum types are shared between tables, so they are created once
# up front instead of by each create_table.
account_group_enum = postgresql.ENUM(
    "ASSETS", "LIABILITIES", "INCOME", "EXPENSES", "CAPITAL",
    name="account_group_enum", create_type=False,
)
balance_side_enum = postgresql.ENUM(
    "DR", "CR",
    name="balance_side_enum", create_type=False,
)
voucher_type_enum = postgresql.ENUM(
    "PAYMENT", "RECEIPT", "JOURNAL", "CONTRA",
    "SALES", "PURCHASE", "DEBIT_NOTE", "CREDIT_NOTE",
    name="voucher_type_enum", create_type=False,
)
ENUMS = (account_group_enum, balance_side_enum, voucher_type_enum)


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in ENUMS:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("group", account_group_enum, nullable=False),
        sa.Column("account_type", sa.String(length=50), nullable=False),
        sa.Column("parent_group", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("opening_balance", sa.Numeric(19, 2), nullable=False),
        sa.Column("opening_balance_side", balance_side_enum, nullable=False),
        sa.Column("current_balance", sa.Numeric(19, 2), nullable=False),
        sa.Column("current_balance_side", balance_side_enum, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_index("ix_accounts_name", "accounts", ["name"])
    op.create_index("ix_accounts_group", "accounts", ["group"])
    op.create_index("ix_accounts_is_active", "accounts", ["is_active"])

    op.create_table(
        "vouchers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("voucher_type", voucher_type_enum, nullable=False),
        sa.Column("sequence_number", sa.Integer(), nullable=False),
        sa.Column("voucher_number", sa.String(length=30), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("financial_year", sa.String(length=10), nullable=False),
        sa.Column("reference_number", sa.String(length=50), nullable=True),
        sa.Column("cheque_number", sa.String(length=30), nullable=True),
        sa.Column("cheque_date", sa.Date(), nullable=True),
        sa.Column("narration", sa.String(length=500), nullable=False),
        sa.Column("total_debit", sa.Numeric(19, 2), nullable=False),
        sa.Column("total_credit", sa.Numeric(19, 2), nullable=False),
        sa.Column("created_by", sa.String(length=100), nullable=False),
        sa.Column("reversal_of_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["reversal_of_id"], ["vouchers.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("voucher_number"),
        sa.UniqueConstraint("reversal_of_id"),
        sa.UniqueConstraint(
            "voucher_type", "sequence_number", name="uq_voucher_type_sequence"
        ),
    )
    op.create_index("ix_vouchers_voucher_type", "vouchers", ["voucher_type"])
    op.create_index("ix_vouchers_date", "vouchers", ["date"])
    op.create_index("ix_vouchers_financial_year", "vouchers", ["financial_year"])

    op.create_table(
        "voucher_lines",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("voucher_id", sa.Integer(), nullable=False),
        sa.Column("line_number", sa.Integer(), nullable=False),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("debit", sa.Numeric(19, 2), nullable=False),
        sa.Column("credit", sa.Numeric(19, 2), nullable=False),
        sa.Column("narration", sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(["voucher_id"], ["vouchers.id"]),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_voucher_lines_voucher_id", "voucher_lines", ["voucher_id"])
    op.create_index("ix_voucher_lines_account_id", "voucher_lines", ["account_id"])

    op.create_table(
        "voucher_sequences",
        sa.Column("voucher_type", voucher_type_enum, nullable=False),
        sa.Column("next_value", sa.BigInteger(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("voucher_type"),
    )

    op.create_table(
        "financial_years",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("year_code", sa.String(length=20), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_closed", sa.Boolean(), nullable=False),
        sa.Column("closing_date", sa.DateTime(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_by", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("year_code"),
    )
    op.create_index("ix_financial_years_start_date", "financial_years", ["start_date"])
    op.create_index("ix_financial_years_end_date", "financial_years", ["end_date"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_type", sa.String(length=100), nullable=False),
        sa.Column("actor", sa.String(length=100), nullable=True),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("financial_years")
    op.drop_table("voucher_sequences")
    op.drop_table("voucher_lines")
    op.drop_table("vouchers")
    op.drop_table("accounts")

    bind = op.get_bind()
    for enum_type in reversed(ENUMS):
        enum_type.drop(bind, checkfirst=True)
