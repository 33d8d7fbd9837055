"""create general ledger tables

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-19 09:12:41.508213

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7e10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

journal_entry_status = sa.Enum(
    'DRAFT', 'PENDING_APPROVAL', 'APPROVED', 'POSTED', 'CANCELLED',
    name='journal_entry_status'
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'journal_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.String(), nullable=False),
        sa.Column('entry_number', sa.String(length=50), nullable=False),
        sa.Column('entry_date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('reference', sa.String(length=100), nullable=True),
        sa.Column('total_debit', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('total_credit', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('status', journal_entry_status, nullable=False),
        sa.Column('is_posted', sa.Boolean(), nullable=False),
        sa.Column('approved_by', sa.String(), nullable=True),
        sa.Column('posted_by', sa.String(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('posted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=False),
        sa.Column('updated_by', sa.String(), nullable=True),
        sa.CheckConstraint('total_debit = total_credit', name='balanced_entry'),
        sa.CheckConstraint(
            "(status = 'POSTED' AND is_posted) OR (status <> 'POSTED' AND NOT is_posted)",
            name='status_posted_sync'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', 'entry_number', name='_company_entry_number_uc'),
    )
    op.create_index(op.f('ix_journal_entries_id'), 'journal_entries', ['id'], unique=False)
    op.create_index(op.f('ix_journal_entries_company_id'), 'journal_entries', ['company_id'], unique=False)
    op.create_index('idx_journal_entries_company_date', 'journal_entries', ['company_id', 'entry_date'], unique=False)
    op.create_index('idx_journal_entries_company_status', 'journal_entries', ['company_id', 'status'], unique=False)

    op.create_table(
        'journal_entry_lines',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('journal_entry_id', sa.Integer(), nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False),
        sa.Column('account_code', sa.String(length=20), nullable=True),
        sa.Column('account_name', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('debit_amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('credit_amount', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('line_number', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('debit_amount >= 0'),
        sa.CheckConstraint('credit_amount >= 0'),
        sa.CheckConstraint(
            '(debit_amount > 0 AND credit_amount = 0) OR (credit_amount > 0 AND debit_amount = 0)',
            name='check_debit_or_credit_exclusive'
        ),
        sa.ForeignKeyConstraint(['journal_entry_id'], ['journal_entries.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('journal_entry_id', 'line_number', name='_entry_line_number_uc'),
    )
    op.create_index(op.f('ix_journal_entry_lines_id'), 'journal_entry_lines', ['id'], unique=False)
    op.create_index(op.f('ix_journal_entry_lines_journal_entry_id'), 'journal_entry_lines', ['journal_entry_id'], unique=False)
    op.create_index(op.f('ix_journal_entry_lines_account_id'), 'journal_entry_lines', ['account_id'], unique=False)

    op.create_table(
        'audit_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('table_name', sa.String(), nullable=False),
        sa.Column('record_id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_audit_log_id'), 'audit_log', ['id'], unique=False)
    op.create_index(op.f('ix_audit_log_user_id'), 'audit_log', ['user_id'], unique=False)
    op.create_index(op.f('ix_audit_log_timestamp'), 'audit_log', ['timestamp'], unique=False)
    op.create_index('idx_audit_log_record', 'audit_log', ['table_name', 'record_id'], unique=False)

    op.create_table(
        'entry_number_counters',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.String(), nullable=False),
        sa.Column('period', sa.String(length=6), nullable=False),
        sa.Column('last_value', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('company_id', 'period', name='_company_period_uc'),
    )
    op.create_index(op.f('ix_entry_number_counters_id'), 'entry_number_counters', ['id'], unique=False)
    op.create_index(op.f('ix_entry_number_counters_company_id'), 'entry_number_counters', ['company_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_entry_number_counters_company_id'), table_name='entry_number_counters')
    op.drop_index(op.f('ix_entry_number_counters_id'), table_name='entry_number_counters')
    op.drop_table('entry_number_counters')

    op.drop_index('idx_audit_log_record', table_name='audit_log')
    op.drop_index(op.f('ix_audit_log_timestamp'), table_name='audit_log')
    op.drop_index(op.f('ix_audit_log_user_id'), table_name='audit_log')
    op.drop_index(op.f('ix_audit_log_id'), table_name='audit_log')
    op.drop_table('audit_log')

    op.drop_index(op.f('ix_journal_entry_lines_account_id'), table_name='journal_entry_lines')
    op.drop_index(op.f('ix_journal_entry_lines_journal_entry_id'), table_name='journal_entry_lines')
    op.drop_index(op.f('ix_journal_entry_lines_id'), table_name='journal_entry_lines')
    op.drop_table('journal_entry_lines')

    op.drop_index('idx_journal_entries_company_status', table_name='journal_entries')
    op.drop_index('idx_journal_entries_company_date', table_name='journal_entries')
    op.drop_index(op.f('ix_journal_entries_company_id'), table_name='journal_entries')
    op.drop_index(op.f('ix_journal_entries_id'), table_name='journal_entries')
    op.drop_table('journal_entries')
    journal_entry_status.drop(op.get_bind(), checkfirst=True)
