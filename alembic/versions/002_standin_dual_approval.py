"""Standin dual approval: approval records, standins and auto-approval flags

Revision ID: 002_standin_approval
Revises: 001_initial_leave
Create Date: 2026-10-01

Existing leaves get no approval records. They keep their stored status and
are handled as legacy leaves by the approval service.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002_standin_approval'
down_revision: Union[str, None] = '001_initial_leave'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

APPROVER_ROLE = sa.Enum('MANAGER', 'STANDIN', name='approverrole')
DECISION_STATUS = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='decisionstatus')


def _columns(inspector, table):
    return {col['name'] for col in inspector.get_columns(table)}


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    # Partial-migration recovery: only add what is missing
    employee_columns = _columns(inspector, 'employees')
    with op.batch_alter_table('employees') as batch:
        if 'standin_id' not in employee_columns:
            batch.add_column(sa.Column('standin_id', sa.Integer(), nullable=True))
            batch.create_foreign_key(
                'fk_employees_standin_id', 'employees', ['standin_id'], ['id'], ondelete='SET NULL'
            )
            batch.create_check_constraint('check_standin_not_self', 'standin_id IS NULL OR standin_id != id')
            batch.create_index('ix_employees_standin_id', ['standin_id'])
        if 'auto_approve' not in employee_columns:
            batch.add_column(sa.Column('auto_approve', sa.Boolean(), nullable=False, server_default=sa.false()))

    if 'auto_approve' not in _columns(inspector, 'leave_types'):
        with op.batch_alter_table('leave_types') as batch:
            batch.add_column(sa.Column('auto_approve', sa.Boolean(), nullable=False, server_default=sa.false()))

    if 'auto_approved' not in _columns(inspector, 'leaves'):
        with op.batch_alter_table('leaves') as batch:
            batch.add_column(sa.Column('auto_approved', sa.Boolean(), nullable=False, server_default=sa.false()))

    if 'leave_approval_records' not in inspector.get_table_names():
        op.create_table(
            'leave_approval_records',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('leave_id', sa.Integer(), sa.ForeignKey('leaves.id', ondelete='CASCADE'), nullable=False),
            sa.Column('approver_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
            sa.Column('approver_role', APPROVER_ROLE, nullable=False),
            sa.Column('decision_status', DECISION_STATUS, nullable=False, server_default='PENDING'),
            sa.Column('decided_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('comment', sa.Text(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('leave_id', 'approver_role', name='uq_leave_approval_records_leave_role'),
        )
        op.create_index(op.f('ix_leave_approval_records_id'), 'leave_approval_records', ['id'])
        op.create_index(op.f('ix_leave_approval_records_leave_id'), 'leave_approval_records', ['leave_id'])
        op.create_index(op.f('ix_leave_approval_records_approver_id'), 'leave_approval_records', ['approver_id'])


def downgrade() -> None:
    op.drop_table('leave_approval_records')
    bind = op.get_bind()
    APPROVER_ROLE.drop(bind, checkfirst=True)
    DECISION_STATUS.drop(bind, checkfirst=True)

    with op.batch_alter_table('leaves') as batch:
        batch.drop_column('auto_approved')
    with op.batch_alter_table('leave_types') as batch:
        batch.drop_column('auto_approve')
    with op.batch_alter_table('employees') as batch:
        batch.drop_index('ix_employees_standin_id')
        batch.drop_constraint('check_standin_not_self', type_='check')
        batch.drop_constraint('fk_employees_standin_id', type_='foreignkey')
        batch.drop_column('auto_approve')
        batch.drop_column('standin_id')
