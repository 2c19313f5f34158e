"""add descriptive columns to clubs

Revision ID: 8d3e5b7c1f42
Revises: 4f1c2a9e7b10
Create Date: 2026-09-15 10:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '8d3e5b7c1f42'
down_revision = '4f1c2a9e7b10'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('clubs') as batch_op:
        batch_op.add_column(sa.Column('category', sa.String(length=50), nullable=True, server_default='General'))
        batch_op.add_column(sa.Column('meeting_day', sa.String(length=20), nullable=True))
        batch_op.add_column(sa.Column('patron_name', sa.String(length=255), nullable=True))
        batch_op.add_column(sa.Column('member_count', sa.Integer(), nullable=True, server_default='0'))


def downgrade():
    with op.batch_alter_table('clubs') as batch_op:
        batch_op.drop_column('member_count')
        batch_op.drop_column('patron_name')
        batch_op.drop_column('meeting_day')
        batch_op.drop_column('category')
