"""initial quiz schema: user, question, score, submitted_question

Revision ID: 3c9a7e1d2b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c9a7e1d2b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Databases built earlier by `flask db-reset` already carry these tables
    existing_tables = set(insp.get_table_names())

    if 'user' not in existing_tables:
        op.create_table(
            'user',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('nickname', sa.String(length=20), nullable=False),
            sa.Column('high_score', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_user_nickname', 'user', ['nickname'], unique=True)
        op.create_index('ix_user_high_score', 'user', ['high_score'], unique=False)

    if 'question' not in existing_tables:
        op.create_table(
            'question',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('category', sa.String(length=128), nullable=False),
            sa.Column('text', sa.Text(), nullable=False),
            sa.Column('options', sa.Text(), nullable=False),
            sa.Column('answer', sa.String(length=256), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_question_category', 'question', ['category'], unique=False)

    if 'score' not in existing_tables:
        op.create_table(
            'score',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('value', sa.Integer(), nullable=False),
            sa.Column('game_mode', sa.String(length=16), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['user.id']),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_score_user_id', 'score', ['user_id'], unique=False)
        op.create_index('ix_score_created_at', 'score', ['created_at'], unique=False)

    if 'submitted_question' not in existing_tables:
        op.create_table(
            'submitted_question',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('category', sa.String(length=128), nullable=False),
            sa.Column('text', sa.Text(), nullable=False),
            sa.Column('options', sa.Text(), nullable=False),
            sa.Column('answer', sa.String(length=256), nullable=False),
            sa.Column('status', sa.String(length=16), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
        )


def downgrade():
    op.drop_table('submitted_question')
    op.drop_index('ix_score_created_at', table_name='score')
    op.drop_index('ix_score_user_id', table_name='score')
    op.drop_table('score')
    op.drop_index('ix_question_category', table_name='question')
    op.drop_table('question')
    op.drop_index('ix_user_high_score', table_name='user')
    op.drop_index('ix_user_nickname', table_name='user')
    op.drop_table('user')
