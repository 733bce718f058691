"""create users, jobs and job_applicants

Revision ID: 3c1f0a9d2b7e
Revises: 
Create Date: 2026-10-17 09:12:44.318204

Creates tables only if they do not already exist, so databases bootstrapped
with init_db can be stamped and upgraded safely.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '3c1f0a9d2b7e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


EMPLOYMENT_TYPES = ('fulltime', 'freelance', 'contract', 'internship')


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.String(length=24), nullable=False),
            sa.Column('username', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=False),
            sa.Column('profile_picture', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    if not table_exists('jobs'):
        op.create_table('jobs',
            sa.Column('id', sa.String(length=24), nullable=False),
            sa.Column('author_id', sa.String(length=24), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('role', sa.String(), nullable=False),
            sa.Column('category', sa.String(), nullable=False),
            sa.Column('company_name', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('city', sa.String(), nullable=False),
            sa.Column('country', sa.String(), nullable=False),
            sa.Column('employment_type', sa.Enum(*EMPLOYMENT_TYPES, name='employmenttype'), nullable=False),
            sa.Column('deadline', sa.DateTime(timezone=True), nullable=True),
            sa.Column('salary_min', sa.Float(), nullable=True),
            sa.Column('salary_max', sa.Float(), nullable=True),
            sa.Column('skills_required', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['author_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('title', 'company_name', 'author_id', name='uq_job_title_company_author')
        )
        op.create_index('idx_job_author_created', 'jobs', ['author_id', 'created_at'], unique=False)
        op.create_index(op.f('ix_jobs_author_id'), 'jobs', ['author_id'], unique=False)
        op.create_index(op.f('ix_jobs_category'), 'jobs', ['category'], unique=False)
        op.create_index(op.f('ix_jobs_company_name'), 'jobs', ['company_name'], unique=False)
        op.create_index(op.f('ix_jobs_created_at'), 'jobs', ['created_at'], unique=False)
        op.create_index(op.f('ix_jobs_title'), 'jobs', ['title'], unique=False)

    if not table_exists('job_applicants'):
        op.create_table('job_applicants',
            sa.Column('id', sa.String(length=24), nullable=False),
            sa.Column('job_id', sa.String(length=24), nullable=False),
            sa.Column('user_id', sa.String(length=24), nullable=False),
            sa.Column('message', sa.Text(), nullable=False),
            sa.Column('resume', sa.String(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('job_id', 'user_id', name='uq_applicant_job_user')
        )
        op.create_index(op.f('ix_job_applicants_job_id'), 'job_applicants', ['job_id'], unique=False)
        op.create_index(op.f('ix_job_applicants_user_id'), 'job_applicants', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_job_applicants_user_id'), table_name='job_applicants')
    op.drop_index(op.f('ix_job_applicants_job_id'), table_name='job_applicants')
    op.drop_table('job_applicants')

    op.drop_index(op.f('ix_jobs_title'), table_name='jobs')
    op.drop_index(op.f('ix_jobs_created_at'), table_name='jobs')
    op.drop_index(op.f('ix_jobs_company_name'), table_name='jobs')
    op.drop_index(op.f('ix_jobs_category'), table_name='jobs')
    op.drop_index(op.f('ix_jobs_author_id'), table_name='jobs')
    op.drop_index('idx_job_author_created', table_name='jobs')
    op.drop_table('jobs')
    sa.Enum(name='employmenttype').drop(op.get_bind(), checkfirst=True)

    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
