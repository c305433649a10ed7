"""baseline_schema

Revision ID: 5a1c03e9b7d2
Revises:
Create Date: 2026-10-19 10:12:41.208317

Production-safe migration: Only creates tables that do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '5a1c03e9b7d2'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    # Create users table
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('email', sa.String(), nullable=False),
            sa.Column('password_hash', sa.String(), nullable=True),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('avatar', sa.String(), nullable=True),
            sa.Column('provider', sa.String(), nullable=False),
            sa.Column('google_id', sa.String(), nullable=True),
            sa.Column('is_email_verified', sa.Boolean(), nullable=False),
            sa.Column('email_verification_token', sa.String(), nullable=True),
            sa.Column('email_verification_expires', sa.DateTime(), nullable=True),
            sa.Column('password_reset_token', sa.String(), nullable=True),
            sa.Column('password_reset_expires', sa.DateTime(), nullable=True),
            sa.Column('last_login', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_google_id'), 'users', ['google_id'], unique=True)
        op.create_index(op.f('ix_users_email_verification_token'), 'users', ['email_verification_token'], unique=False)
        op.create_index(op.f('ix_users_password_reset_token'), 'users', ['password_reset_token'], unique=False)

    # Create profiles table
    if not table_exists('profiles'):
        op.create_table('profiles',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('bio', sa.Text(), nullable=True),
            sa.Column('phone', sa.String(), nullable=True),
            sa.Column('location', sa.String(), nullable=True),
            sa.Column('avatar', sa.String(), nullable=True),
            sa.Column('education', sa.JSON(), nullable=True),
            sa.Column('career_goals', sa.JSON(), nullable=True),
            sa.Column('skills', sa.JSON(), nullable=False),
            sa.Column('interests', sa.JSON(), nullable=False),
            sa.Column('experience', sa.JSON(), nullable=True),
            sa.Column('is_complete', sa.Boolean(), nullable=False),
            sa.Column('saved_career_path', sa.JSON(), nullable=True),
            sa.Column('career_path_generated_at', sa.DateTime(), nullable=True),
            sa.Column('learning_progress', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_profiles_id'), 'profiles', ['id'], unique=False)
        op.create_index(op.f('ix_profiles_user_id'), 'profiles', ['user_id'], unique=True)

    # Create career_paths table
    if not table_exists('career_paths'):
        op.create_table('career_paths',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('title', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=False),
            sa.Column('duration', sa.String(), nullable=True),
            sa.Column('difficulty', sa.String(), nullable=False),
            sa.Column('total_weeks', sa.Integer(), nullable=False),
            sa.Column('prerequisites', sa.JSON(), nullable=False),
            sa.Column('outcomes', sa.JSON(), nullable=False),
            sa.Column('skills_to_learn', sa.JSON(), nullable=False),
            sa.Column('market_demand', sa.String(), nullable=True),
            sa.Column('average_salary', sa.String(), nullable=True),
            sa.Column('job_titles', sa.JSON(), nullable=False),
            sa.Column('weekly_plan', sa.JSON(), nullable=False),
            sa.Column('target_role', sa.String(), nullable=True),
            sa.Column('timeframe', sa.String(), nullable=True),
            sa.Column('pace', sa.String(), nullable=False),
            sa.Column('custom_skills', sa.JSON(), nullable=False),
            sa.Column('custom_interests', sa.JSON(), nullable=False),
            sa.Column('is_active', sa.Boolean(), nullable=False),
            sa.Column('generated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('last_updated', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_career_paths_id'), 'career_paths', ['id'], unique=False)
        op.create_index(op.f('ix_career_paths_user_id'), 'career_paths', ['user_id'], unique=True)
        op.create_index(op.f('ix_career_paths_generated_at'), 'career_paths', ['generated_at'], unique=False)

    # Create resume_reviews table
    if not table_exists('resume_reviews'):
        op.create_table('resume_reviews',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('file_name', sa.String(), nullable=False),
            sa.Column('file_path', sa.String(), nullable=False),
            sa.Column('file_type', sa.String(), nullable=False),
            sa.Column('file_size', sa.Integer(), nullable=False),
            sa.Column('target_role', sa.String(), nullable=True),
            sa.Column('target_industry', sa.String(), nullable=True),
            sa.Column('experience_level', sa.String(), nullable=False),
            sa.Column('additional_context', sa.Text(), nullable=True),
            sa.Column('extracted_text', sa.Text(), nullable=False),
            sa.Column('extracted_sections', sa.JSON(), nullable=False),
            sa.Column('analysis_result', sa.JSON(), nullable=True),
            sa.Column('analysis_status', sa.String(), nullable=False),
            sa.Column('processing_time', sa.Integer(), nullable=True),
            sa.Column('user_notes', sa.Text(), nullable=True),
            sa.Column('implemented_suggestions', sa.JSON(), nullable=False),
            sa.Column('rating', sa.Integer(), nullable=True),
            sa.Column('feedback', sa.Text(), nullable=True),
            sa.Column('analyzed_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('last_updated', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_resume_review_user_analyzed', 'resume_reviews', ['user_id', 'analyzed_at'], unique=False)
        op.create_index(op.f('ix_resume_reviews_id'), 'resume_reviews', ['id'], unique=False)
        op.create_index(op.f('ix_resume_reviews_user_id'), 'resume_reviews', ['user_id'], unique=False)
        op.create_index(op.f('ix_resume_reviews_analysis_status'), 'resume_reviews', ['analysis_status'], unique=False)

    # Create profile_reviews table
    if not table_exists('profile_reviews'):
        op.create_table('profile_reviews',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('profile_url', sa.String(), nullable=False),
            sa.Column('profile_type', sa.String(), nullable=False),
            sa.Column('analysis_result', sa.JSON(), nullable=False),
            sa.Column('additional_context', sa.Text(), nullable=True),
            sa.Column('linkedin_data', sa.JSON(), nullable=True),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('completed_suggestions', sa.JSON(), nullable=False),
            sa.Column('analyzed_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('last_updated', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id', 'profile_url', name='uq_profile_review_user_url')
        )
        op.create_index('idx_profile_review_user_analyzed', 'profile_reviews', ['user_id', 'analyzed_at'], unique=False)
        op.create_index(op.f('ix_profile_reviews_id'), 'profile_reviews', ['id'], unique=False)
        op.create_index(op.f('ix_profile_reviews_user_id'), 'profile_reviews', ['user_id'], unique=False)


def downgrade() -> None:
    """Downgrade: Drop every table in reverse dependency order."""
    op.drop_index(op.f('ix_profile_reviews_user_id'), table_name='profile_reviews')
    op.drop_index(op.f('ix_profile_reviews_id'), table_name='profile_reviews')
    op.drop_index('idx_profile_review_user_analyzed', table_name='profile_reviews')
    op.drop_table('profile_reviews')

    op.drop_index(op.f('ix_resume_reviews_analysis_status'), table_name='resume_reviews')
    op.drop_index(op.f('ix_resume_reviews_user_id'), table_name='resume_reviews')
    op.drop_index(op.f('ix_resume_reviews_id'), table_name='resume_reviews')
    op.drop_index('idx_resume_review_user_analyzed', table_name='resume_reviews')
    op.drop_table('resume_reviews')

    op.drop_index(op.f('ix_career_paths_generated_at'), table_name='career_paths')
    op.drop_index(op.f('ix_career_paths_user_id'), table_name='career_paths')
    op.drop_index(op.f('ix_career_paths_id'), table_name='career_paths')
    op.drop_table('career_paths')

    op.drop_index(op.f('ix_profiles_user_id'), table_name='profiles')
    op.drop_index(op.f('ix_profiles_id'), table_name='profiles')
    op.drop_table('profiles')

    op.drop_index(op.f('ix_users_password_reset_token'), table_name='users')
    op.drop_index(op.f('ix_users_email_verification_token'), table_name='users')
    op.drop_index(op.f('ix_users_google_id'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
