"""initial school tables

Revision ID: 4f1c2a9e7b10
Revises:
Create Date: 2026-09-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4f1c2a9e7b10'
down_revision = None
branch_labels = None
depends_on = None


ROLE_ENUM = sa.Enum('ADMIN', 'TEACHER', 'STUDENT', 'PARENT', 'EDITOR', name='roleenum')
AUDIENCE_ENUM = sa.Enum('ALL', 'STUDENTS', 'STAFF', 'PARENTS', name='audienceenum')


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=True),
        sa.Column('user_metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'profile',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False, unique=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', ROLE_ENUM, nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('avatar_url', sa.String(length=512), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'academic_years',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('current_term_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'terms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('academic_year_id', sa.Integer(), sa.ForeignKey('academic_years.id'), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
    )

    op.create_table(
        'school_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('current_year_id', sa.Integer(), sa.ForeignKey('academic_years.id'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'subjects',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=True),
        sa.Column('level', sa.String(length=50), nullable=True),
    )

    op.create_table(
        'class_levels',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
    )

    op.create_table(
        'streams',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('class_levels.id'), nullable=False),
    )

    op.create_table(
        'teacher_allocations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('teacher_id', sa.Integer(), sa.ForeignKey('profile.id'), nullable=False),
        sa.Column('subject_id', sa.Integer(), sa.ForeignKey('subjects.id'), nullable=False),
        sa.Column('stream_id', sa.Integer(), sa.ForeignKey('streams.id'), nullable=False),
        sa.Column('academic_year_id', sa.Integer(), sa.ForeignKey('academic_years.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('student_id_human', sa.String(length=50), nullable=True),
        sa.Column('gender', sa.String(length=1), nullable=True),
        sa.Column('current_stream_id', sa.Integer(), sa.ForeignKey('streams.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    # Only the columns every deployment has; the descriptive ones come later.
    op.create_table(
        'clubs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
    )

    op.create_table(
        'club_members',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('club_id', sa.Integer(), sa.ForeignKey('clubs.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False, server_default='member'),
        sa.Column('joined_at', sa.DateTime(), nullable=True),
    )

    op.create_table(
        'school_events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('event_date', sa.Date(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('audience', AUDIENCE_ENUM, nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_school_events_event_date', 'school_events', ['event_date'])

    op.create_table(
        'houses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=80), nullable=False, unique=True),
        sa.Column('color', sa.String(length=7), nullable=True),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('members', sa.Integer(), nullable=False, server_default='0'),
    )

    op.create_table(
        'marks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('student_id', sa.Integer(), sa.ForeignKey('students.id'), nullable=False),
        sa.Column('teacher_allocation_id', sa.Integer(), sa.ForeignKey('teacher_allocations.id'), nullable=False),
        sa.Column('assessment_type', sa.String(length=3), nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint(
            'student_id',
            'teacher_allocation_id',
            'assessment_type',
            name='uq_marks_student_allocation_type',
        ),
    )
    op.create_index('ix_marks_teacher_allocation_id', 'marks', ['teacher_allocation_id'])


def downgrade():
    op.drop_index('ix_marks_teacher_allocation_id', table_name='marks')
    op.drop_table('marks')
    op.drop_table('houses')
    op.drop_index('ix_school_events_event_date', table_name='school_events')
    op.drop_table('school_events')
    op.drop_table('club_members')
    op.drop_table('clubs')
    op.drop_table('students')
    op.drop_table('teacher_allocations')
    op.drop_table('streams')
    op.drop_table('class_levels')
    op.drop_table('subjects')
    op.drop_table('school_settings')
    op.drop_table('terms')
    op.drop_table('academic_years')
    op.drop_table('profile')
    op.drop_table('user')
    AUDIENCE_ENUM.drop(op.get_bind(), checkfirst=True)
    ROLE_ENUM.drop(op.get_bind(), checkfirst=True)
