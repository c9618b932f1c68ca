"""initial tables: directory, absences, substitutions

Revision ID: 0001
Revises: 
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    substitution_status = sa.Enum('PENDING', 'ASSIGNED', 'UNAVAILABLE', name='substitution_status')

    op.create_table('teacher',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('knowledge_area', sa.String(length=255), nullable=False),
        sa.Column('workload', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_teacher_name', 'teacher', ['name'])
    op.create_index('ix_teacher_knowledge_area', 'teacher', ['knowledge_area'])

    op.create_table('subject',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('knowledge_area', sa.String(length=255), nullable=False),
    )

    op.create_table('school_class',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
    )

    op.create_table('absence',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('teacher_id', sa.String(length=36), nullable=False),
        sa.Column('subject_id', sa.String(length=36), nullable=False),
        sa.Column('class_id', sa.String(length=36), nullable=False),
        sa.Column('weekday', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.String(length=5), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('week', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
    )
    op.create_index('ix_absence_teacher_id', 'absence', ['teacher_id'])
    op.create_index('ix_absence_year_week', 'absence', ['year', 'week'])

    op.create_table('substitution',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('absence_id', sa.String(length=36),
                  sa.ForeignKey('absence.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('substitute_id', sa.String(length=36), nullable=True),
        sa.Column('status', substitution_status, nullable=False, server_default='PENDING'),
        sa.Column('message', sa.Text(), nullable=True),
    )
    op.create_index('ix_substitution_substitute_id', 'substitution', ['substitute_id'])
    op.create_index('ix_substitution_status', 'substitution', ['status'])

def downgrade():
    op.drop_table('substitution')
    op.drop_table('absence')
    op.drop_table('school_class')
    op.drop_table('subject')
    op.drop_table('teacher')
    bind = op.get_bind()
    if bind.dialect.name != "sqlite":
        sa.Enum(name='substitution_status').drop(bind, checkfirst=True)
