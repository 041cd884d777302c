"""Initial migration

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from corpusdb.db.seed import EDUCATIONS, GENDERS, PLACES, REGIONS, ROLES
from corpusdb.db.views import CreateView, DropView, VIEW_DEFINITIONS

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def ref(target: str) -> sa.ForeignKey:
    return sa.ForeignKey(target, onupdate='CASCADE', ondelete='RESTRICT')


def enum_table(name: str):
    return op.create_table(
        name,
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('label', sa.Text(), nullable=False, unique=True),
    )


def upgrade() -> None:
    # Immutable tables ("enums")
    roles = enum_table('enum_roles')
    genders = enum_table('enum_genders')
    educations = enum_table('enum_educations')
    regions = enum_table('enum_regions')
    places = op.create_table(
        'enum_places',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('label', sa.Text(), nullable=False, unique=True),
        sa.Column('region_id', sa.Integer(), ref('enum_regions.id'), nullable=False),
    )

    # Project management
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.Text(), nullable=False, unique=True),
        sa.Column('role_id', sa.Integer(), ref('enum_roles.id'), nullable=False),
        sa.Column('badge', sa.Text(), nullable=True, unique=True),
        sa.Column('supervisor_id', sa.Integer(), ref('users.id'), nullable=True),
    )
    op.create_table(
        'projects',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('label', sa.Text(), nullable=False, unique=True),
        sa.Column('badge', sa.Text(), nullable=False, unique=True),
    )
    op.create_table(
        'corpora',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('label', sa.Text(), nullable=False, unique=True),
    )

    # Data
    op.create_table(
        'speakers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), ref('users.id'), nullable=False),
        sa.Column('project_id', sa.Integer(), ref('projects.id'), nullable=False),
        sa.Column('nickname', sa.Text(), nullable=False),
        sa.Column('gender_id', sa.Integer(), ref('enum_genders.id'), nullable=False),
        sa.Column('education_id', sa.Integer(), ref('enum_educations.id'), nullable=False),
        sa.Column('place_id', sa.Integer(), ref('enum_places.id'), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
    )
    op.create_table(
        'docs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('project_id', sa.Integer(), ref('projects.id'), nullable=False),
        sa.Column('corpus_id', sa.Integer(), ref('corpora.id'), nullable=True),
        sa.Column('assigned_to_id', sa.Integer(), ref('users.id'), nullable=True),
        sa.Column('assigned_by_id', sa.Integer(), ref('users.id'), nullable=True),
        sa.Column('done', sa.Boolean(), nullable=True),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('place_id', sa.Integer(), ref('enum_places.id'), nullable=False),
    )
    op.create_table(
        'doc2speaker',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('doc_id', sa.Integer(), ref('docs.id'), nullable=False),
        sa.Column('speaker_id', sa.Integer(), ref('speakers.id'), nullable=False),
        sa.Column('words', sa.Integer(), nullable=True),
    )

    # Views
    for name, query in VIEW_DEFINITIONS:
        op.execute(CreateView(name, query))

    # Enumeration contents
    op.bulk_insert(roles, [{'id': i, 'label': label} for i, label in enumerate(ROLES, 1)])
    op.bulk_insert(genders, [{'id': i, 'label': label} for i, label in enumerate(GENDERS, 1)])
    op.bulk_insert(educations, [{'id': i, 'label': label} for i, label in enumerate(EDUCATIONS, 1)])
    op.bulk_insert(regions, [{'id': i, 'label': label} for i, label in enumerate(REGIONS, 1)])
    op.bulk_insert(
        places,
        [
            {'id': i, 'label': label, 'region_id': region_id}
            for i, (label, region_id) in enumerate(PLACES, 1)
        ],
    )

    if op.get_bind().dialect.name == 'postgresql':
        for table in ('enum_roles', 'enum_genders', 'enum_educations', 'enum_regions', 'enum_places'):
            op.execute(
                f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), (SELECT MAX(id) FROM {table}))"
            )


def downgrade() -> None:
    for name, _ in reversed(VIEW_DEFINITIONS):
        op.execute(DropView(name))
    op.drop_table('doc2speaker')
    op.drop_table('docs')
    op.drop_table('speakers')
    op.drop_table('corpora')
    op.drop_table('projects')
    op.drop_table('users')
    op.drop_table('enum_places')
    op.drop_table('enum_regions')
    op.drop_table('enum_educations')
    op.drop_table('enum_genders')
    op.drop_table('enum_roles')
