"""Create regions, users, groups, memberships, events and attendance"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
import uuid

# revision identifiers, used by Alembic.
revision = '3a1f0c2d9b10'
down_revision = None
branch_labels = None
depends_on = None

REGIONS = [
    ('KILIMANI', 'Kilimani Region'),
    ('LANGATA', 'Langata Region'),
    ('EASTERN', 'Eastern Region'),
    ('KIAMBU', 'Kiambu Region'),
    ('WESTLANDS', 'Westlands Region'),
    ('DIASPORA', 'Diaspora Region'),
    ('INTERCOUNTY', 'Intercounty Region'),
]


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade():
    # Create regions table
    regions = op.create_table(
        'regions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sa.CheckConstraint(
            "name IN (" + ", ".join(f"'{name}'" for name, _ in REGIONS) + ")",
            name='regions_name_check'
        )
    )

    # Create users table
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('auth_id', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=True),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('gender', sa.String(10), nullable=True),
        sa.Column('profile_picture', sa.String(), nullable=True),
        sa.Column('location', sa.String(200), nullable=True),
        sa.Column('next_of_kin_name', sa.String(200), nullable=True),
        sa.Column('next_of_kin_contact', sa.String(100), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('region_id', postgresql.UUID(as_uuid=True), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('auth_id'),
        sa.UniqueConstraint('email'),
        sa.CheckConstraint("role IN ('user', 'admin', 'region_manager', 'super_admin')", name='role_check'),
        sa.CheckConstraint("gender IN ('male', 'female', 'other')", name='gender_check')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'])

    # Create groups table
    op.create_table(
        'groups',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('region_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('group_admin_id', postgresql.UUID(as_uuid=True), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['group_admin_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('region_id', 'name', name='groups_region_id_name_unique')
    )
    op.create_index(op.f('ix_groups_region_id'), 'groups', ['region_id'])

    # Create users_groups membership table
    op.create_table(
        'users_groups',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('group_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        *timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'group_id', name='users_groups_user_id_group_id_unique'),
        sa.CheckConstraint("role IN ('user', 'admin', 'super_admin')", name='users_groups_role_check')
    )
    op.create_index(op.f('ix_users_groups_group_id'), 'users_groups', ['group_id'])

    # Create events table
    op.create_table(
        'events',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('group_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.String(200), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_events_group_id'), 'events', ['group_id'])
    op.create_index(op.f('ix_events_date'), 'events', ['date'])

    # Create attendance table
    op.create_table(
        'attendance',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('event_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('present', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('apology', sa.Text(), nullable=True),
        sa.Column('topic', sa.String(255), nullable=True),
        sa.Column('aob', sa.Text(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'event_id', name='attendance_user_id_event_id_unique')
    )
    op.create_index(op.f('ix_attendance_event_id'), 'attendance', ['event_id'])

    # Seed the predefined regions
    op.bulk_insert(
        regions,
        [{'id': uuid.uuid4(), 'name': name, 'description': description} for name, description in REGIONS]
    )


def downgrade():
    op.drop_index(op.f('ix_attendance_event_id'), table_name='attendance')
    op.drop_table('attendance')
    op.drop_index(op.f('ix_events_date'), table_name='events')
    op.drop_index(op.f('ix_events_group_id'), table_name='events')
    op.drop_table('events')
    op.drop_index(op.f('ix_users_groups_group_id'), table_name='users_groups')
    op.drop_table('users_groups')
    op.drop_index(op.f('ix_groups_region_id'), table_name='groups')
    op.drop_table('groups')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
    op.drop_table('regions')
