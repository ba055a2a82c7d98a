"""Normalize legacy role spellings to the canonical snake_case set"""
from alembic import op

# revision identifiers, used by Alembic.
revision = '8c4e7b21d5f3'
down_revision = '3a1f0c2d9b10'
branch_labels = None
depends_on = None

# Must stay in sync with attendance_api.roles.LEGACY_ROLE_SPELLINGS
LEGACY_SPELLINGS = {
    'super admin': 'super_admin',
    'superadmin': 'super_admin',
    'region manager': 'region_manager',
    'regional manager': 'region_manager',
    'regional_manager': 'region_manager',
}


def upgrade():
    op.execute("ALTER TABLE users DROP CONSTRAINT IF EXISTS role_check")
    op.execute("ALTER TABLE users_groups DROP CONSTRAINT IF EXISTS users_groups_role_check")

    for legacy, canonical in LEGACY_SPELLINGS.items():
        op.execute(
            f"UPDATE users SET role = '{canonical}' WHERE LOWER(TRIM(role)) = '{legacy}'"
        )
        op.execute(
            f"UPDATE users_groups SET role = '{canonical}' WHERE LOWER(TRIM(role)) = '{legacy}'"
        )
    op.execute("UPDATE users_groups SET role = 'user' WHERE role IS NULL")

    op.execute(
        "ALTER TABLE users ADD CONSTRAINT role_check "
        "CHECK (role IN ('user', 'admin', 'region_manager', 'super_admin'))"
    )
    op.execute(
        "ALTER TABLE users_groups ADD CONSTRAINT users_groups_role_check "
        "CHECK (role IN ('user', 'admin', 'super_admin'))"
    )


def downgrade():
    # Canonical spellings are kept; only the constraints are relaxed
    op.execute("ALTER TABLE users DROP CONSTRAINT IF EXISTS role_check")
    op.execute("ALTER TABLE users_groups DROP CONSTRAINT IF EXISTS users_groups_role_check")
