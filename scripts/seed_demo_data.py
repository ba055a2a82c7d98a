"""
Seed a demo region hierarchy for trying out the attendance analytics

Creates one super admin, one region manager (Kilimani), one group admin,
a group with members and a handful of past events with attendance.
Safe to run more than once.
"""

import sys
import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from attendance_api.database import database, connect_db, disconnect_db

DEFAULTS = {
    "region_name": "KILIMANI",
    "group_name": "Kilimani Young Professionals",
    "super_admin_email": "superadmin@example.com",
    "region_manager_email": "kilimani.manager@example.com",
    "group_admin_email": "group.admin@example.com",
    "member_count": 6,
    "event_count": 5,
}


async def ensure_user(email, full_name, role, region_id):
    existing = await database.fetch_one(
        "SELECT id FROM users WHERE email = :email",
        {"email": email}
    )
    if existing:
        return str(existing["id"])

    user_id = str(uuid.uuid4())
    await database.execute(
        """
        INSERT INTO users (id, auth_id, email, full_name, role, region_id)
        VALUES (:id, :auth_id, :email, :full_name, :role, :region_id)
        """,
        {
            "id": user_id,
            "auth_id": f"demo|{user_id}",
            "email": email,
            "full_name": full_name,
            "role": role,
            "region_id": region_id
        }
    )
    return user_id


async def ensure_membership(user_id, group_id, role):
    await database.execute(
        """
        INSERT INTO users_groups (id, user_id, group_id, role)
        VALUES (:id, :user_id, :group_id, :role)
        ON CONFLICT (user_id, group_id) DO NOTHING
        """,
        {"id": str(uuid.uuid4()), "user_id": user_id, "group_id": group_id, "role": role}
    )


async def seed_demo_data():
    await connect_db()

    try:
        region = await database.fetch_one(
            "SELECT id FROM regions WHERE name = :name",
            {"name": DEFAULTS["region_name"]}
        )
        if not region:
            print("❌ Regions are missing. Run `alembic upgrade head` first.")
            return
        region_id = str(region["id"])

        await ensure_user(DEFAULTS["super_admin_email"], "Demo Super Admin", "super_admin", None)
        await ensure_user(DEFAULTS["region_manager_email"], "Kilimani Manager", "region_manager", region_id)
        admin_id = await ensure_user(DEFAULTS["group_admin_email"], "Demo Group Admin", "admin", region_id)

        group = await database.fetch_one(
            "SELECT id FROM groups WHERE region_id = :region_id AND name = :name",
            {"region_id": region_id, "name": DEFAULTS["group_name"]}
        )
        if group:
            print("✅ Demo data already exists:")
            print(f"   Group: {DEFAULTS['group_name']} ({group['id']})")
            return

        group_id = str(uuid.uuid4())
        await database.execute(
            """
            INSERT INTO groups (id, name, description, region_id, group_admin_id)
            VALUES (:id, :name, :description, :region_id, :group_admin_id)
            """,
            {
                "id": group_id,
                "name": DEFAULTS["group_name"],
                "description": "Demo group seeded for analytics",
                "region_id": region_id,
                "group_admin_id": admin_id
            }
        )
        await ensure_membership(admin_id, group_id, "admin")

        member_ids = []
        for n in range(1, DEFAULTS["member_count"] + 1):
            member_id = await ensure_user(f"member{n}@example.com", f"Demo Member {n}", "user", region_id)
            await ensure_membership(member_id, group_id, "user")
            member_ids.append(member_id)

        # Weekly events going back from yesterday, attendance thinning out over time
        now = datetime.now(timezone.utc)
        for n in range(DEFAULTS["event_count"]):
            event_id = str(uuid.uuid4())
            await database.execute(
                """
                INSERT INTO events (id, group_id, title, date, location)
                VALUES (:id, :group_id, :title, :date, :location)
                """,
                {
                    "id": event_id,
                    "group_id": group_id,
                    "title": f"Weekly Meetup #{DEFAULTS['event_count'] - n}",
                    "date": now - timedelta(days=1 + 7 * n),
                    "location": "Kilimani"
                }
            )
            for index, member_id in enumerate(member_ids):
                present = index < len(member_ids) - n
                await database.execute(
                    """
                    INSERT INTO attendance (id, user_id, event_id, present, apology)
                    VALUES (:id, :user_id, :event_id, :present, :apology)
                    """,
                    {
                        "id": str(uuid.uuid4()),
                        "user_id": member_id,
                        "event_id": event_id,
                        "present": present,
                        "apology": None if present else "Travelling"
                    }
                )

        print("✅ Demo data created successfully!")
        print(f"   Region: {DEFAULTS['region_name']}")
        print(f"   Group: {DEFAULTS['group_name']} ({group_id})")
        print(f"   Members: {len(member_ids) + 1}, Events: {DEFAULTS['event_count']}")

    finally:
        await disconnect_db()


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
