#!/usr/bin/env python
"""Create the PostgreSQL database named in `DATABASE_URL` (.env) if it is missing.

Usage:
  python scripts/create_database.py [--password PASSWORD]
"""
import argparse
import os
import sys
from getpass import getpass

# Ensure project root is on sys.path so `attendance_api` can be imported
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import psycopg2
from psycopg2 import sql
from psycopg2 import OperationalError
from sqlalchemy.engine import make_url

from attendance_api.config import settings

ADMIN_DB = "postgres"


def connect_admin(url, password):
    return psycopg2.connect(
        dbname=ADMIN_DB,
        user=url.username,
        password=password,
        host=url.host or "localhost",
        port=url.port or 5432,
    )


def ensure_database(conn, target_db):
    conn.autocommit = True
    cur = conn.cursor()
    try:
        cur.execute("SELECT 1 FROM pg_database WHERE datname=%s", (target_db,))
        if cur.fetchone():
            print(f"Database '{target_db}' already exists.")
        else:
            cur.execute(sql.SQL("CREATE DATABASE {};").format(sql.Identifier(target_db)))
            print(f"Database '{target_db}' created.")
    finally:
        cur.close()
        conn.close()


def main():
    url = make_url(settings.DATABASE_URL)
    target_db = url.database
    if not target_db:
        print("No database name found in DATABASE_URL")
        sys.exit(1)

    # Accept password from CLI or environment for non-interactive use
    parser = argparse.ArgumentParser(description="Create the attendance database")
    parser.add_argument("--password", "-p", help="Postgres admin password")
    args = parser.parse_args()

    password = args.password or os.getenv("POSTGRES_PASSWORD") or url.password

    try:
        conn = connect_admin(url, password)
    except OperationalError:
        if not sys.stdin.isatty():
            print("Password authentication failed. Provide the password via --password or POSTGRES_PASSWORD env var.")
            sys.exit(1)
        print("Password authentication failed. Please enter the Postgres password for user:", url.username)
        try:
            conn = connect_admin(url, getpass())
        except OperationalError as e:
            print("Error connecting to Postgres:", e)
            sys.exit(1)

    try:
        ensure_database(conn, target_db)
    except psycopg2.Error as e:
        print("Error creating database:", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
