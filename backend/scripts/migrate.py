#!/usr/bin/env python
# backend/scripts/migrate.py
"""
Migration runner that also seeds the admin credential
Usage: python scripts/migrate.py [--skip-seed]
"""
import subprocess
import sys
from pathlib import Path

# Project root
BASE_DIR = Path(__file__).resolve().parent.parent


def manage(*args):
    subprocess.run([sys.executable, "manage.py", *args], cwd=BASE_DIR, check=True)


def run_migrations(seed_admin: bool = True):
    """Apply migrations, then create the admin login if missing"""
    print("=" * 70)
    print("DATABASE MIGRATION MANAGER")
    print("=" * 70)

    try:
        manage("migrate", "--noinput")
        if seed_admin:
            manage("seed_admin")

        print("\n" + "=" * 70)
        print("MIGRATIONS COMPLETED SUCCESSFULLY")
        print("=" * 70)

    except subprocess.CalledProcessError as e:
        print("\n" + "=" * 70)
        print(f"MIGRATION FAILED (exit code {e.returncode})")
        print("=" * 70)
        sys.exit(1)


if __name__ == "__main__":
    run_migrations(seed_admin="--skip-seed" not in sys.argv)
