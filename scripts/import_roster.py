#!/usr/bin/env python3
"""
Refresh the local member roster from a user-directory CSV export.

The CSV must have the columns user_id, name, active, fully_registered.
Boolean columns accept 1/0, true/false or yes/no. Members missing from the
export are marked inactive rather than deleted, so their attendance history
stays attributable.

Usage:
    python scripts/import_roster.py members.csv [--dry-run]

Options:
    --dry-run    Show what would change without writing
"""
import csv
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session, select

from union_meetings.core.database import create_db_and_tables, engine
from union_meetings.models import Member

TRUE_VALUES = {"1", "true", "yes", "y"}


def parse_bool(value: str) -> bool:
    return value.strip().lower() in TRUE_VALUES


def read_export(path: Path) -> dict[int, dict]:
    """Read the CSV export into {user_id: fields}."""
    rows = {}
    with path.open(newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            user_id = int(row["user_id"])
            rows[user_id] = {
                "name": row.get("name", "").strip(),
                "active": parse_bool(row.get("active", "1")),
                "fully_registered": parse_bool(row.get("fully_registered", "1")),
            }
    return rows


def main(path: Path, dry_run: bool = False):
    """Upsert members from the export and deactivate the ones it no longer lists."""
    exported = read_export(path)
    create_db_and_tables()

    with Session(engine) as session:
        existing = {m.user_id: m for m in session.exec(select(Member)).all()}
        created = updated = deactivated = 0

        for user_id, fields in exported.items():
            member = existing.get(user_id)
            if member is None:
                print(f"  + {user_id} {fields['name']}")
                session.add(Member(user_id=user_id, **fields))
                created += 1
                continue
            changed = {k: v for k, v in fields.items() if getattr(member, k) != v}
            if changed:
                print(f"  ~ {user_id} {member.name}: {changed}")
                for key, value in changed.items():
                    setattr(member, key, value)
                session.add(member)
                updated += 1

        for user_id, member in existing.items():
            if user_id not in exported and member.active:
                print(f"  - {user_id} {member.name} (deactivated)")
                member.active = False
                session.add(member)
                deactivated += 1

        if dry_run:
            print("\nDry run, no changes written.")
            session.rollback()
        else:
            session.commit()

        print(f"\nComplete: {created} created, {updated} updated, {deactivated} deactivated")


if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) != 1:
        print(__doc__)
        sys.exit(1)
    main(Path(args[0]), dry_run="--dry-run" in sys.argv)
