# app/cli/expiration.py
"""
CLI commands for content expiration.

Usage:
    python -m app.cli.expiration status
    python -m app.cli.expiration sweep
    python -m app.cli.expiration set 42 --actor 1 --days 30
    python -m app.cli.expiration set 42 --actor 1 --date 2027-03-01 --hour 9 --ampm am
    python -m app.cli.expiration disable 42 --actor 1
"""

import argparse
import sys

from dotenv import load_dotenv

load_dotenv()


def get_db_session():
    """Get a database session."""
    from app.database import SessionLocal

    return SessionLocal()


def build_fields(args) -> dict:
    """Translate CLI flags into the form fields a content save would submit."""
    from app.constants import ExpirationFields

    if args.command == "disable":
        return {ExpirationFields.STATUS: ExpirationFields.MODE_DISABLE}

    if args.days is not None:
        return {
            ExpirationFields.STATUS: ExpirationFields.MODE_BY_DAYS,
            ExpirationFields.DAYS: args.days,
        }

    year, _, rest = args.date.partition("-")
    month, _, day = rest.partition("-")
    return {
        ExpirationFields.STATUS: ExpirationFields.MODE_BY_DATE,
        ExpirationFields.YEAR: year,
        ExpirationFields.MONTH: month,
        ExpirationFields.DAY: day,
        ExpirationFields.HOUR: args.hour,
        ExpirationFields.AMPM: args.ampm,
    }


def cmd_status(args):
    """Show the expiration column for every item with an expiration."""
    from app.lifecycle_status import StatusRegistry
    from app.services.expiration import register_expired_status
    from app.services.expiration.dates import get_timezone, now_in
    from app.services.expiration.display import display_for_record
    from app.services.expiration.store import ExpirationStore

    registry = StatusRegistry()
    register_expired_status(registry)

    db = get_db_session()
    try:
        tz = get_timezone()
        now = now_in(tz)
        store = ExpirationStore(db, tz=tz)
        entries = store.list_scheduled()

        print("\n=== Content Expiration Status ===\n")
        print(f"Timezone: {tz.key}")
        print(f"Now: {now.strftime('%Y-%m-%d %I:%M %p %Z')}")
        print(f"Items with an expiration: {len(entries)}\n")

        for entry in entries:
            item = entry.item
            display = display_for_record(store.get(item.id), now)
            notified = " [warned]" if entry.notified else ""
            print(f"#{item.id} {item.title} ({item.kind}, {registry.label_for(item.status)})")
            print(f"  Expiration: {display.label}{notified}")

        print()
    finally:
        db.close()


def cmd_sweep(args):
    """Run one expiration sweep now."""
    from app.services.expiration import run_expiration_sweep

    db = get_db_session()
    try:
        print("\nRunning expiration sweep...\n")

        result = run_expiration_sweep(db)

        print(f"Status: {result.status}")
        print(f"Scanned: {result.records_scanned}")
        print(f"Warnings sent: {result.warnings_sent}")
        print(f"Expired: {result.items_expired}")
        print(f"Skipped (unreadable): {result.records_skipped}")
        print(f"Failed: {result.items_failed}")
        print(f"Mail failures: {result.mail_failures}")

        if result.errors:
            print("\nErrors:")
            for error in result.errors:
                print(f"  - {error}")

        if not result.success:
            sys.exit(1)
    finally:
        db.close()


def cmd_save(args):
    """Set or disable an item's expiration as a given user."""
    from app.models import ContentItem, User
    from app.services.expiration import describe_expiration, save_expiration

    db = get_db_session()
    try:
        item = db.get(ContentItem, args.item_id)
        if item is None:
            print(f"Error: Item {args.item_id} not found")
            sys.exit(1)

        before = describe_expiration(db, item.id)
        save_expiration(db, item.id, item.kind, build_fields(args), db.get(User, args.actor))
        after = describe_expiration(db, item.id)

        if before.raw == after.raw and args.command != "disable":
            print(f"No change: expiration for #{item.id} is still {after.label}")
            print("(Check the actor's permissions and the date/day values.)")
            sys.exit(1)

        print(f"#{item.id} {item.title}")
        print(f"  Expiration: {after.label}")
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(
        description="Content Expiration CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List items with an expiration
  python -m app.cli.expiration status

  # Run the sweep now
  python -m app.cli.expiration sweep

  # Expire item 42 in 30 days, acting as user 1
  python -m app.cli.expiration set 42 --actor 1 --days 30

  # Expire item 42 on a given date and hour
  python -m app.cli.expiration set 42 --actor 1 --date 2027-03-01 --hour 9 --ampm am

  # Remove the expiration
  python -m app.cli.expiration disable 42 --actor 1
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # status command
    status_parser = subparsers.add_parser("status", help="Show expirations")
    status_parser.set_defaults(func=cmd_status)

    # sweep command
    sweep_parser = subparsers.add_parser("sweep", help="Run the expiration sweep now")
    sweep_parser.set_defaults(func=cmd_sweep)

    # set command
    set_parser = subparsers.add_parser("set", help="Set an item's expiration")
    set_parser.add_argument("item_id", type=int, help="Content item id")
    set_parser.add_argument("--actor", type=int, required=True, help="User id performing the change")
    when = set_parser.add_mutually_exclusive_group(required=True)
    when.add_argument("--days", type=str, help="Expire in N days (1-1824)")
    when.add_argument("--date", type=str, help="Expire on YYYY-MM-DD")
    set_parser.add_argument("--hour", type=str, default="12", help="Hour for --date, 1-12 (default: 12)")
    set_parser.add_argument("--ampm", choices=["am", "pm"], default="am", help="am/pm for --date (default: am)")
    set_parser.set_defaults(func=cmd_save)

    # disable command
    disable_parser = subparsers.add_parser("disable", help="Remove an item's expiration")
    disable_parser.add_argument("item_id", type=int, help="Content item id")
    disable_parser.add_argument("--actor", type=int, required=True, help="User id performing the change")
    disable_parser.set_defaults(func=cmd_save)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
