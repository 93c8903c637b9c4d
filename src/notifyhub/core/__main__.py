"""CLI entry -- python -m notifyhub.core <command>

Commands:
  init-db               create the directory + ledger schema
  report <message_id>   rebuild a dispatch report from ledger rows
"""

import asyncio
import json
import sys

from .config import get_db_path


def main() -> None:
    """CLI main entry"""
    if len(sys.argv) < 2:
        print("usage: python -m notifyhub.core <command>")
        print("commands:")
        print("  init-db               create the directory + ledger schema")
        print("  report <message_id>   rebuild a dispatch report from ledger rows")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    elif command == "report":
        if len(sys.argv) < 3:
            print("usage: python -m notifyhub.core report <message_id>")
            sys.exit(1)
        found = asyncio.run(print_report(sys.argv[2]))
        if not found:
            sys.exit(1)
    else:
        print(f"unknown command: {command}")
        print("available commands: init-db, report")
        sys.exit(1)


async def init_database() -> None:
    """Create the schema at the configured path"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"database path: {db_path}")

    store_group = await create_store_group(db_path)
    await store_group.conn.close()
    print("schema ready")


async def print_report(message_id: str) -> bool:
    """Print the report of a logged message; False if unknown"""
    from .models import DispatchReport
    from .store import attempts_from_records, create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        message = await store_group.ledger.get_message(message_id)
        if message is None:
            print(f"message not found: {message_id}")
            return False
        records = await store_group.ledger.get_attempts(message_id)
        report = DispatchReport.from_attempts(
            attempts_from_records(records),
            message_id=message_id,
        )
        pending = sum(1 for r in records if r.status == "pending")
        print(f"subject: {message.subject}")
        print(json.dumps(report.to_response(), indent=2))
        if pending:
            print(f"pending attempts: {pending}")
        return True
    finally:
        await store_group.conn.close()


if __name__ == "__main__":
    main()
