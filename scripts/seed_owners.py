from __future__ import annotations

# ruff: noqa: E402

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from property_registry.config import get_settings
from property_registry.db.session import dispose_engine, session_context
from property_registry.log import setup_logging
from property_registry.schemas.owner import CreateOwnerRequest
from property_registry.services.owner_service import OwnerService

DEMO_OWNERS: tuple[dict[str, str], ...] = (
    {
        "name": "John Smith",
        "address": "123 Main St, New York, NY 10001",
        "phone": "+1-555-0123",
        "email": "john.smith@example.com",
        "document_type": "SSN",
        "document_number": "123-45-6789",
        "city": "New York",
        "state": "NY",
        "zip_code": "10001",
    },
    {
        "name": "Maria Garcia",
        "address": "456 Oak Ave, Miami, FL 33101",
        "phone": "+1-555-0456",
        "email": "maria.garcia@example.com",
        "document_type": "SSN",
        "document_number": "987-65-4321",
        "city": "Miami",
        "state": "FL",
        "zip_code": "33101",
    },
    {
        "name": "Daniel Reyes",
        "address": "789 Palm Dr, Orlando, FL 32801",
        "phone": "+1-555-0789",
        "email": "daniel.reyes@example.com",
        "document_type": "SSN",
        "document_number": "555-12-3456",
        "city": "Orlando",
        "state": "FL",
        "zip_code": "32801",
    },
)


@dataclass(frozen=True)
class CliArgs:
    dry_run: bool


def _parse_args() -> CliArgs:
    parser = argparse.ArgumentParser(description="Insert the demo property owners.")
    _ = parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the demo payloads without writing to the database.",
    )
    namespace = parser.parse_args()
    return CliArgs(dry_run=bool(namespace.dry_run))


async def _run(args: CliArgs) -> dict[str, object]:
    requests = [CreateOwnerRequest.model_validate(row) for row in DEMO_OWNERS]
    if args.dry_run:
        return {
            "status": "success",
            "dry_run": True,
            "owners": [request.name for request in requests],
        }

    created: list[str] = []
    skipped: list[dict[str, str]] = []
    async with session_context() as session:
        service = OwnerService(session)
        for request in requests:
            result = await service.create_owner(request)
            if result.success and result.data is not None:
                created.append(str(result.data.id))
            else:
                skipped.append({"name": request.name, "reason": result.message})

    return {
        "status": "success",
        "executed_at": datetime.now(UTC).isoformat(),
        "created": created,
        "skipped": skipped,
    }


async def _async_main() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    args = _parse_args()
    try:
        report = await _run(args)
    except Exception as exc:  # noqa: BLE001
        error_report = {
            "status": "failure",
            "executed_at": datetime.now(UTC).isoformat(),
            "error": str(exc),
        }
        print(json.dumps(error_report, ensure_ascii=False, indent=2))
        return 1
    finally:
        await dispose_engine()

    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


def main() -> None:
    raise SystemExit(asyncio.run(_async_main()))


if __name__ == "__main__":
    main()
