#!/usr/bin/env python3
"""Import assets from the spreadsheet CSV export and take an initial snapshot."""

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(__file__).rsplit("/", 2)[0])

from sqlalchemy import delete

from app.core.config import settings
from app.core.database import AsyncSessionLocal, engine
from app.core.logging import setup_logging
from app.models.asset import Asset
from app.models.dividend import Dividend
from app.services.bootstrap_service import create_tables, seed_defaults
from app.services.csv_import_service import AssetCSVImporter
from app.services.snapshot_service import snapshot_service


async def import_assets(csv_path: Path, replace: bool) -> None:
    content = csv_path.read_text(encoding="utf-8-sig")
    parsed, errors = AssetCSVImporter(default_owner=settings.PERSON_1).parse_csv(content)

    for error in errors:
        print(f"  ! {error}")
    if not parsed:
        print("Aucun actif trouvé dans le fichier.")
        return

    await create_tables(engine)

    async with AsyncSessionLocal() as session:
        await seed_defaults(session)

        if replace:
            await session.execute(delete(Dividend))
            await session.execute(delete(Asset))

        for item in parsed:
            session.add(Asset(**item.as_dict()))
        await session.commit()
        print(f"{len(parsed)} actifs importés.")

        snapshot = await snapshot_service.capture(session, date.today())
        print(f"Snapshot du {snapshot.snapshot_date}: {snapshot.total_value:,.2f} €")

    await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("csv_path", type=Path, help="Path to the CSV export")
    parser.add_argument(
        "--replace", action="store_true", help="Delete existing assets before importing"
    )
    args = parser.parse_args()

    if not args.csv_path.exists():
        print(f"Fichier introuvable: {args.csv_path}")
        sys.exit(1)

    setup_logging()
    asyncio.run(import_assets(args.csv_path, args.replace))


if __name__ == "__main__":
    main()
