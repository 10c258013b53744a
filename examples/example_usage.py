"""Ví dụ: dùng service layer (không qua Flask).

Starts and stops one shift for the seeded demo employee, then prints today's
earnings. Run `python scripts/init_db.py` and `python scripts/seed_db.py` first.
"""

import asyncio
import importlib

from config import get_settings_module

from src.shift_ledger.shift_ledger.container import build_container
from src.shift_ledger.shift_ledger.shifts.photo import ProvidedPhoto


async def run(container) -> None:
    photo = ProvidedPhoto("demo-photo")
    entry = await container.shift_service.start_shift("emp-1", 1, equipment_id="eq-lathe", photo=photo)
    print("started", entry.log_id)
    entry = await container.shift_service.stop_shift("emp-1", 1, photo=photo)
    print("stopped", entry.log_id, entry.duration_minutes, "min")


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    asyncio.run(run(container))
    print(container.payroll_service.today_earnings("emp-1"))


if __name__ == "__main__":
    main()
