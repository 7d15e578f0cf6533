#!/usr/bin/env python3
"""
Load the starter habits into an empty store:  python scripts/seed_habits.py
"""
import asyncio
from forge.db import create_db_and_tables
from forge.services.habit_store import HabitStore

async def main():
    await create_db_and_tables()
    seeded = await HabitStore().seed_sample_habits()
    if not seeded:
        print("Store already has habits; nothing seeded.")
        return
    for habit in seeded:
        print(f"  + {habit.full_description} [{habit.pillar.value}]")
    print(f"Seeded {len(seeded)} habits.")

if __name__ == "__main__":
    asyncio.run(main())
