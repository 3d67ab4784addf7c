"""Remove all order engine data from Redis (useful for testing)."""

import asyncio

from order_engine.state.keys import NAMESPACE
from order_engine.state.manager import StateManager


async def reset_all_state() -> None:
    """Delete every key in the engine's namespace."""
    print(f"\n⚠️  WARNING: This will delete ALL '{NAMESPACE}:*' keys from Redis!")
    response = input("Are you sure? (yes/no): ")

    if response.lower() != "yes":
        print("Cancelled.")
        return

    print("\nResetting state...")

    state_manager = StateManager()
    await state_manager.connect()

    keys = await state_manager.scan_keys(f"{NAMESPACE}:*")
    # Delete in batches to keep each command small
    for start in range(0, len(keys), 500):
        await state_manager.delete(*keys[start:start + 500])

    await state_manager.disconnect()

    print(f"✓ Removed {len(keys)} keys from Redis\n")


if __name__ == "__main__":
    asyncio.run(reset_all_state())
