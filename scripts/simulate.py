"""
Patron Rush Simulation Script

Simulates a crowd of patrons ordering at once to test the proxy and the
spreadsheet behind it. Each patron picks an identity, fills a random cart
from the live menu and submits it unit by unit.
Run from project root: python scripts/simulate.py

Author: Khalil_Bannouri
Version: 4.0.0
"""

import asyncio
import sys
import os
import random
import time
import argparse
from datetime import datetime
from typing import Any

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from cafe.client import CafeApiClient, Cart, submit_cart
from cafe.core.config import get_settings, setup_logging
from cafe.core.exceptions import CafeError
from cafe.models import ANIMALS, MenuItem, UserIdentity
from cafe.services import get_notifier

# Sample data for random patrons
NICKNAMES = ["Mika", "Sora", "Ren", "Yui", "Kai", "Hana", "Taro", "Aoi", "Riku", "Emi"]


def generate_random_identity(patron_num: int) -> UserIdentity:
    """Generate a random patron identity."""
    nickname = f"{random.choice(NICKNAMES)}{patron_num}"
    return UserIdentity.create(nickname, random.choice(ANIMALS))


def fill_random_cart(menu: list[MenuItem]) -> Cart:
    """Add 1-4 random in-stock items, some of them more than once."""
    cart = Cart()
    available = [item for item in menu if item.in_stock]
    if not available:
        return cart
    for _ in range(random.randint(1, 4)):
        item = random.choice(available)
        for _ in range(random.randint(1, 2)):
            cart.add(item)
    return cart


async def run_patron(
    api: CafeApiClient,
    menu: list[MenuItem],
    patron_num: int,
) -> dict[str, Any]:
    """One patron: build a cart and submit it."""
    identity = generate_random_identity(patron_num)
    cart = fill_random_cart(menu)
    total = cart.total_price
    start_time = time.time()

    result = await submit_cart(api, cart, identity, notifier=get_notifier())
    elapsed = round(time.time() - start_time, 3)

    return {
        "patron_num": patron_num,
        "user_id": identity.user_id,
        "success": result.success,
        "units": result.total_units,
        "submitted_units": result.submitted_units,
        "total": total if result.success else 0,
        "error": result.error,
        "time": elapsed,
    }


async def run_simulation(base_url: str, num_patrons: int) -> dict[str, Any]:
    """
    Fire all patrons concurrently and report.
    """
    print("=" * 70)
    print("☕ PATRON RUSH SIMULATION")
    print("=" * 70)
    print(f"📋 Patrons: {num_patrons}")
    print(f"🎯 Target: {base_url}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with CafeApiClient(base_url=base_url) as api:
        try:
            menu = await api.get_menu_items()
        except CafeError as e:
            print(f"\n❌ Could not load menu: {e}")
            return {"total": num_patrons, "successful": 0, "failed": num_patrons, "results": []}

        print(f"\n📜 Menu loaded: {len(menu)} items")
        if not any(item.in_stock for item in menu):
            print("\n⚠️  Every menu item is out of stock, nothing to order")
            return {"total": num_patrons, "successful": 0, "failed": num_patrons, "results": []}

        print("\n🚀 Sending orders...\n")
        tasks = [run_patron(api, menu, i + 1) for i in range(num_patrons)]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    # Analyze results
    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Successful Carts: {len(successful)}/{num_patrons}")
    print(f"❌ Failed Carts: {len(failed)}/{num_patrons}")
    print(f"🧾 Order Units Written: {sum(r['submitted_units'] for r in results)}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"\n📈 Performance Metrics:")
        print(f"   Average Cart Submission: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   💰 Total Revenue: ¥{sum(r['total'] for r in successful):,}")

    if failed:
        print(f"\n⚠️  Failed Cart Details (showing first 5):")
        for f in failed[:5]:
            print(
                f"   Patron #{f['patron_num']} ({f['submitted_units']}/{f['units']} units sent): "
                f"{f.get('error', 'Unknown error')}"
            )

    print("\n" + "=" * 70)
    print("🔍 VERIFICATION STEPS")
    print("=" * 70)
    print("1. Run: python scripts/verify.py")
    print("2. Run: python scripts/admin_console.py to watch the orders arrive")
    print("=" * 70)

    return {
        "total": num_patrons,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Patron Rush Simulation Script")
    parser.add_argument("--patrons", type=int, default=10, help="Number of concurrent patrons")
    parser.add_argument("--url", default=settings.client_base_url, help="Proxy base URL")
    args = parser.parse_args()

    setup_logging()
    summary = asyncio.run(run_simulation(args.url, args.patrons))
    sys.exit(0 if summary["failed"] == 0 else 1)
