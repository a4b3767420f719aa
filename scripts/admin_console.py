"""
Admin Console

Terminal version of the staff order screen. Polls the proxy every few
seconds, rings the bell when new orders arrive and lets staff toggle
completion by row number.
Run from project root: python scripts/admin_console.py

Commands:
    <n>   toggle completion of row n
    r     refresh now
    s     toggle sound
    u     per-user totals
    q     quit

Author: Khalil Bannouri
Version: 4.0.0
"""

import asyncio
import sys
import os
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from cafe.client import (
    CafeApiClient,
    IdentityStore,
    LocalStore,
    OrderSyncEngine,
    grand_total,
)
from cafe.core.config import get_settings, get_logger, setup_logging
from cafe.core.exceptions import CafeError
from cafe.models import Order, animal_emoji
from cafe.services.notifications import ConsoleNotifier

logger = get_logger(__name__)


def render_orders(engine: OrderSyncEngine) -> list[Order]:
    """Print pending then completed orders; return them in row order."""
    rows = engine.pending_orders + engine.completed_orders

    print("\n" + "=" * 72)
    print(
        f"🔄 Pending: {len(engine.pending_orders)}   "
        f"✅ Completed: {len(engine.completed_orders)}   "
        f"👥 Patrons: {len(engine.user_totals())}   "
        f"🔊 Sound: {'on' if engine.sound_enabled else 'off'}"
    )
    if engine.error:
        print(f"⚠️  {engine.error}")
    print("-" * 72)

    for index, order in enumerate(rows, start=1):
        flags = []
        if engine.is_new(order):
            flags.append("NEW")
        if order.order_id in engine.pending_update_order_ids:
            flags.append("…")
        status = "done" if order.completed else "todo"
        print(
            f"{index:>3}. [{status}] {order.timestamp[11:16]}  "
            f"{animal_emoji(order.animal)} {order.nickname:<12} "
            f"{order.item:<20} ¥{order.price:>6,} {' '.join(flags)}"
        )

    if not rows:
        print("   No orders yet")
    print("=" * 72)
    return rows


def render_user_totals(engine: OrderSyncEngine) -> None:
    totals = engine.user_totals()
    print("\n👥 PER-USER TOTALS")
    for summary in totals:
        print(f"   {animal_emoji(summary.animal)} {summary.nickname:<12} ¥{summary.total:>7,}  ({len(summary.orders)} items)")
    print(f"   {'Grand total':<15} ¥{grand_total(totals):>7,}")


async def run_console(base_url: str, interval: float) -> None:
    settings = get_settings()
    store = LocalStore()

    identity = IdentityStore(store).load()
    if identity is None or not identity.is_admin(settings.admin_nickname):
        logger.warning(
            f"Current profile is not '{settings.admin_nickname}'; continuing in admin mode anyway"
        )

    async with CafeApiClient(base_url=base_url) as api:
        engine = OrderSyncEngine(api, notifier=ConsoleNotifier(), store=store, poll_interval=interval)
        engine.start()
        rows: list[Order] = []

        try:
            while True:
                rows = render_orders(engine)
                command = (await asyncio.to_thread(input, "> ")).strip().lower()

                if command == "q":
                    break
                elif command == "r":
                    try:
                        await engine.refresh()
                    except CafeError as e:
                        print(f"❌ {e}")
                elif command == "s":
                    engine.sound_enabled = not engine.sound_enabled
                elif command == "u":
                    render_user_totals(engine)
                elif command.isdigit() and 1 <= int(command) <= len(rows):
                    order = rows[int(command) - 1]
                    await engine.toggle_completion(order, order.completed)
                elif command:
                    print("Commands: <n> toggle, r refresh, s sound, u totals, q quit")
        finally:
            await engine.close()


if __name__ == "__main__":
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Cafe admin console")
    parser.add_argument("--url", default=settings.client_base_url, help="Proxy base URL")
    parser.add_argument(
        "--interval",
        type=float,
        default=settings.admin_poll_seconds,
        help="Seconds between automatic refreshes",
    )
    args = parser.parse_args()

    setup_logging()
    try:
        asyncio.run(run_console(args.url, args.interval))
    except (KeyboardInterrupt, EOFError):
        print("\nBye")
