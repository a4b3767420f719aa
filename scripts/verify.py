"""
Workbook Verification Script

Verifies data integrity of the development orders workbook.
Run from project root: python scripts/verify.py

Author: Khalil Bannouri
Version: 4.0.0
"""

import os
import sys
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pandas as pd

from cafe.core.config import get_settings
from cafe.services.sheets import ORDER_COLUMNS

settings = get_settings()
ORDERS_FILE = os.path.join(settings.data_directory, settings.orders_workbook)


def verify_workbook() -> bool:
    """Verify orders workbook integrity after a simulation."""

    print("=" * 60)
    print("🔍 ORDERS WORKBOOK VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"📄 File: {ORDERS_FILE}")
    print("=" * 60)

    # Check if file exists
    if not os.path.exists(ORDERS_FILE):
        print("\n❌ Orders workbook not found!")
        print("   Run the simulation first: python scripts/simulate.py")
        return False

    # Load workbook
    try:
        df = pd.read_excel(ORDERS_FILE, engine="openpyxl")
        print(f"\n✅ File loaded successfully!")
    except Exception as e:
        print(f"\n❌ Could not read workbook: {e}")
        return False

    ok = True

    # Statistics
    print(f"\n📊 STATISTICS:")
    print(f"   Total Order Units: {len(df)}")
    print(f"   Columns: {len(df.columns)}")

    # Check required columns
    missing = [col for col in ORDER_COLUMNS if col not in df.columns]
    if missing:
        ok = False
        print(f"\n⚠️ Missing Columns: {missing}")
    else:
        print(f"\n✅ All required columns present")

    # Check duplicates
    if "orderId" in df.columns:
        duplicates = df["orderId"].duplicated().sum()
        if duplicates > 0:
            ok = False
            print(f"\n⚠️ {duplicates} duplicate order IDs found!")
        else:
            print(f"✅ No duplicate order IDs")

    # Completion
    if "completed" in df.columns:
        completed = df["completed"].astype(str).str.lower().eq("true").sum()
        print(f"\n🍽️  COMPLETION:")
        print(f"   Completed: {completed}")
        print(f"   Pending: {len(df) - completed}")

    # Revenue
    if "price" in df.columns and len(df) > 0:
        prices = pd.to_numeric(df["price"], errors="coerce").fillna(0)
        print(f"\n💰 REVENUE:")
        print(f"   Total: ¥{int(prices.sum()):,}")
        print(f"   Average Unit: ¥{prices.mean():.0f}")

    # Per-patron breakdown
    if {"userId", "price"}.issubset(df.columns) and len(df) > 0:
        print(f"\n👥 TOP PATRONS:")
        by_user = df.assign(price=pd.to_numeric(df["price"], errors="coerce").fillna(0))
        top = by_user.groupby("userId")["price"].sum().sort_values(ascending=False).head(5)
        for user_id, total in top.items():
            print(f"   {user_id}: ¥{int(total):,}")

    # Sample data
    print(f"\n📋 RECENT ORDERS:")
    print("-" * 60)
    if len(df) > 0:
        cols = ["orderId", "nickname", "item", "price", "completed"]
        cols = [c for c in cols if c in df.columns]
        print(df[cols].tail(5).to_string(index=False))

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE" if ok else "⚠️ VERIFICATION FOUND PROBLEMS")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    sys.exit(0 if verify_workbook() else 1)
