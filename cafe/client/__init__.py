"""
                        Client Module

Everything a patron or staff front end needs on top of the proxy:
the HTTP client, persisted identity, cart, menu, order submission,
the admin order synchronization engine and the patron order history.
"""

from cafe.client.api import CafeApiClient
from cafe.client.cart import Cart
from cafe.client.history import OrderHistory
from cafe.client.menu import MenuCatalog
from cafe.client.store import IdentityStore, LocalStore
from cafe.client.submission import SubmissionResult, submit_cart
from cafe.client.summaries import UserTotal, grand_total, summarize_by_user
from cafe.client.sync import OrderSyncEngine

__all__ = [
    "CafeApiClient",
    "Cart",
    "OrderHistory",
    "MenuCatalog",
    "IdentityStore",
    "LocalStore",
    "SubmissionResult",
    "submit_cart",
    "UserTotal",
    "grand_total",
    "summarize_by_user",
    "OrderSyncEngine",
]
