"""
                Private Cafe Orders

Menu, cart and order submission for patrons, plus a polling admin
view for staff. Persistence lives in a spreadsheet reached through
a thin FastAPI proxy.

Author: Khalil_Bannouri
Version: 4.0.0
License: MIT
"""

__version__ = "4.0.0"
__author__ = "Khalil_Bannouri"
