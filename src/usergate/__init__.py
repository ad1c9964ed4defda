"""UserGate — token-authenticated user accounts over a JSON record store.

Clients register an account, log in for a short-lived bearer token and
use that token to read, update or delete their own record.
"""

__version__ = "0.1.0"
