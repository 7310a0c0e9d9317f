"""
Bank Kernel

Customers and their bank accounts, with:
- Validated entities (account type and birthdate guarded on every assignment)
- Lookup-or-fail CRUD services and idempotent customer creation
- A distinct customers-above-balance query
- Lifecycle hooks that audit account loads, writes and refreshes
"""

__version__ = "0.1.0"
