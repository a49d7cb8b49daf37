"""envboot: personal environment bootstrapper (profile-driven, idempotent).

Core design goals:
- Declarative profiles per platform
- Idempotent reconciliation (install only what is missing)
- One outcome per package, never abort the batch
- Package manager specifics isolated behind adapters
- Centralized logging
"""

__all__ = []
__version__ = "0.1.0"
