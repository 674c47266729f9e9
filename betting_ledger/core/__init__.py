"""
Core domain models, payout math, contracts and error taxonomy.

This module contains the foundational building blocks that are independent
of the token component and of the registries that mutate ledger state.
"""
