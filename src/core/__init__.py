"""
Core domain models, mathematical primitives, errors and contracts.

This module contains the foundational building blocks that are independent
of external systems (asset contracts, authorization, event delivery).
"""
