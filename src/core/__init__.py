"""
Core domain models, concurrency primitives, and invariants.

This module contains the foundational building blocks that are independent
of external collaborators (web layer, sessions, templates).
"""
