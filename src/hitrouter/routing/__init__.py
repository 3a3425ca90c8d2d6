"""Routing — per-method route tries with static-first matching.

Routes are registered during setup; the tables are read-only once the
router starts serving.
"""
