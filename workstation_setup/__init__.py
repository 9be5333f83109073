"""Workstation setup for Ubuntu (Python-first, idempotent).

Core design goals:
- Every step checks for its target before acting
- Fail fast: the first error stops the run
- Pinned versions in a single YAML manifest
- Centralized logging and a per-run report
"""

__all__ = []
