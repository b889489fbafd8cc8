"""sys-bootstrap: Ubuntu workstation bootstrap (Python-first, check-then-act).

Core design goals:
- Idempotent steps: re-running from the top is the recovery path
- Explicit, validated step order
- One desired-state interface for apt, snap, files, git and friends
- Per-step outcomes aggregated into a report
- Centralized logging
"""

__version__ = "0.1.0"

__all__ = []
