"""Android build host provisioning for Ubuntu.

Core design goals:
- Environment resolved before any change to the host
- Package selection as data, dispatched on the Ubuntu release
- Idempotent steps where the effect can be detected
- Fail fast on the first fatal step, no rollback
- Centralized logging
"""

__all__ = []
