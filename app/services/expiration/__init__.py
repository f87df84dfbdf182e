# app/services/expiration/__init__.py
"""
Content expiration services.

Editors attach an expiration moment to a post or page. An hourly sweep
warns the author two weeks ahead and, at expiration, hides the item by
moving it to the "expired" status. Content is never deleted.

Services:
- setter: Validate and apply submitted expiration fields
- sweep: Hourly warning / expiry reconciliation
- store: Typed access to expiration metadata
- display: "Never" / "Expired" / timestamp summary
- registration: Status and scheduler wiring
"""

from app.services.expiration.display import (
    ExpirationDisplay,
    describe_expiration,
)
from app.services.expiration.registration import (
    register_expired_status,
    register_sweep_trigger,
    unregister_sweep_trigger,
)
from app.services.expiration.setter import save_expiration
from app.services.expiration.store import ExpirationRecord, ExpirationStore
from app.services.expiration.sweep import SweepResult, run_expiration_sweep

__all__ = [
    # Setter
    "save_expiration",
    # Sweep
    "run_expiration_sweep",
    "SweepResult",
    # Store
    "ExpirationStore",
    "ExpirationRecord",
    # Display
    "describe_expiration",
    "ExpirationDisplay",
    # Registration
    "register_expired_status",
    "register_sweep_trigger",
    "unregister_sweep_trigger",
]
