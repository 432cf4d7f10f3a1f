"""Account data: entitlements, export and erasure."""

from calcul8tr_sync.account.entitlements import EntitlementRecord, EntitlementRepository
from calcul8tr_sync.account.service import AccountService

__all__ = ["AccountService", "EntitlementRecord", "EntitlementRepository"]
