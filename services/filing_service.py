"""
services/filing_service.py
---------------------------
Business logic for tax filings and the per-year summary report.
"""

from db.connection import transaction
from models.audit import ACTION_FILED, AuditLog
from models.filing import FilingSummary, TaxFiling
from repositories.audit_repo import AuditRepository
from repositories.filing_repo import FilingRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class FilingService:
    """Manages filings and formats the filing summary."""

    def __init__(self):
        self.filings = FilingRepository()
        self.audit = AuditRepository()

    def start_filing(self, user_id: int, year: int) -> TaxFiling:
        """Return the user's filing for `year`, creating a not_started one if needed."""
        existing = self.filings.get(user_id, year)
        if existing is not None:
            return existing
        return self.filings.add(TaxFiling(user_id=user_id, year=year))

    def mark_filed(self, user_id: int, year: int) -> bool:
        """Mark a filing as filed and record it in the audit trail."""
        with transaction(f"file {year} return for user {user_id}") as cur:
            updated = self.filings.update_status(user_id, year, "filed", cur=cur)
            if updated:
                self.audit.record(AuditLog(user_id=user_id, action=ACTION_FILED), cur=cur)
        return updated

    def summary(self, user_id: int | None = None, year: int | None = None) -> list[FilingSummary]:
        """filing_summary rows, optionally for one user and/or year."""
        return self.filings.get_summary(user_id, year)

    def summary_report(self, user_id: int | None = None) -> str:
        """Render filing_summary rows as a plain-text table."""
        rows = self.filings.get_summary(user_id)
        if not rows:
            return "No documents on file."

        header = f"{'User':>6} {'Year':>6} {'Total':>6} {'Pending':>8} {'Reviewed':>9} {'Approved':>9}"
        lines = [header, "-" * len(header)]
        for r in rows:
            lines.append(
                f"{r.user_id:>6} {r.year:>6} {r.total_documents:>6} "
                f"{r.pending_review:>8} {r.reviewed_docs:>9} {r.approved_docs:>9}"
            )
        return "\n".join(lines)
