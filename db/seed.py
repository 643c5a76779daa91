"""
db/seed.py
----------
Loads the sample data set into an initialized schema.
Documents go through the repositories, so the post-insert hook runs for
them exactly as it does for real uploads.
    python -m db.seed
"""

from datetime import date

from models.filing import TaxFiling
from models.reminder import Reminder
from models.user import User
from repositories.filing_repo import FilingRepository
from repositories.reminder_repo import ReminderRepository
from repositories.tag_repo import TagRepository
from repositories.user_repo import UserRepository
from services.document_service import DocumentService
from utils.logger import get_logger

logger = get_logger(__name__)

SAMPLE_USERS = [
    ("john_doe", "john@example.com", "hashedpass123"),
    ("jane_smith", "jane@example.com", "hashedpass456"),
]
SAMPLE_TAGS = ["Income", "Investment", "Medical"]
# (user index, year)
SAMPLE_FILINGS = [(0, 2023), (1, 2024)]
# (user index, name, type, year, tags)
SAMPLE_DOCUMENTS = [
    (0, "Form16_2023.pdf", "Income", 2023, ["Income"]),
    (0, "LIC_Receipt.pdf", "Investment", 2023, ["Investment"]),
]
# (user index, message, date)
SAMPLE_REMINDERS = [
    (0, "File tax return for 2023", date(2025, 7, 31)),
    (1, "Upload investment proofs", date(2025, 8, 15)),
]


def load_sample_data() -> dict:
    """
    Insert the sample users, tags, filings, documents and reminders.

    Expects an empty schema: the unique username/email constraints reject
    a second run.

    Returns:
        Dict with the created 'users' and 'documents'.
    """
    users = [UserRepository().add(User(username=u, email=e, password_hash=h)) for u, e, h in SAMPLE_USERS]

    tag_repo = TagRepository()
    for name in SAMPLE_TAGS:
        tag_repo.add(name)

    filing_repo = FilingRepository()
    for idx, year in SAMPLE_FILINGS:
        filing_repo.add(TaxFiling(user_id=users[idx].id, year=year))

    service = DocumentService()
    documents = [
        service.upload(users[idx].id, name, doc_type, year, tags=tags)
        for idx, name, doc_type, year, tags in SAMPLE_DOCUMENTS
    ]

    reminder_repo = ReminderRepository()
    for idx, message, when in SAMPLE_REMINDERS:
        reminder_repo.add(Reminder(user_id=users[idx].id, message=message, remind_date=when))

    logger.info(f"Loaded sample data: {len(users)} users, {len(documents)} documents")
    return {"users": users, "documents": documents}


if __name__ == "__main__":
    from db.connection import init_pool, close_pool
    init_pool()
    try:
        load_sample_data()
    finally:
        close_pool()
    print("Sample data loaded.")
