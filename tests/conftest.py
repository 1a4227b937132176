"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real one. Tables are created before and dropped after every test.
"""

import os

# Point the application at the test database before anything
# imports books_ledger.models.base and builds the engine.
TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from books_ledger.main import app
from books_ledger.models import Base
from books_ledger.models.base import enable_sqlite_savepoints, get_db
from books_ledger.models.enums import AccountGroup, VoucherType
from books_ledger.schemas.account import AccountCreate
from books_ledger.schemas.voucher import VoucherDraft, VoucherLineCreate
from books_ledger.services.account_service import AccountService
from books_ledger.services.posting_service import PostingService

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)
enable_sqlite_savepoints(engine)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

# A small payroll chart of accounts: code -> (group, type)
CHART = {
    "CASH": (AccountGroup.ASSETS, "Cash"),
    "BANK": (AccountGroup.ASSETS, "Bank Account"),
    "DEBTORS": (AccountGroup.ASSETS, "Sundry Debtors"),
    "SAL-PAY": (AccountGroup.LIABILITIES, "Current Liabilities"),
    "CAPITAL": (AccountGroup.CAPITAL, "Capital Account"),
    "FEES": (AccountGroup.INCOME, "Direct Income"),
    "INTEREST": (AccountGroup.INCOME, "Indirect Income"),
    "SALARIES": (AccountGroup.EXPENSES, "Indirect Expenses"),
    "RENT": (AccountGroup.EXPENSES, "Indirect Expenses"),
}

@pytest.fixture(autouse=True)
def setup_database():
    """Give every test a clean schema."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

@pytest.fixture
def client(db_session):
    """
    Provide a test client bound to the test database.

    get_db is overridden so the app uses the test session.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

@pytest.fixture
def chart(db_session):
    """Create the standard chart of accounts; returns code -> account id."""
    service = AccountService(db_session)
    ids = {}
    for code, (group, account_type) in CHART.items():
        account = service.create_account(AccountCreate(
            code=code,
            name=code.title(),
            group=group,
            account_type=account_type,
        ))
        ids[code] = account.id
    db_session.commit()
    return ids

@pytest.fixture
def post(db_session, chart):
    """
    Post and commit a voucher from (code, debit, credit) tuples.

        post(VoucherType.RECEIPT, date(2024, 5, 1),
             ("CASH", "500", "0"), ("CAPITAL", "0", "500"))
    """
    def _post(voucher_type, day, *lines, narration="", created_by="tester"):
        draft = VoucherDraft(
            voucher_type=voucher_type,
            date=day,
            narration=narration,
            lines=[
                VoucherLineCreate(
                    account_id=chart[code],
                    debit=Decimal(debit),
                    credit=Decimal(credit),
                )
                for code, debit, credit in lines
            ],
        )
        voucher = PostingService(db_session).post(draft, created_by)
        db_session.commit()
        return voucher

    return _post

@pytest.fixture
def payroll_month(post):
    """
    A month of payroll books:

    - owner brings 10,000 into the bank
    - 2,000 fees received in cash
    - 6,000 salaries accrued, 5,000 of them paid from the bank
    - 800 rent paid in cash
    """
    post(VoucherType.RECEIPT, date(2024, 4, 1),
         ("BANK", "10000", "0"), ("CAPITAL", "0", "10000"))
    post(VoucherType.RECEIPT, date(2024, 4, 5),
         ("CASH", "2000", "0"), ("FEES", "0", "2000"))
    post(VoucherType.JOURNAL, date(2024, 4, 30),
         ("SALARIES", "6000", "0"), ("SAL-PAY", "0", "6000"))
    post(VoucherType.PAYMENT, date(2024, 4, 30),
         ("SAL-PAY", "5000", "0"), ("BANK", "0", "5000"))
    post(VoucherType.PAYMENT, date(2024, 5, 2),
         ("RENT", "800", "0"), ("CASH", "0", "800"))


@pytest.fixture
def random_draft(chart):
    """
    Build a random balanced voucher over the chart from a seeded rng.

    Amounts are whole cents. The debit total is split into a random
    number of credit lines, so the draft balances exactly.
    """
    codes = sorted(chart)

    def _build(rng, day=None):
        debits = [rng.randint(1, 500_000) for _ in range(rng.randint(1, 3))]
        total = sum(debits)
        parts = min(rng.randint(1, 3), total)
        cuts = sorted(rng.sample(range(1, total), parts - 1)) if parts > 1 else []
        credits = [b - a for a, b in zip([0] + cuts, cuts + [total])]

        lines = [
            VoucherLineCreate(
                account_id=chart[rng.choice(codes)],
                debit=Decimal(cents).scaleb(-2),
            )
            for cents in debits
        ] + [
            VoucherLineCreate(
                account_id=chart[rng.choice(codes)],
                credit=Decimal(cents).scaleb(-2),
            )
            for cents in credits
        ]
        rng.shuffle(lines)
        return VoucherDraft(
            voucher_type=rng.choice(list(VoucherType)),
            date=day or date(2024, rng.randint(1, 12), rng.randint(1, 28)),
            lines=lines,
        )

    return _build
