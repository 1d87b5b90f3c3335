from decimal import Decimal
from itertools import count
from typing import Any

import pytest

from fleet_finance.config import Settings, get_settings
from fleet_finance.container import reset_container
from fleet_finance.domain.financing import Debt
from fleet_finance.domain.line_items import LineItem
from fleet_finance.domain.value_objects import Money
from fleet_finance.exceptions import DocumentStoreError
from fleet_finance.services.documents import DocumentService


class RecordingStore:
    """In-memory stand-in for DocumentStoreClient that records every call."""

    def __init__(
        self, *, return_ids: bool = True, reject_tables: tuple[str, ...] = ()
    ) -> None:
        self.inserts: list[tuple[str, list[dict[str, Any]]]] = []
        self.updates: list[tuple[str, dict[str, str], dict[str, Any]]] = []
        self.deletes: list[tuple[str, dict[str, str]]] = []
        self._ids = count(1)
        self._return_ids = return_ids
        self._reject_tables = reject_tables

    def insert(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if table in self._reject_tables:
            raise DocumentStoreError(f"rejected {table}", table=table, store_status=400)
        self.inserts.append((table, rows))
        if not self._return_ids:
            return [dict(row) for row in rows]
        return [{"id": f"{table}-{next(self._ids)}", **row} for row in rows]

    def update(
        self, table: str, match: dict[str, str], values: dict[str, Any]
    ) -> list[dict[str, Any]]:
        self.updates.append((table, match, values))
        return [{**match, **values}]

    def delete(self, table: str, match: dict[str, str]) -> list[dict[str, Any]]:
        self.deletes.append((table, match))
        return [dict(match)]

    def rows_for(self, table: str) -> list[dict[str, Any]]:
        return [row for name, rows in self.inserts if name == table for row in rows]

    def close(self) -> None:
        pass


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "FLEET_DOCUMENT_STORE_URL",
        "FLEET_DEFAULT_TERM_MONTHS",
        "FLEET_ENVIRONMENT",
        "FLEET_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def store_factory() -> type[RecordingStore]:
    return RecordingStore


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def document_service(store: RecordingStore) -> DocumentService:
    return DocumentService(
        store,  # type: ignore[arg-type]
        company_id="company-1",
        number_factory=lambda prefix: f"{prefix}-123456-007",
    )


@pytest.fixture
def taxed_line() -> LineItem:
    return LineItem(
        quantity=Decimal("3"),
        unit_price=Decimal("10.00"),
        tax_rate=Decimal("10"),
        description="Brake inspection",
    )


@pytest.fixture
def untaxed_line() -> LineItem:
    return LineItem(
        quantity=Decimal("2"),
        unit_price=Decimal("10.00"),
        tax_rate=Decimal("0"),
        description="Labor",
    )


@pytest.fixture
def sample_debts() -> list[Debt]:
    return [
        Debt(
            lender="Fleet Capital",
            description="Vehicle Loan - Truck #1234",
            original_amount=Money(Decimal("150000")),
            current_balance=Money(Decimal("120000")),
            interest_rate=Decimal("4.5"),
            monthly_payment=Money(Decimal("2800")),
            remaining_payments=52,
            total_interest_paid=Money(Decimal("8500")),
            total_interest_remaining=Money(Decimal("15600")),
        ),
        Debt(
            lender="Truck Lenders Inc",
            description="Equipment Financing",
            original_amount=Money(Decimal("75000")),
            current_balance=Money(Decimal("65000")),
            interest_rate=Decimal("5.2"),
            monthly_payment=Money(Decimal("1500")),
            remaining_payments=43,
            total_interest_paid=Money(Decimal("3200")),
            total_interest_remaining=Money(Decimal("8900")),
        ),
        Debt(
            lender="First Commercial Bank",
            description="Business Line of Credit",
            original_amount=Money(Decimal("200000")),
            current_balance=Money(Decimal("150000")),
            interest_rate=Decimal("6.5"),
            monthly_payment=Money(Decimal("4200")),
            remaining_payments=24,
            total_interest_paid=Money(Decimal("12500")),
            total_interest_remaining=Money(Decimal("18200")),
        ),
    ]
