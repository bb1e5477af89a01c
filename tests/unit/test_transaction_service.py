import pytest
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from zoneinfo import ZoneInfo

from conftest import PIN, utc
from finance_dashboard.aggregation import MonthPeriod
from finance_dashboard.domain.dates import normalize_date
from finance_dashboard.domain.enums import TransactionStatus, TransactionType
from finance_dashboard.domain.models import NewTransaction, PublicNewTransaction
from finance_dashboard.repositories.base import TransactionNotFoundError
from finance_dashboard.services.exceptions import AuthenticationError, TransactionValidationError
from finance_dashboard.services.models import ImportResult
from finance_dashboard.services.transaction_service import TransactionService

@pytest.fixture
def seeded_service(service, repository, march_transactions) -> TransactionService:
    repository.save_many(march_transactions)
    return service

@pytest.fixture
def new_transaction() -> NewTransaction:
    return NewTransaction(
        type=TransactionType.EXPENSE,
        category="Equipment",
        amount=Decimal("320.50"),
        date=utc(2024, 3, 12),
        status=TransactionStatus.PENDING,
        is_business=False,
        user="Namis",
        details="Tripod",
        due_date=utc(2024, 3, 30),
    )

@pytest.mark.unit
class TestTransactionServiceAuth:

    def test_wrong_pin_rejected(self, seeded_service):
        with pytest.raises(AuthenticationError, match="Invalid PIN"):
            seeded_service.list_transactions("0000")

    def test_no_stored_pin_rejects_everything(self, repository):
        from finance_dashboard.repositories.memory import InMemorySettingsRepository
        service = TransactionService(repository, InMemorySettingsRepository())

        with pytest.raises(AuthenticationError):
            service.list_transactions("")

    def test_ensure_pin_only_sets_missing_pin(self, service, settings_repository):
        service.ensure_pin("1111")
        assert settings_repository.get_pin() == PIN

        settings_repository.set_pin(None)
        service.ensure_pin("1111")
        assert settings_repository.get_pin() == "1111"

    @pytest.mark.parametrize("call", [
        lambda s: s.list_transactions("bad"),
        lambda s: s.confirm_transaction("bad", "tx_3"),
        lambda s: s.get_management_dashboard("bad", MonthPeriod(2024, 3)),
        lambda s: s.import_file("bad", Path("x.json"), "json"),
    ])
    def test_management_operations_require_pin(self, seeded_service, repository, call):
        before = repository.list_all()

        with pytest.raises(AuthenticationError):
            call(seeded_service)

        assert repository.list_all() == before


@pytest.mark.unit
class TestTransactionServiceQuery:

    def test_list_sorted_newest_first(self, seeded_service):
        result = seeded_service.list_transactions(PIN)
        assert [t.id for t in result] == ["tx_3", "tx_2", "tx_1"]

    def test_public_list_matches_management_list(self, seeded_service):
        assert seeded_service.list_public_transactions() == seeded_service.list_transactions(PIN)

    def test_unknown_dates_listed_last(self, service, repository, make_transaction):
        repository.add(make_transaction(id="undated", date=None))
        repository.add(make_transaction(id="dated", date=utc(2001, 1, 1)))

        assert [t.id for t in service.list_public_transactions()] == ["dated", "undated"]

    def test_public_summary(self, seeded_service):
        result = seeded_service.get_public_summary(MonthPeriod(2024, 3))

        assert result.net_balance == Decimal("3500")
        assert result.total_income == Decimal("6200")
        assert result.total_expense == Decimal("1500")
        assert result.chart_rows[0]["Pending"] == Decimal("1200")

    def test_public_summary_other_month_is_empty(self, seeded_service):
        result = seeded_service.get_public_summary(MonthPeriod(2024, 4))
        assert result.net_balance == Decimal("0")
        assert result.total_income == Decimal("0")

    def test_management_dashboard(self, seeded_service):
        dashboard = seeded_service.get_management_dashboard(PIN, MonthPeriod(2024, 3))

        assert dashboard.total_transactions == 3
        assert dashboard.summary.confirmed_income == Decimal("5000")
        assert dashboard.summary.pending_income == Decimal("1200")
        assert dashboard.summary.confirmed_expense == Decimal("1500")
        assert dashboard.summary.pending_expense == Decimal("0")
        assert len(dashboard.daily) == 31
        assert [(r.name, r.confirmed, r.pending) for r in dashboard.income_sources] == [
            ("Studio", Decimal("5000"), Decimal("0")),
            ("Outdoor", Decimal("0"), Decimal("1200")),
        ]
        assert [t.id for t in dashboard.pending] == ["tx_3"]

    def test_management_dashboard_filters(self, service, repository, mixed_transactions):
        repository.save_many(mixed_transactions)

        dashboard = service.get_management_dashboard(PIN, MonthPeriod(2024, 3), user="Brian", business=False)

        assert [t.id for t in dashboard.transactions] == ["brian_mar"]
        assert dashboard.summary.confirmed_expense == Decimal("150")

    def test_date_only_entry_stays_in_its_local_month(self, repository, settings_repository):
        # Arrange
        new_york = ZoneInfo("America/New_York")
        service = TransactionService(repository, settings_repository, tz=new_york)

        # Act
        service.add_transaction(PIN, NewTransaction(
            type=TransactionType.INCOME,
            category="Studio Income",
            amount=Decimal("5000"),
            date=normalize_date("2024-03-01", tz=new_york),
            status=TransactionStatus.CONFIRMED,
        ))

        # Assert
        march = service.get_management_dashboard(PIN, MonthPeriod(2024, 3))
        february = service.get_management_dashboard(PIN, MonthPeriod(2024, 2))
        assert march.summary.confirmed_income == Decimal("5000")
        assert march.daily[0].income == Decimal("5000")
        assert february.summary.confirmed_income == Decimal("0")
        assert february.daily[28].income == Decimal("0")


@pytest.mark.unit
class TestTransactionServiceAdd:

    def test_public_add_fills_business_fields(self, seeded_service):
        before = len(seeded_service.list_public_transactions())
        now = datetime(2024, 3, 20, 9, tzinfo=timezone.utc)

        new_id = seeded_service.add_public_transaction(
            PublicNewTransaction(
                category="Studio Income",
                amount=Decimal("300"),
                type=TransactionType.INCOME,
                status=TransactionStatus.CONFIRMED,
            ),
            now=now,
        )

        listed = seeded_service.list_public_transactions()
        assert len(listed) == before + 1
        added = next(t for t in listed if t.id == new_id)
        assert added.is_business is True
        assert added.user is None
        assert added.date == now
        assert added.amount == Decimal("300")

    def test_public_add_defaults_date_to_now(self, service):
        before = datetime.now(timezone.utc)
        new_id = service.add_public_transaction(PublicNewTransaction(category="Studio Income", amount=Decimal("1")))
        after = datetime.now(timezone.utc)

        added = service.repository.get_by_id(new_id)
        assert before <= added.date <= after

    def test_ids_are_unique(self, service):
        ids = {
            service.add_public_transaction(PublicNewTransaction(category="Studio Income", amount=Decimal("1")))
            for _ in range(50)
        }
        assert len(ids) == 50

    @pytest.mark.parametrize("category, amount", [
        ("", Decimal("10")),
        ("   ", Decimal("10")),
        ("Studio Income", Decimal("0")),
        ("Studio Income", Decimal("-5")),
        ("Studio Income", Decimal("NaN")),
    ])
    def test_public_add_validation(self, service, repository, category, amount):
        with pytest.raises(TransactionValidationError):
            service.add_public_transaction(PublicNewTransaction(category=category, amount=amount))
        assert repository.list_all() == []

    def test_management_add(self, service, new_transaction):
        new_id = service.add_transaction(PIN, new_transaction)

        saved = service.repository.get_by_id(new_id)
        assert saved.user == "Namis"
        assert saved.is_business is False
        assert saved.status == TransactionStatus.PENDING
        assert saved.due_date == utc(2024, 3, 30)
        assert saved.details == "Tripod"

    def test_management_add_requires_pin(self, service, repository, new_transaction):
        with pytest.raises(AuthenticationError):
            service.add_transaction("nope", new_transaction)
        assert repository.list_all() == []

    def test_business_transaction_cannot_have_user(self, service, new_transaction):
        new_transaction.is_business = True
        with pytest.raises(TransactionValidationError, match="user"):
            service.add_transaction(PIN, new_transaction)

    def test_management_add_requires_date(self, service, new_transaction):
        new_transaction.date = None
        with pytest.raises(TransactionValidationError, match="date"):
            service.add_transaction(PIN, new_transaction)

    def test_unknown_type_rejected(self, service, new_transaction):
        new_transaction.type = "transfer"
        with pytest.raises(TransactionValidationError):
            service.add_transaction(PIN, new_transaction)


@pytest.mark.unit
class TestTransactionServiceConfirm:

    def test_confirm_pending(self, seeded_service):
        assert seeded_service.confirm_transaction(PIN, "tx_3") is True

        confirmed = seeded_service.repository.get_by_id("tx_3")
        assert confirmed.status == TransactionStatus.CONFIRMED

        summary = seeded_service.get_public_summary(MonthPeriod(2024, 3))
        assert summary.net_balance == Decimal("4700")

    def test_confirm_twice_same_as_once(self, seeded_service):
        seeded_service.confirm_transaction(PIN, "tx_3")
        once = seeded_service.list_transactions(PIN)

        assert seeded_service.confirm_transaction(PIN, "tx_3") is True
        assert seeded_service.list_transactions(PIN) == once

    def test_confirm_unknown_id(self, seeded_service):
        before = seeded_service.list_transactions(PIN)

        with pytest.raises(TransactionNotFoundError):
            seeded_service.confirm_transaction(PIN, "tx_missing")

        assert seeded_service.list_transactions(PIN) == before


@pytest.mark.unit
class TestTransactionServiceImport:
    """Import delegates parsing to the factory; the store is mocked"""

    @pytest.fixture
    def mock_repository(self, mocker):
        return mocker.Mock()

    @pytest.fixture
    def mocked_service(self, mock_repository, settings_repository):
        return TransactionService(repository=mock_repository, settings=settings_repository)

    def test_import_dry_run_doesnt_save(self, mocked_service, mock_repository, march_transactions, mocker):
        # Arrange
        mock_parser = mocker.Mock()
        mock_parser.parse.return_value = march_transactions
        mocker.patch(
            'finance_dashboard.parsers.factory.ParserFactory.create_parser',
            return_value=mock_parser
        )
        mock_repository.exists.side_effect = lambda txn_id: txn_id == "tx_1"
        filepath = Path('dump.json')

        # Act
        result = mocked_service.import_file(PIN, filepath, 'json', dry_run=True)

        # Assert
        from finance_dashboard.parsers.factory import ParserFactory
        ParserFactory.create_parser.assert_called_once_with('json', tz=timezone.utc)
        mock_parser.parse.assert_called_once_with(filepath)
        mock_repository.save_many.assert_not_called()
        assert result.total_parsed == 3
        assert result.new_transactions == 2
        assert result.duplicates_skipped == 1
        assert result.skipped == [march_transactions[0]]
        assert result.filepath == str(filepath)
        assert result.file_format == 'json'

    def test_import_saves_and_reports_skipped(self, mocked_service, mock_repository, march_transactions, mocker):
        # Arrange
        mock_parser = mocker.Mock()
        mock_parser.parse.return_value = march_transactions
        mocker.patch(
            'finance_dashboard.parsers.factory.ParserFactory.create_parser',
            return_value=mock_parser
        )
        mock_repository.save_many.return_value = march_transactions[1:]

        # Act
        result: ImportResult = mocked_service.import_file(PIN, Path('dump.json'), 'json')

        # Assert
        mock_repository.save_many.assert_called_once_with(march_transactions)
        assert result.success
        assert result.new_transactions == 2
        assert result.imported == march_transactions[1:]
        assert result.skipped == [march_transactions[0]]
