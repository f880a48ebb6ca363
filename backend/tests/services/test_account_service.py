# tests/services/test_account_service.py
"""
Tests for AccountService.
"""

import pytest

from balance_tracker.services.accounts import AccountService
from balance_tracker.services.exceptions import (
    AccountNotFoundError,
    DuplicateAccountError,
    ValidationError,
)
from tests.conftest import create_account


@pytest.fixture
def service() -> AccountService:
    return AccountService()


class TestAccountService:

    def test_list_orders_by_name_and_hides_inactive(self, db, service):
        create_account(db, "Marketing")
        create_account(db, "Canteen")
        create_account(db, "Closed", is_active=False)

        assert [a.name for a in service.list_accounts(db)] == ["Canteen", "Marketing"]
        assert len(service.list_accounts(db, include_inactive=True)) == 3

    def test_get_account(self, db, service):
        account = create_account(db, "R&D")

        assert service.get_account(db, account.id).name == "R&D"

    def test_get_missing_account(self, db, service):
        with pytest.raises(AccountNotFoundError) as exc_info:
            service.get_account(db, 999)

        assert str(exc_info.value) == "Account '999' not found"

    def test_get_by_name_is_case_insensitive(self, db, service):
        create_account(db, "Parking fines")

        assert service.get_by_name(db, "  PARKING FINES ").name == "Parking fines"
        assert service.get_by_name(db, "Nope") is None

    def test_create_account_trims_name(self, db, service):
        account = service.create_account(db, "  Travel  ")

        assert account.id is not None
        assert account.name == "Travel"
        assert account.is_active is True

    def test_create_duplicate_any_case(self, db, service):
        create_account(db, "Canteen")

        with pytest.raises(DuplicateAccountError):
            service.create_account(db, "CANTEEN")

    def test_create_blank_name(self, db, service):
        with pytest.raises(ValidationError, match="Account name cannot be empty"):
            service.create_account(db, "   ")
