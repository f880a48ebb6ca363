# tests/routers/test_balances_api.py
"""
API layer tests for balance endpoints.

Tests:
- GET /api/v1/balances/latest
- GET /api/v1/balances/by-period
- GET /api/v1/balances/summary
- GET /api/v1/balances/summary/by-period
- POST /api/v1/balances/upload
- GET /api/v1/balances/upload/formats
"""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session

from balance_tracker.database import get_db
from balance_tracker.dependencies import get_balance_query_service, get_upload_service
from balance_tracker.main import app
from balance_tracker.models import BalanceRecord
from balance_tracker.services.exceptions import UploadCancelledError
from balance_tracker.services.upload.types import UploadOutcome
from tests.conftest import create_account, create_balance, get_auth_headers

BASE_URL = "/api/v1/balances"
PAST_YEAR = 2024


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def client(db: Session) -> TestClient:
    """Create TestClient with database dependency override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app, raise_server_exceptions=False) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(admin_user) -> dict[str, str]:
    return get_auth_headers(admin_user)


@pytest.fixture
def user_headers(regular_user) -> dict[str, str]:
    return get_auth_headers(regular_user)


@pytest.fixture
def mock_query_service() -> MagicMock:
    service = MagicMock()
    app.dependency_overrides[get_balance_query_service] = lambda: service
    return service


@pytest.fixture
def mock_upload_service() -> MagicMock:
    service = MagicMock()
    service.allowed_extensions = (".csv",)
    app.dependency_overrides[get_upload_service] = lambda: service
    return service


def upload(client, headers, content: bytes, filename="balances.csv", year=PAST_YEAR, month=6):
    return client.post(
        f"{BASE_URL}/upload",
        headers=headers,
        data={"year": str(year), "month": str(month)},
        files={"file": (filename, content, "text/csv")},
    )


# =============================================================================
# TEST: LATEST
# =============================================================================


class TestLatest:

    def test_requires_authentication(self, client):
        response = client.get(f"{BASE_URL}/latest")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_any_role_may_read(self, client, db, admin_user, user_headers):
        rnd = create_account(db, "R&D")
        create_balance(db, rnd, admin_user, 2025, 1, "85000.00")

        response = client.get(f"{BASE_URL}/latest", headers=user_headers)

        assert response.status_code == 200
        [item] = response.json()
        assert item["account"] == "R&D"
        assert item["accountName"] == "R&D"
        assert item["accountId"] == rnd.id
        assert Decimal(item["amount"]) == Decimal("85000.00")
        assert (item["year"], item["month"]) == (2025, 1)
        assert "uploadedAt" in item

    def test_empty_list_without_data(self, client, user_headers):
        response = client.get(f"{BASE_URL}/latest", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == []


# =============================================================================
# TEST: BY PERIOD
# =============================================================================


class TestByPeriod:

    def test_admin_gets_period(self, client, db, admin_user, admin_headers):
        rnd = create_account(db, "R&D")
        create_balance(db, rnd, admin_user, 2025, 3, "10")
        create_balance(db, rnd, admin_user, 2025, 4, "20")

        response = client.get(f"{BASE_URL}/by-period?year=2025&month=3", headers=admin_headers)

        assert response.status_code == 200
        assert [Decimal(i["amount"]) for i in response.json()] == [Decimal("10")]

    def test_user_role_forbidden(self, client, user_headers):
        response = client.get(f"{BASE_URL}/by-period?year=2025&month=3", headers=user_headers)

        assert response.status_code == 403
        data = response.json()
        assert data["error"] == "PermissionDeniedError"
        assert data["details"] == {"capability": "view_period_balances"}

    @pytest.mark.parametrize("query,message", [
        ("year=1999&month=1", "Invalid year"),
        (f"year={date.today().year + 2}&month=1", "Invalid year"),
        ("year=2025&month=13", "Invalid month"),
        ("year=2025&month=0", "Invalid month"),
    ])
    def test_invalid_period_never_reaches_service(
            self, client, admin_headers, mock_query_service, query, message
    ):
        response = client.get(f"{BASE_URL}/by-period?{query}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == message
        mock_query_service.by_period.assert_not_called()

    def test_missing_query_parameters(self, client, admin_headers):
        response = client.get(f"{BASE_URL}/by-period", headers=admin_headers)

        assert response.status_code == 422


# =============================================================================
# TEST: SUMMARIES
# =============================================================================


class TestSummary:

    def test_summary_shape(self, client, db, admin_user, user_headers):
        rnd = create_account(db, "R&D")
        create_balance(db, rnd, admin_user, 2025, 6, "100")
        create_balance(db, rnd, admin_user, 2025, 7, "50")

        response = client.get(f"{BASE_URL}/summary", headers=user_headers)

        assert response.status_code == 200
        [item] = response.json()
        assert item["accountName"] == "R&D"
        assert item["accountId"] == rnd.id
        assert Decimal(item["totalAmount"]) == Decimal("150")
        assert (item["year"], item["month"]) == (2025, 7)
        assert item["recordCount"] == 2
        assert item["periodDisplay"] == "2025-07"
        assert item["formattedAmount"] == "150.00"
        assert "lastUpdatedAt" in item

    def test_summary_by_period_admin_only(self, client, user_headers):
        response = client.get(f"{BASE_URL}/summary/by-period?year=2025&month=7", headers=user_headers)

        assert response.status_code == 403

    def test_summary_by_period(self, client, db, admin_user, admin_headers):
        rnd = create_account(db, "R&D")
        create_balance(db, rnd, admin_user, 2025, 6, "100")
        create_balance(db, rnd, admin_user, 2025, 7, "50")

        response = client.get(f"{BASE_URL}/summary/by-period?year=2025&month=6", headers=admin_headers)

        assert response.status_code == 200
        [item] = response.json()
        assert Decimal(item["totalAmount"]) == Decimal("100")
        assert item["recordCount"] == 1

    def test_summary_by_period_validates(self, client, admin_headers, mock_query_service):
        response = client.get(f"{BASE_URL}/summary/by-period?year=2025&month=14", headers=admin_headers)

        assert response.status_code == 400
        mock_query_service.summary_by_period.assert_not_called()


# =============================================================================
# TEST: UPLOAD
# =============================================================================


class TestUpload:

    def test_successful_upload(self, client, db, admin_headers):
        create_account(db, "R&D")

        response = upload(client, admin_headers, b"Account,Amount\nR&D,123.45\n")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["processedRecords"] == 1
        assert data["skippedRecords"] == 0
        assert data["message"] == "Successfully processed 1 records"
        stored = db.execute(select(BalanceRecord)).scalar_one()
        assert stored.amount == Decimal("123.45")
        assert (stored.year, stored.month) == (PAST_YEAR, 6)

    def test_partial_upload_is_200(self, client, db, admin_headers):
        create_account(db, "R&D")

        response = upload(client, admin_headers, b"R&D,100\nGhostAcct,50\n")

        assert response.status_code == 200
        data = response.json()
        assert data["skippedRecords"] == 1
        assert data["errors"] == [
            "Invalid Account: 'GhostAcct' - Account does not exist in the system"
        ]

    def test_nothing_stored_is_400_with_outcome(self, client, admin_headers):
        response = upload(client, admin_headers, b"GhostAcct,50\n")

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["processedRecords"] == 0
        assert data["message"] == "No records processed. 1 records skipped due to invalid accounts"

    def test_user_role_forbidden(self, client, user_headers, mock_upload_service):
        response = upload(client, user_headers, b"R&D,1\n")

        assert response.status_code == 403
        mock_upload_service.execute.assert_not_called()

    def test_requires_authentication(self, client, mock_upload_service):
        response = upload(client, {}, b"R&D,1\n")

        assert response.status_code == 401
        mock_upload_service.execute.assert_not_called()

    def test_future_year_rejected(self, client, admin_headers, mock_upload_service):
        response = upload(client, admin_headers, b"R&D,1\n", year=date.today().year + 1, month=1)

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot upload balance data for future years"
        mock_upload_service.execute.assert_not_called()

    def test_year_before_2000_rejected(self, client, admin_headers, mock_upload_service):
        response = upload(client, admin_headers, b"R&D,1\n", year=1999)

        assert response.status_code == 400
        assert response.json()["message"] == "Year cannot be before 2000"

    def test_invalid_month_rejected(self, client, admin_headers, mock_upload_service):
        response = upload(client, admin_headers, b"R&D,1\n", month=13)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid month"

    def test_missing_file(self, client, admin_headers, mock_upload_service):
        response = client.post(
            f"{BASE_URL}/upload",
            headers=admin_headers,
            data={"year": str(PAST_YEAR), "month": "6"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "File is required"
        mock_upload_service.execute.assert_not_called()

    def test_empty_file(self, client, admin_headers, mock_upload_service):
        response = upload(client, admin_headers, b"")

        assert response.status_code == 400
        assert response.json()["message"] == "File is required"
        mock_upload_service.execute.assert_not_called()

    def test_service_receives_uploader_and_period(self, client, admin_user, admin_headers, mock_upload_service):
        mock_upload_service.execute.return_value = UploadOutcome(
            success=True, message="Successfully processed 1 records", processed_records=1,
        )

        response = upload(client, admin_headers, b"R&D,1\n", month=3)

        assert response.status_code == 200
        kwargs = mock_upload_service.execute.call_args.kwargs
        assert kwargs["uploaded_by"] == admin_user.id
        assert (kwargs["year"], kwargs["month"]) == (PAST_YEAR, 3)
        assert kwargs["filename"] == "balances.csv"
        assert kwargs["file_size"] == 6

    def test_unexpected_error_is_500(self, client, admin_headers, mock_upload_service):
        mock_upload_service.execute.side_effect = RuntimeError("boom")

        response = upload(client, admin_headers, b"R&D,1\n")

        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error", "error": "boom"}

    def test_cancelled_upload_is_408(self, client, admin_headers, mock_upload_service):
        mock_upload_service.execute.side_effect = UploadCancelledError()

        response = upload(client, admin_headers, b"R&D,1\n")

        assert response.status_code == 408
        assert response.json()["error"] == "UploadCancelledError"


class TestUploadFormats:

    def test_lists_formats(self, client, user_headers):
        response = client.get(f"{BASE_URL}/upload/formats", headers=user_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["extensions"] == [".csv", ".tsv", ".txt", ".xls", ".xlsx"]
        assert data["maxFileSizeBytes"] == 10 * 1024 * 1024
        assert data["maxRecords"] == 10000
        assert data["columns"] == ["Account Name", "Amount"]

    def test_requires_authentication(self, client):
        assert client.get(f"{BASE_URL}/upload/formats").status_code == 401
