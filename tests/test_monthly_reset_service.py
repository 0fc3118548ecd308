"""Tests for the monthly reset and monthly statistics service."""

from unittest.mock import MagicMock, patch

import pytest

from app.errors import DataServiceError, UnauthorizedError
from app.services import monthly_reset
from app.services.monthly_reset import MonthlyResetService


@pytest.fixture()
def db():
    return MagicMock()


class TestAdminOperations:
    """set_monthly_base_equity / reset_monthly_performance."""

    def test_non_admin_cannot_set_base_equity(self, db):
        service = MonthlyResetService(db, is_admin=False)
        with patch.object(monthly_reset.data_service, "rpc") as rpc:
            with pytest.raises(UnauthorizedError) as exc_info:
                service.set_monthly_base_equity(9, 2025, 1_000_000)
        assert str(exc_info.value) == "Unauthorized"
        rpc.assert_not_called()
        db.execute.assert_not_called()
        assert service.loading is False
        assert service.error is None

    def test_non_admin_cannot_reset(self, db):
        service = MonthlyResetService(db, is_admin=False)
        with patch.object(monthly_reset.data_service, "rpc") as rpc:
            with pytest.raises(UnauthorizedError):
                service.reset_monthly_performance(10, 2025)
        rpc.assert_not_called()
        assert service.loading is False

    def test_set_base_equity_returns_remote_result(self, db):
        service = MonthlyResetService(db, is_admin=True, actor="boss@example.com")
        payload = {"month": 9, "year": 2025, "base_equity": 1000000}
        with patch.object(monthly_reset.data_service, "rpc", return_value=payload) as rpc:
            result = service.set_monthly_base_equity(9, 2025, 1_000_000)
        assert result == payload
        rpc.assert_called_once_with(
            db,
            "set_monthly_base_equity",
            {"p_month": 9, "p_year": 2025, "p_base_equity": 1_000_000},
            commit=True,
            actor="boss@example.com",
        )
        assert service.loading is False
        assert service.error is None

    def test_reset_passes_new_period(self, db):
        service = MonthlyResetService(db, is_admin=True)
        with patch.object(monthly_reset.data_service, "rpc", return_value={"clients_reset": 12}) as rpc:
            result = service.reset_monthly_performance(1, 2026)
        assert result == {"clients_reset": 12}
        rpc.assert_called_once_with(
            db,
            "reset_monthly_performance",
            {"p_new_month": 1, "p_new_year": 2026},
            commit=True,
            actor=None,
        )

    def test_remote_message_is_recorded(self, db):
        service = MonthlyResetService(db, is_admin=True)
        with patch.object(
            monthly_reset.data_service, "rpc", side_effect=DataServiceError("permission denied for table")
        ):
            with pytest.raises(DataServiceError, match="permission denied"):
                service.set_monthly_base_equity(9, 2025, 10)
        assert service.error == "permission denied for table"
        assert service.loading is False

    def test_fallback_message_when_remote_error_is_empty(self, db):
        service = MonthlyResetService(db, is_admin=True)
        with patch.object(monthly_reset.data_service, "rpc", side_effect=DataServiceError()):
            with pytest.raises(DataServiceError):
                service.reset_monthly_performance(10, 2025)
        assert service.error == "Failed to reset monthly performance"

    def test_base_equity_fallback_message(self, db):
        service = MonthlyResetService(db, is_admin=True)
        with patch.object(monthly_reset.data_service, "rpc", side_effect=DataServiceError("")):
            with pytest.raises(DataServiceError):
                service.set_monthly_base_equity(9, 2025, 10)
        assert service.error == "Failed to set base equity"

    def test_loading_is_true_while_in_flight(self, db):
        service = MonthlyResetService(db, is_admin=True)
        seen = []

        def _rpc(*args, **kwargs):
            seen.append(service.loading)
            return {}

        with patch.object(monthly_reset.data_service, "rpc", side_effect=_rpc):
            service.reset_monthly_performance(10, 2025)
        assert seen == [True]
        assert service.loading is False

    def test_loading_is_true_while_setting_base_equity(self, db):
        service = MonthlyResetService(db, is_admin=True)
        seen = []

        def _rpc(*args, **kwargs):
            seen.append(service.loading)
            return {}

        with patch.object(monthly_reset.data_service, "rpc", side_effect=_rpc):
            service.set_monthly_base_equity(9, 2025, 10)
        assert seen == [True]
        assert service.loading is False

    @pytest.mark.parametrize(
        ("operation", "args", "procedure"),
        [
            ("set_monthly_base_equity", (9, 2025, 1000), "set_monthly_base_equity"),
            ("reset_monthly_performance", (10, 2025), "reset_monthly_performance"),
        ],
    )
    def test_actor_is_set_on_the_session_before_the_procedure(self, db, operation, args, procedure):
        service = MonthlyResetService(db, is_admin=True, actor="boss@example.com")

        getattr(service, operation)(*args)

        statements = [call.args[0].text for call in db.execute.call_args_list]
        assert statements[0] == "SELECT set_config('app.actor', :actor, true)"
        assert db.execute.call_args_list[0].args[1] == {"actor": "boss@example.com"}
        assert statements[1].startswith(f"SELECT {procedure}(")
        db.commit.assert_called_once()

    def test_error_survives_a_later_success(self, db):
        service = MonthlyResetService(db, is_admin=True)
        with patch.object(monthly_reset.data_service, "rpc", side_effect=DataServiceError("boom")):
            with pytest.raises(DataServiceError):
                service.reset_monthly_performance(10, 2025)
        with patch.object(monthly_reset.data_service, "rpc", return_value={}):
            service.reset_monthly_performance(10, 2025)
        assert service.error == "boom"


class TestMonthlyStats:
    """get_monthly_stats / get_current_month_stats."""

    def test_returns_first_row(self, db):
        service = MonthlyResetService(db, is_admin=False)
        rows = [{"month_year": "3/2024", "total_clients": 4}, {"month_year": "ignored"}]
        with patch.object(monthly_reset.data_service, "rpc_rows", return_value=rows) as rpc_rows:
            stats = service.get_monthly_stats(3, 2024)
        assert stats == rows[0]
        rpc_rows.assert_called_once_with(db, "get_monthly_dashboard_stats", {"p_month": 3, "p_year": 2024})

    def test_missing_period_is_sent_as_null(self, db):
        service = MonthlyResetService(db, is_admin=False)
        with patch.object(monthly_reset.data_service, "rpc_rows", return_value=[]) as rpc_rows:
            stats = service.get_monthly_stats()
        assert stats is None
        rpc_rows.assert_called_once_with(db, "get_monthly_dashboard_stats", {"p_month": None, "p_year": None})

    def test_zero_month_is_sent_as_null(self, db):
        service = MonthlyResetService(db, is_admin=False)
        with patch.object(monthly_reset.data_service, "rpc_rows", return_value=[]) as rpc_rows:
            service.get_monthly_stats(0, 0)
        assert rpc_rows.call_args.args[2] == {"p_month": None, "p_year": None}

    def test_monthly_stats_do_not_require_admin(self, db):
        service = MonthlyResetService(db, is_admin=False)
        with patch.object(monthly_reset.data_service, "rpc_rows", return_value=[{"total_clients": 1}]):
            assert service.get_monthly_stats(5, 2025) == {"total_clients": 1}

    def test_loading_is_true_while_reading_monthly_stats(self, db):
        service = MonthlyResetService(db, is_admin=False)
        seen = []

        def _rpc_rows(*args, **kwargs):
            seen.append(service.loading)
            return []

        with patch.object(monthly_reset.data_service, "rpc_rows", side_effect=_rpc_rows):
            service.get_monthly_stats(5, 2025)
        assert seen == [True]
        assert service.loading is False

    def test_monthly_stats_fallback(self, db):
        service = MonthlyResetService(db, is_admin=False)
        with patch.object(monthly_reset.data_service, "rpc_rows", side_effect=DataServiceError()):
            with pytest.raises(DataServiceError):
                service.get_monthly_stats(5, 2025)
        assert service.error == "Failed to get monthly stats"
        assert service.loading is False

    def test_current_month_stats(self, db):
        service = MonthlyResetService(db, is_admin=False)
        row = {"total_clients": 9, "current_equity": 100.0}
        with patch.object(monthly_reset.data_service, "select_single", return_value=row) as select_single:
            assert service.get_current_month_stats() == row
        select_single.assert_called_once_with(db, "current_month_dashboard")

    def test_current_month_stats_leaves_loading_alone(self, db):
        service = MonthlyResetService(db, is_admin=False)
        seen = []

        def _select(*args, **kwargs):
            seen.append(service.loading)
            return {}

        with patch.object(monthly_reset.data_service, "select_single", side_effect=_select):
            service.get_current_month_stats()
        assert seen == [False]

    def test_current_month_stats_failure(self, db):
        service = MonthlyResetService(db, is_admin=False)
        with patch.object(monthly_reset.data_service, "select_single", side_effect=DataServiceError()):
            with pytest.raises(DataServiceError):
                service.get_current_month_stats()
        assert service.error == "Failed to get current month stats"
        assert service.loading is False
