"""Tests for health check endpoints."""

from __future__ import annotations

from unittest.mock import patch

from werkzeug.test import Client

from kit_operator.health import create_combined_wsgi_app, start_health_server


class TestCombinedApp:
    """Test cases for the combined health and metrics app."""

    def test_healthz(self):
        client = Client(create_combined_wsgi_app())

        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.get_data() == b'{"status":"ok"}'

    def test_readyz_without_check(self):
        client = Client(create_combined_wsgi_app())

        response = client.get("/readyz")

        assert response.status_code == 200
        assert b"ready" in response.get_data()

    def test_readyz_not_ready(self):
        """Test that readiness follows the supplied check."""
        client = Client(create_combined_wsgi_app(lambda: False))

        response = client.get("/readyz")

        assert response.status_code == 503
        assert b"not ready" in response.get_data()

    def test_metrics_delegated_to_prometheus(self):
        client = Client(create_combined_wsgi_app())

        response = client.get("/metrics")

        assert response.status_code == 200
        assert b"kit_operator_reconcile_total" in response.get_data()


class TestStartHealthServer:
    """Test cases for start_health_server."""

    @patch("kit_operator.health.make_server")
    def test_serves_in_background_thread(self, mock_make_server):
        server = start_health_server(9999, lambda: True)

        assert server is mock_make_server.return_value
        args, kwargs = mock_make_server.call_args
        assert args[1] == 9999
        assert kwargs["threaded"] is True
