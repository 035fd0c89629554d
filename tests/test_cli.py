"""Tests for the event listing CLI."""

from unittest.mock import patch

import pytest

from keptn_events.cli import parse_args, run
from keptn_events.models import Error, KeptnContextExtendedCE
from keptn_events.services.event_handler import EventsResult


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "KEPTN_ENDPOINT",
        "KEPTN_API_TOKEN",
        "KEPTN_AUTH_HEADER",
        "KEPTN_SCHEME",
        "KEPTN_TIMEOUT",
        "KEPTN_INSECURE_SKIP_TLS_VERIFY",
    ):
        monkeypatch.delenv(name, raising=False)


class TestParseArgs:
    def test_filter_flags(self):
        args = parse_args([
            "--project", "sockshop",
            "--stage", "dev",
            "--type", "sh.keptn.event.deployment.finished",
            "--page-size", "20",
            "--pages", "3",
        ])

        f = args.event_filter
        assert f.project == "sockshop"
        assert f.stage == "dev"
        assert f.service == ""
        assert f.event_type == "sh.keptn.event.deployment.finished"
        assert f.page_size == "20"
        assert f.number_of_pages == 3

    def test_endpoint_and_token_override(self):
        args = parse_args(["--endpoint", "https://keptn.example.com/api", "--token", "secret"])

        assert args.config.base_url == "keptn.example.com/api/mongodb-datastore"
        assert args.config.scheme == "https"
        assert args.config.auth_token == "secret"
        assert args.config.auth_header == "x-token"

    def test_insecure(self):
        assert parse_args(["--insecure"]).config.verify_tls is False

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(SystemExit):
            parse_args(["--page-size", "0"])


class TestRun:
    def test_success(self):
        args = parse_args(["--project", "sockshop"])
        events = [KeptnContextExtendedCE(id="e1", type="sh.keptn.event.deployment.started")]

        with patch("keptn_events.cli.EventHandler") as handler_cls:
            handler_cls.return_value.get_events.return_value = EventsResult(events=events)
            assert run(args) == 0

        handler_cls.return_value.get_events.assert_called_once_with(args.event_filter)

    def test_json_output(self, capsys):
        args = parse_args(["--json"])
        events = [KeptnContextExtendedCE(id="e1")]

        with patch("keptn_events.cli.EventHandler") as handler_cls:
            handler_cls.return_value.get_events.return_value = EventsResult(events=events)
            assert run(args) == 0

        assert '"e1"' in capsys.readouterr().out

    def test_error_exit_code(self):
        args = parse_args([])

        with patch("keptn_events.cli.EventHandler") as handler_cls:
            handler_cls.return_value.get_events.return_value = EventsResult(
                error=Error(message="unauthorized", code=401)
            )
            assert run(args) == 1


class TestEnvironmentOverrides:
    def test_http_endpoint_flag_overrides_https_env(self, monkeypatch):
        monkeypatch.setenv("KEPTN_ENDPOINT", "https://keptn.prod/api")

        config = parse_args(["--endpoint", "http://localhost:8080"]).config

        assert config.scheme == "http"
        assert config.base_url == "localhost:8080"

    def test_endpoint_without_scheme_keeps_env_scheme(self, monkeypatch):
        monkeypatch.setenv("KEPTN_ENDPOINT", "https://keptn.prod/api")

        assert parse_args(["--endpoint", "keptn.staging/api"]).config.scheme == "https"

    def test_bad_timeout_exits_with_error(self, monkeypatch, capsys):
        monkeypatch.setenv("KEPTN_TIMEOUT", "soon")

        with pytest.raises(SystemExit) as exc_info:
            parse_args([])

        assert exc_info.value.code == 1
        assert "invalid environment configuration" in capsys.readouterr().err
