"""Unit tests for the command-line interface."""

from __future__ import annotations

import argparse
import json
from unittest.mock import patch

import httpx
import pytest
from rest_harness import UserPass, cli
from rest_harness.bindings import GitlabClient

GITLAB_URL = "https://gitlab.example.com/api/v4"


@pytest.fixture
def wired(make_client):
    """Patch build_client so the CLI talks to the fake server."""

    def build(args):
        return make_client(cli.BINDINGS[args.binding], args.base_url)

    with patch("rest_harness.cli.build_client", side_effect=build):
        yield


class TestParseData:
    """Tests for --data parsing."""

    def test_none(self):
        """Test that no data means no body."""
        assert cli.parse_data(None) is None

    def test_object(self):
        """Test a JSON object."""
        assert cli.parse_data('{"a": 1}') == {"a": 1}

    @pytest.mark.parametrize("raw", ["{bad", "[1, 2]"])
    def test_invalid(self, raw):
        """Test that only JSON objects are accepted."""
        with pytest.raises(argparse.ArgumentTypeError):
            cli.parse_data(raw)


class TestArgumentTypes:
    """Tests for argument validation."""

    @pytest.mark.parametrize(
        "argv",
        [
            ["--retries", "-1", "GET", GITLAB_URL, "/user"],
            ["--retries", "many", "GET", GITLAB_URL, "/user"],
            ["--token", "", "GET", GITLAB_URL, "/user"],
            ["--token", "   ", "GET", GITLAB_URL, "/user"],
            ["GET", GITLAB_URL, "/user", "--paginate", "--max-pages", "0"],
        ],
    )
    def test_rejected_without_traceback(self, argv, capsys):
        """Test that bad values end in a usage error instead of a crash."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main(argv)

        assert exc_info.value.code == 2
        assert "error:" in capsys.readouterr().err

    def test_zero_retries_allowed(self):
        """Test that --retries 0 is accepted."""
        args = cli.create_parser().parse_args(["--retries", "0", "GET", GITLAB_URL, "/user"])
        assert args.retries == 0


class TestBuildClient:
    """Tests for build_client."""

    def test_binding_and_config(self):
        """Test that flags end up in the client configuration."""
        args = cli.create_parser().parse_args(
            ["--timeout", "7", "--insecure", "GET", GITLAB_URL, "/user"]
        )

        client = cli.build_client(args)
        try:
            assert isinstance(client, GitlabClient)
            assert client.config.timeout == 7.0
            assert client.config.verify_tls is False
        finally:
            client.close()


class TestMain:
    """Tests for main()."""

    def test_get_prints_json(self, wired, server, capsys):
        """Test a plain GET printed as JSON."""
        server.add("GET", f"{GITLAB_URL}/user", json_data={"id": 1, "username": "alice"})

        code = cli.main(["get", GITLAB_URL, "/user", "--json"])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"id": 1, "username": "alice"}
        assert server.requests[0].method == "GET"

    def test_token_flag(self, wired, server, capsys):
        """Test that --token logs in with an API key."""
        server.add("GET", f"{GITLAB_URL}/user", json_data={})

        assert cli.main(["--token", "glpat-abc", "GET", GITLAB_URL, "/user"]) == 0
        assert server.requests[0].headers["PRIVATE-TOKEN"] == "glpat-abc"

    def test_paginate(self, wired, server, capsys):
        """Test that --paginate prints the list of pages."""
        server.add(
            "GET",
            f"{GITLAB_URL}/projects",
            json_data=[1],
            headers={"Link": f'<{GITLAB_URL}/projects?page=2>; rel="next"'},
        )
        server.add("GET", f"{GITLAB_URL}/projects?page=2", json_data=[2])

        assert cli.main(["GET", GITLAB_URL, "/projects", "--paginate", "-j"]) == 0
        assert json.loads(capsys.readouterr().out) == [[1], [2]]

    def test_data_sent(self, wired, server, capsys):
        """Test that --data becomes a JSON body."""
        server.add("POST", f"{GITLAB_URL}/projects", json_data={"id": 9}, status=201)

        assert cli.main(["POST", GITLAB_URL, "/projects", "-d", '{"name": "demo"}']) == 0
        assert server.body_of(0) == {"name": "demo"}

    def test_login_flag(self, wired, server, capsys):
        """Test that --login prompts and performs a password login."""
        server.add("POST", "https://gitlab.example.com/oauth/token", json_data={"access_token": "t"})
        server.add("GET", f"{GITLAB_URL}/user", json_data={})

        with patch(
            "rest_harness.cli.prompt_credentials", return_value=UserPass("alice", "s3cret")
        ) as mock_prompt:
            assert cli.main(["--login", "GET", GITLAB_URL, "/user"]) == 0

        mock_prompt.assert_called_once()
        assert server.requests[1].headers["Authorization"] == "Bearer t"

    def test_http_error_exit_code(self, wired, server, capsys):
        """Test that an error status exits with 1 and a message."""
        server.add("GET", f"{GITLAB_URL}/missing", json_data={"message": "404 Not Found"}, status=404)

        assert cli.main(["GET", GITLAB_URL, "/missing"]) == 1
        assert "HTTP 404: 404 Not Found" in capsys.readouterr().err

    def test_transport_error_exit_code(self, wired, server, capsys):
        """Test that an unreachable server exits with 1."""
        server.fail("GET", f"{GITLAB_URL}/user", httpx.ConnectError, "Connection refused")

        assert cli.main(["GET", GITLAB_URL, "/user"]) == 1
        assert "Server unreachable" in capsys.readouterr().err

    def test_decode_error_exit_code(self, wired, server, capsys):
        """Test that a non-JSON body is shown to the user."""
        server.add("GET", f"{GITLAB_URL}/user", content=b"<html>proxy</html>")

        assert cli.main(["GET", GITLAB_URL, "/user"]) == 1
        assert "<html>proxy</html>" in capsys.readouterr().err

    def test_invalid_data_exit_code(self, wired, server, capsys):
        """Test that bad --data is reported without sending anything."""
        assert cli.main(["POST", GITLAB_URL, "/projects", "-d", "[1]"]) == 1
        assert server.requests == []

    def test_invalid_base_url(self, capsys):
        """Test that a malformed base URL exits with 1."""
        assert cli.main(["GET", "not-a-url", "/user"]) == 1
        assert "absolute URL" in capsys.readouterr().err

    def test_retries(self, wired, server, capsys):
        """Test that --retries retries a transient failure."""
        server.add("GET", f"{GITLAB_URL}/user", json_data={"message": "busy"}, status=503)
        server.add("GET", f"{GITLAB_URL}/user", json_data={"id": 1})

        with patch("rest_harness.utils.retry.time.sleep"):
            assert cli.main(["--retries", "2", "GET", GITLAB_URL, "/user"]) == 0

        assert len(server.requests) == 2

    def test_client_closed(self, wired, server, capsys):
        """Test that the client is closed after the command."""
        server.add("GET", f"{GITLAB_URL}/user", json_data={})

        with patch.object(GitlabClient, "close") as mock_close:
            cli.main(["GET", GITLAB_URL, "/user"])

        mock_close.assert_called_once()
