"""
Tests for the wc-api command-line interface
"""

import json
from unittest.mock import patch

import pytest

from wc_api_client import ApiResponse, TransportError
from wc_api_client.cli import create_parser, main, parse_param_args
from wc_api_client.exceptions import WCClientError

RAW_RESPONSE = (
    b"HTTP/1.1 100 Continue\r\n\r\n"
    b"HTTP/1.1 200 OK\r\nX-WP-Total: 12\r\nX-WP-TotalPages: 2\r\n\r\n"
    b'[{"id": 1}]'
)


class TestParamArgs:
    """Test KEY=VALUE argument parsing"""

    def test_flat(self):
        assert parse_param_args(["page=2", "q=a=b"]) == {"page": "2", "q": "a=b"}

    def test_bracket_keys_nest(self):
        params = parse_param_args(["filter[period]=week", "filter[limit]=5", "a[b][c]=1"])
        assert params == {"filter": {"period": "week", "limit": "5"}, "a": {"b": {"c": "1"}}}

    def test_missing_equals(self):
        with pytest.raises(WCClientError):
            parse_param_args(["page"])

    def test_conflicting_keys(self):
        with pytest.raises(WCClientError):
            parse_param_args(["filter=x", "filter[period]=week"])


class TestParser:
    """Test argument parser setup"""

    def test_subcommands(self):
        args = create_parser().parse_args(["call", "orders", "--param", "page=2", "--raw"])
        assert args.command == "call"
        assert args.endpoint == "orders"
        assert args.param == ["page=2"]
        assert args.raw

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out


class TestSignCommand:
    """Test the signature debugging command"""

    def test_sign(self, capsys):
        exit_code = main([
            "sign", "orders",
            "--url", "http://shop.test",
            "--key", "ck_123",
            "--secret", "cs_abc",
            "--timestamp", "1700000000",
            "--nonce", "n0nce",
            "--param", "status=processing",
        ])
        out = capsys.readouterr().out

        assert exit_code == 0
        assert "Base string: GET&http%3A%2F%2Fshop.test%2Fwp-json%2Fwc%2Fv1%2Forders&" in out
        assert "oauth_nonce%3Dn0nce" in out
        assert "status%3Dprocessing" in out
        assert "URL: http://shop.test/wp-json/wc/v1/orders?status=processing&oauth_consumer_key=ck_123" in out

    def test_sign_is_deterministic_with_fixed_inputs(self, capsys):
        argv = ["sign", "orders", "--url", "http://shop.test", "--key", "ck", "--secret", "cs",
                "--timestamp", "1", "--nonce", "x"]
        main(argv)
        first = capsys.readouterr().out
        main(argv)
        assert capsys.readouterr().out == first

    def test_sign_invalid_url(self, capsys):
        exit_code = main(["sign", "orders", "--url", "not-a-url", "--key", "ck", "--secret", "cs"])
        assert exit_code == 1
        assert "Error" in capsys.readouterr().err


class TestParseCommand:
    """Test the raw response parsing command"""

    def test_parse_file(self, tmp_path, capsys):
        path = tmp_path / "response.txt"
        path.write_bytes(RAW_RESPONSE)

        assert main(["parse", str(path)]) == 0
        result = json.loads(capsys.readouterr().out)

        assert result["status_code"] == 200
        assert result["header_blocks"] == 2
        assert result["exhausted"] is False
        assert result["total"] == 12
        assert result["total_pages"] == 2
        assert result["body_length"] == len(b'[{"id": 1}]')

    def test_parse_missing_file(self, tmp_path, capsys):
        assert main(["parse", str(tmp_path / "absent.txt")]) == 1
        assert "Error" in capsys.readouterr().err


class TestCallCommand:
    """Test the API call command"""

    ENV = {
        "WC_STORE_URL": "https://shop.test",
        "WC_CONSUMER_KEY": "ck",
        "WC_CONSUMER_SECRET": "cs",
    }

    def test_call(self, capsys, monkeypatch):
        for name, value in self.ENV.items():
            monkeypatch.setenv(name, value)

        response = ApiResponse(status_code=200, headers={}, body='[{"id": 1}]', data=[{"id": 1}],
                               total=12, total_pages=2)
        with patch("wc_api_client.cli.WCApiClient.make_api_call", return_value=response) as call:
            exit_code = main(["call", "orders", "--param", "filter[period]=week"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "Status: 200" in out
        assert "Total: 12" in out
        assert "Total pages: 2" in out
        assert call.call_args[0] == ("orders", {"filter": {"period": "week"}}, "GET", None)

    def test_call_transport_failure(self, capsys, monkeypatch):
        for name, value in self.ENV.items():
            monkeypatch.setenv(name, value)

        error = TransportError("Connection error: refused", "CONNECTION_ERROR")
        response = ApiResponse(status_code=0, headers={}, body=None, data={"errors": []}, error=error)
        with patch("wc_api_client.cli.WCApiClient.make_api_call", return_value=response):
            exit_code = main(["call", "orders"])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert "Status: 0" in captured.out
        assert "Connection error: refused" in captured.err

    def test_call_missing_configuration(self, capsys, monkeypatch):
        for name in self.ENV:
            monkeypatch.delenv(name, raising=False)
        assert main(["call", "orders"]) == 1
        assert "Error" in capsys.readouterr().err
