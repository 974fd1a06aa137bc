"""
CLI tests against the scripted fake backend.

Commands run through typer's CliRunner with a prepared CLIContext, so every
request they make is checked by the fake backend.
"""
from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from netlify_blobs import store as store_module
from netlify_blobs.cli import app
from netlify_blobs.cli_context import CLIContext
from netlify_blobs.metadata import encode_metadata

from .fakes.fake_backend import API_URL, EDGE_TOKEN, EDGE_URL, SIGNED_URL, SITE_ID, TOKEN

EDGE_BLOB_URL = f"{EDGE_URL}/{SITE_ID}/site:production/my-key"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def edge_context(backend, settings):
    return CLIContext(settings=settings, site_id=SITE_ID, token=EDGE_TOKEN, edge_url=EDGE_URL, client=backend.client())


class TestGetCommand:
    """Test the get command."""

    def test_prints_text(self, runner, backend, edge_context):
        backend.expect("GET", EDGE_BLOB_URL, content=b"hello world")

        result = runner.invoke(app, ["get", "production", "my-key"], obj=edge_context)

        assert result.exit_code == 0
        assert "hello world" in result.output
        assert backend.fulfilled

    def test_pretty_prints_json(self, runner, backend, edge_context):
        backend.expect("GET", EDGE_BLOB_URL, content=b'{"a":1}')

        result = runner.invoke(app, ["get", "production", "my-key", "--json"], obj=edge_context)

        assert result.exit_code == 0
        assert json.loads(result.output) == {"a": 1}

    def test_writes_output_file(self, runner, backend, edge_context, tmp_path):
        backend.expect("GET", EDGE_BLOB_URL, content=b"\x00\x01binary")
        target = tmp_path / "blob.bin"

        result = runner.invoke(app, ["get", "production", "my-key", "--output", str(target)], obj=edge_context)

        assert result.exit_code == 0
        assert target.read_bytes() == b"\x00\x01binary"
        assert "Wrote 8 bytes" in result.output

    def test_missing_entry_exit_code(self, runner, backend, edge_context):
        backend.expect("GET", EDGE_BLOB_URL, status=404)

        result = runner.invoke(app, ["get", "production", "my-key"], obj=edge_context)

        assert result.exit_code == 1
        assert "No entry for key 'my-key' in store 'production'" in result.output

    def test_backend_error_exit_code(self, runner, backend, settings):
        context = CLIContext(settings=settings, site_id=SITE_ID, token=TOKEN, client=backend.client())
        backend.expect(
            "GET",
            f"{API_URL}/api/v1/blobs/{SITE_ID}/site:production/my-key",
            status=401,
            response_headers={"x-nf-request-id": "req-1"},
        )

        result = runner.invoke(app, ["get", "production", "my-key"], obj=context)

        assert result.exit_code == 3
        assert "401 status code, ID: req-1" in result.output

    def test_deploy_store(self, runner, backend, settings):
        context = CLIContext(settings=settings, site_id=SITE_ID, token=TOKEN, client=backend.client())
        backend.expect_signed_url(
            "GET",
            f"{API_URL}/api/v1/blobs/{SITE_ID}/deploy:abc123:production/my-key?region=auto",
            SIGNED_URL,
            token=TOKEN,
        )
        backend.expect("GET", SIGNED_URL, content=b"from deploy")

        result = runner.invoke(app, ["get", "production", "my-key", "--deploy-id", "abc123"], obj=context)

        assert result.exit_code == 0
        assert "from deploy" in result.output
        assert backend.fulfilled

    def test_invalid_key_exit_code(self, runner, backend, edge_context):
        result = runner.invoke(app, ["get", "production", "/my-key"], obj=edge_context)

        assert result.exit_code == 2
        assert backend.requests == []


class TestMetadataCommand:
    """Test the metadata command."""

    def test_prints_etag_and_metadata(self, runner, backend, edge_context):
        backend.expect(
            "HEAD",
            EDGE_BLOB_URL,
            response_headers={"etag": '"v1"', "x-amz-meta-user": encode_metadata({"name": "Netlify"})},
        )

        result = runner.invoke(app, ["metadata", "production", "my-key"], obj=edge_context)

        assert result.exit_code == 0
        assert json.loads(result.output) == {"etag": '"v1"', "metadata": {"name": "Netlify"}}

    def test_missing_entry(self, runner, backend, edge_context):
        backend.expect("HEAD", EDGE_BLOB_URL, status=404)

        result = runner.invoke(app, ["metadata", "production", "my-key"], obj=edge_context)

        assert result.exit_code == 1


class TestSetCommand:
    """Test the set command."""

    def test_set_value(self, runner, backend, edge_context):
        backend.expect("PUT", EDGE_BLOB_URL, body=b"hello", response_headers={"etag": '"v1"'})

        result = runner.invoke(app, ["set", "production", "my-key", "hello"], obj=edge_context)

        assert result.exit_code == 0
        assert "Stored 'my-key' in 'production'" in result.output
        assert 'ETag: "v1"' in result.output
        assert backend.fulfilled

    def test_set_from_file_with_metadata(self, runner, backend, edge_context, tmp_path):
        source = tmp_path / "value.bin"
        source.write_bytes(b"\x00file")
        backend.expect(
            "PUT",
            EDGE_BLOB_URL,
            body=b"\x00file",
            headers={"x-amz-meta-user": encode_metadata({"source": "file"})},
        )

        result = runner.invoke(
            app,
            ["set", "production", "my-key", "--input", str(source), "--metadata", '{"source": "file"}'],
            obj=edge_context,
        )

        assert result.exit_code == 0
        assert backend.fulfilled

    def test_only_if_new_not_met(self, runner, backend, edge_context):
        backend.expect("PUT", EDGE_BLOB_URL, headers={"if-none-match": "*"}, status=412)

        result = runner.invoke(app, ["set", "production", "my-key", "hello", "--only-if-new"], obj=edge_context)

        assert result.exit_code == 0
        assert "condition on 'my-key' was not met" in result.output

    def test_only_if_match(self, runner, backend, edge_context):
        backend.expect("PUT", EDGE_BLOB_URL, headers={"if-match": '"v1"'})

        result = runner.invoke(
            app, ["set", "production", "my-key", "hello", "--only-if-match", '"v1"'], obj=edge_context
        )

        assert result.exit_code == 0
        assert backend.fulfilled

    def test_requires_exactly_one_source(self, runner, backend, edge_context):
        result = runner.invoke(app, ["set", "production", "my-key"], obj=edge_context)

        assert result.exit_code == 2
        assert "Provide exactly one of VALUE or --input" in result.output
        assert backend.requests == []

    def test_invalid_metadata(self, runner, backend, edge_context):
        result = runner.invoke(
            app, ["set", "production", "my-key", "hello", "--metadata", "[1, 2]"], obj=edge_context
        )

        assert result.exit_code == 2
        assert backend.requests == []


class TestDeleteCommand:
    """Test the delete command."""

    def test_delete(self, runner, backend, edge_context):
        backend.expect("DELETE", EDGE_BLOB_URL, status=204)

        result = runner.invoke(app, ["delete", "production", "my-key"], obj=edge_context)

        assert result.exit_code == 0
        assert "Deleted 'my-key' from 'production'" in result.output
        assert backend.fulfilled


class TestCredentials:
    """Test credential sources of the CLI."""

    def test_missing_credentials_exit_code(self, runner):
        result = runner.invoke(app, ["get", "production", "my-key"])

        assert result.exit_code == 4
        assert "siteID, token" in result.output

    def test_credentials_from_options(self, runner, backend, monkeypatch):
        monkeypatch.setattr(store_module, "default_client_factory", lambda settings: backend.client())
        backend.expect("DELETE", EDGE_BLOB_URL, headers={"authorization": f"Bearer {EDGE_TOKEN}"}, status=204)

        result = runner.invoke(
            app,
            ["--site-id", SITE_ID, "--token", EDGE_TOKEN, "--edge-url", EDGE_URL, "delete", "production", "my-key"],
        )

        assert result.exit_code == 0
        assert backend.fulfilled

    def test_credentials_from_environment_variables(self, runner, backend, monkeypatch):
        monkeypatch.setattr(store_module, "default_client_factory", lambda settings: backend.client())
        backend.expect(
            "DELETE",
            f"{API_URL}/api/v1/blobs/{SITE_ID}/site:production/my-key",
            headers={"authorization": f"Bearer {TOKEN}"},
            status=204,
        )

        result = runner.invoke(
            app,
            ["delete", "production", "my-key"],
            env={"NETLIFY_SITE_ID": SITE_ID, "NETLIFY_AUTH_TOKEN": TOKEN},
        )

        assert result.exit_code == 0
        assert backend.fulfilled
