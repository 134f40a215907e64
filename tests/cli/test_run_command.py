"""
Tests for the run, install and cache commands.
"""

import io
import os
from unittest.mock import patch

import pytest
import responses

from setup_doctl.actions.workflow import ActionsContext
from setup_doctl.cli.commands import cache as cache_command
from setup_doctl.cli.commands import install as install_command
from setup_doctl.cli.commands import run as run_command
from setup_doctl.cli.parser import CLI
from setup_doctl.core.exceptions import AuthenticationError
from tests.mocks import make_tar_gz, make_zip

API_URL = "https://api.github.com/repos/digitalocean/doctl/releases"
DOWNLOAD_URL = "https://github.com/digitalocean/doctl/releases/download"


def tarball_url(version):
    return f"{DOWNLOAD_URL}/v{version}/doctl-{version}-linux-amd64.tar.gz"


@pytest.fixture
def parse(tmp_path):
    """Parse a command line pinned to linux-x64 and a temporary cache."""

    def _parse(*argv):
        return CLI().parser.parse_args(
            [
                *argv,
                "--cache-dir",
                str(tmp_path / "toolcache"),
                "--platform",
                "linux",
                "--arch",
                "x64",
            ]
        )

    return _parse


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """An Actions context with output and path files."""
    monkeypatch.setenv("PATH", "/usr/bin")
    environ = {
        "GITHUB_PATH": str(tmp_path / "github_path"),
        "GITHUB_OUTPUT": str(tmp_path / "github_output"),
        "INPUT_TOKEN": "dop_v1_secret",
    }

    def _runner(**inputs):
        env = dict(environ)
        env.update({f"INPUT_{k.upper()}": v for k, v in inputs.items()})
        return ActionsContext(environ=env, stream=io.StringIO())

    return _runner


class TestRunCommand:
    """Test the action entry point end to end with mocked HTTP."""

    @responses.activate
    def test_installs_latest_and_authenticates(self, parse, runner, tmp_path):
        responses.add(responses.GET, f"{API_URL}/latest", json={"name": "1.101.0"})
        responses.add(
            responses.GET, tarball_url("1.101.0"), body=make_tar_gz({"doctl": b"bin"})
        )
        ctx = runner()

        with patch("setup_doctl.cli.commands.run.authenticate") as auth:
            exit_code = run_command.run(parse("run"), ctx)

        expected = tmp_path / "toolcache" / "doctl" / "1.101.0" / "linux-x64"
        assert exit_code == 0
        assert ctx.outputs == {"path": str(expected), "version": "1.101.0"}
        assert (expected / "doctl").read_bytes() == b"bin"
        assert (tmp_path / "github_path").read_text() == f"{expected}\n"
        assert os.environ["PATH"].startswith(str(expected))
        assert "::add-mask::dop_v1_secret" in ctx.stream.getvalue()
        auth.assert_called_once_with(expected, "dop_v1_secret", timeout=60)

    @responses.activate
    def test_falls_back_to_recent_release(self, parse, runner):
        responses.add(responses.GET, tarball_url("1.98.0"), status=404)
        responses.add(responses.GET, tarball_url("1.98.0"), status=404)
        responses.add(
            responses.GET,
            API_URL,
            json=[{"name": "1.101.0"}, {"name": "1.100.0"}, {"name": "1.99.0"}],
        )
        responses.add(responses.GET, tarball_url("1.101.0"), status=404)
        responses.add(
            responses.GET, tarball_url("1.100.0"), body=make_tar_gz({"doctl": b"bin"})
        )
        ctx = runner(version="v1.98.0", no_auth="true")

        exit_code = run_command.run(parse("run"), ctx)

        assert exit_code == 0
        assert ctx.outputs["version"] == "1.100.0"
        downloads = [c.request.url for c in responses.calls if "/download/" in c.request.url]
        assert downloads == [
            tarball_url("1.98.0"),
            tarball_url("1.98.0"),
            tarball_url("1.101.0"),
            tarball_url("1.100.0"),
        ]

    @responses.activate
    def test_second_run_uses_cache(self, parse, runner):
        responses.add(
            responses.GET, tarball_url("1.98.1"), body=make_tar_gz({"doctl": b"bin"})
        )

        assert run_command.run(parse("run"), runner(version="1.98.1", no_auth="true")) == 0
        assert run_command.run(parse("run"), runner(version="1.98.1", no_auth="true")) == 0

        assert len(responses.calls) == 1

    def test_no_auth_skips_token(self, parse, runner, tmp_path):
        cached = tmp_path / "cached"
        cached.mkdir()
        ctx = runner(version="1.98.1", no_auth="true")
        ctx.environ.pop("INPUT_TOKEN")

        with patch("setup_doctl.cli.commands.run.build_resolver") as build, patch(
            "setup_doctl.cli.commands.run.authenticate"
        ) as auth:
            build.return_value.resolve.return_value.path = cached
            build.return_value.resolve.return_value.version = "1.98.1"
            exit_code = run_command.run(parse("run"), ctx)

        assert exit_code == 0
        auth.assert_not_called()
        assert ctx.failed is False

    def test_missing_token_fails_job(self, parse, runner, tmp_path):
        ctx = runner(version="1.98.1")
        ctx.environ.pop("INPUT_TOKEN")

        with patch("setup_doctl.cli.commands.run.build_resolver") as build:
            build.return_value.resolve.return_value.path = tmp_path
            build.return_value.resolve.return_value.version = "1.98.1"
            exit_code = run_command.run(parse("run"), ctx)

        assert exit_code == 1
        assert ctx.failed is True
        assert "::error::Input required and not supplied: token" in ctx.stream.getvalue()

    @responses.activate
    def test_exhaustion_fails_job(self, parse, runner):
        responses.add(responses.GET, tarball_url("1.0.0"), status=404)
        responses.add(responses.GET, tarball_url("1.0.0"), status=404)
        responses.add(responses.GET, API_URL, status=403)
        responses.add(responses.GET, tarball_url("1.98.1"), status=404)
        ctx = runner(version="1.0.0")

        exit_code = run_command.run(parse("run"), ctx)

        assert exit_code == 1
        assert ctx.failed is True
        assert (
            "::error::Failed to download doctl. Tried versions: 1.0.0, 1.0.0, 1.98.1"
            in ctx.stream.getvalue()
        )
        assert "path" not in ctx.outputs

    def test_auth_failure_fails_job(self, parse, runner, tmp_path):
        ctx = runner(version="1.98.1")

        with patch("setup_doctl.cli.commands.run.build_resolver") as build, patch(
            "setup_doctl.cli.commands.run.authenticate",
            side_effect=AuthenticationError("doctl auth init failed with exit code 1"),
        ):
            build.return_value.resolve.return_value.path = tmp_path
            build.return_value.resolve.return_value.version = "1.98.1"
            exit_code = run_command.run(parse("run"), ctx)

        assert exit_code == 1
        assert ctx.outputs["version"] == "1.98.1"
        assert "::error::doctl auth init failed" in ctx.stream.getvalue()

    def test_invalid_input_fails_job(self, parse, runner):
        ctx = runner(no_auth="sometimes")

        assert run_command.run(parse("run"), ctx) == 1
        assert "Invalid boolean value" in ctx.stream.getvalue()

    def test_bare_v_version_fails_job(self, parse, runner):
        """Test a version that normalizes to nothing is reported, not raised."""
        ctx = runner(version="v", no_auth="true")

        exit_code = run_command.run(parse("run"), ctx)

        assert exit_code == 1
        assert ctx.failed is True
        assert "::error::Invalid doctl version: 'v'" in ctx.stream.getvalue()

    def test_output_write_error_fails_job(self, parse, runner, tmp_path):
        """Test OS errors from the runner files are reported through the job."""
        ctx = runner(version="1.98.1", no_auth="true")
        ctx.environ["GITHUB_OUTPUT"] = str(tmp_path)

        with patch("setup_doctl.cli.commands.run.build_resolver") as build:
            build.return_value.resolve.return_value.path = tmp_path
            build.return_value.resolve.return_value.version = "1.98.1"
            exit_code = run_command.run(parse("run"), ctx)

        assert exit_code == 1
        assert ctx.failed is True
        assert "::error::" in ctx.stream.getvalue()

    @responses.activate
    def test_platform_override_does_not_reuse_other_platform(self, parse, runner, tmp_path):
        responses.add(
            responses.GET, tarball_url("1.98.1"), body=make_tar_gz({"doctl": b"linux"})
        )
        windows_url = f"{DOWNLOAD_URL}/v1.98.1/doctl-1.98.1-windows-amd64.zip"
        responses.add(responses.GET, windows_url, body=make_zip({"doctl.exe": b"MZ"}))

        assert run_command.run(parse("run"), runner(version="1.98.1", no_auth="true")) == 0

        windows_args = CLI().parser.parse_args(
            [
                "run",
                "--cache-dir",
                str(tmp_path / "toolcache"),
                "--platform",
                "win32",
                "--arch",
                "x64",
            ]
        )
        ctx = runner(version="1.98.1", no_auth="true")

        assert run_command.run(windows_args, ctx) == 0

        expected = tmp_path / "toolcache" / "doctl" / "1.98.1" / "win32-x64"
        assert ctx.outputs["path"] == str(expected)
        assert (expected / "doctl.exe").read_bytes() == b"MZ"
        assert [c.request.url for c in responses.calls] == [tarball_url("1.98.1"), windows_url]


class TestInstallCommand:
    """Test the standalone install command."""

    @responses.activate
    def test_prints_install_path(self, parse, tmp_path, capsys):
        responses.add(
            responses.GET, tarball_url("1.98.1"), body=make_tar_gz({"doctl": b"bin"})
        )

        exit_code = install_command.run(parse("install", "v1.98.1"))

        expected = tmp_path / "toolcache" / "doctl" / "1.98.1" / "linux-x64"
        assert exit_code == 0
        assert capsys.readouterr().out.strip() == str(expected)

    @responses.activate
    def test_failure_reports_error(self, parse, capsys):
        responses.add(responses.GET, tarball_url("1.0.0"), status=404)
        responses.add(responses.GET, tarball_url("1.0.0"), status=404)
        responses.add(responses.GET, API_URL, json=[{"name": "1.0.0"}])
        responses.add(responses.GET, tarball_url("1.0.0"), status=404)

        exit_code = install_command.run(parse("install", "1.0.0"))

        assert exit_code == 1
        assert "ERROR: Failed to download doctl" in capsys.readouterr().err


class TestCacheCommand:
    """Test cache listing."""

    def test_empty(self, tmp_path, capsys):
        args = CLI().parser.parse_args(
            [
                "cache",
                "list",
                "--cache-dir",
                str(tmp_path),
                "--platform",
                "linux",
                "--arch",
                "x64",
            ]
        )

        assert cache_command.run(args) == 0
        assert "No cached doctl versions" in capsys.readouterr().out

    @responses.activate
    def test_lists_installed(self, parse, tmp_path, capsys):
        responses.add(
            responses.GET, tarball_url("1.98.1"), body=make_tar_gz({"doctl": b"bin"})
        )
        install_command.run(parse("install", "1.98.1"))
        capsys.readouterr()

        args = CLI().parser.parse_args(
            [
                "cache",
                "list",
                "--cache-dir",
                str(tmp_path / "toolcache"),
                "--platform",
                "linux",
                "--arch",
                "x64",
            ]
        )

        assert cache_command.run(args) == 0
        assert capsys.readouterr().out.startswith("1.98.1\t")
