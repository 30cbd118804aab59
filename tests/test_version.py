from click.testing import CliRunner


def test_version_attribute() -> None:
    import ciphershell

    assert isinstance(ciphershell.__version__, str)
    assert ciphershell.__version__


def test_cli_reports_version() -> None:
    from ciphershell.cli import _package_version, cli

    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "CipherShell" in result.output
    assert _package_version() in result.output
