"""
Smoke tests — verify the package is healthy.

These tests ensure the basic scaffolding works:
- Package imports successfully
- CLI entrypoint responds
- Version is set
"""

from click.testing import CliRunner

from brewdeps import __version__
from brewdeps.main import cli


class TestPackage:
    """Verify the project scaffolding is healthy."""

    def test_version_is_set(self):
        """Version string should be defined and non-empty."""
        assert __version__
        assert isinstance(__version__, str)

    def test_cli_help(self):
        """CLI --help should exit cleanly with usage info."""
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "private Homebrew" in result.output

    def test_packages_group_registered(self):
        result = CliRunner().invoke(cli, ["packages", "--help"])
        assert result.exit_code == 0
        for command in ("list", "outdated", "info", "status", "add", "rm", "upgrade"):
            assert command in result.output

    def test_core_package_imports(self):
        """Core sub-packages should be importable."""
        import brewdeps.core
        import brewdeps.core.config
        import brewdeps.core.models
        import brewdeps.core.observability
        import brewdeps.core.services
        import brewdeps.core.use_cases
        assert brewdeps.core is not None

    def test_ui_packages_import(self):
        """UI sub-packages should be importable."""
        import brewdeps.ui
        import brewdeps.ui.cli
        assert brewdeps.ui is not None

    def test_module_docstrings_are_wrapped(self):
        """Module docstrings should wrap at 79 columns."""
        import importlib
        import pkgutil

        import brewdeps

        long_lines = []
        for info in pkgutil.walk_packages(brewdeps.__path__, "brewdeps."):
            doc = importlib.import_module(info.name).__doc__ or ""
            long_lines += [(info.name, line) for line in doc.splitlines() if len(line) > 79]
        assert long_lines == []
