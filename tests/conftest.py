"""
Pytest configuration and shared fixtures.

Provides fixtures for isolated environments and config, ini file trees,
and a factory for ProcessContext objects backed by a plain dict
environment.
"""

import os
from pathlib import Path

import pytest

from nodebug.core.restart import DetectionState, Environment, ProcessContext, RestartSettings

PHP_BINARY = "/usr/bin/php"
XDEBUG_LINE = "zend_extension=xdebug.so"

# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """
    Provide a clean environment without NODEBUG_* or PHP_INI_SCAN_DIR.

    Ensures tests don't inherit configuration from the system.
    """
    for key in list(os.environ.keys()):
        if key.startswith("NODEBUG_") or key == "PHP_INI_SCAN_DIR":
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setenv("XDG_CONFIG_HOME", "/tmp/nodebug-test-config")

    return monkeypatch


@pytest.fixture
def isolated_config(clean_env, tmp_path, monkeypatch):
    """
    Provide a completely isolated config environment.

    Sets XDG_CONFIG_HOME and the working directory to temporary locations
    so no user or project config is loaded.
    """
    config_home = tmp_path / "config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))

    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)

    from nodebug.core.config import clear_cache

    clear_cache()
    yield config_home
    clear_cache()


@pytest.fixture
def tmp_ini_dir(tmp_path, monkeypatch):
    """Point tempfile at a private directory so temp inis can be counted."""
    import tempfile

    tmp_dir = tmp_path / "tmp"
    tmp_dir.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_dir))
    return tmp_dir


# ==============================================================================
# Ini Fixtures
# ==============================================================================


@pytest.fixture
def php_ini(tmp_path) -> Path:
    """A primary php.ini that loads xdebug."""
    path = tmp_path / "php.ini"
    path.write_text(f"memory_limit=-1\n{XDEBUG_LINE}\nxdebug.mode=debug\n")
    return path


@pytest.fixture
def scanned_inis(tmp_path) -> list[Path]:
    """Two additional ini files, one of them xdebug-specific."""
    conf_d = tmp_path / "conf.d"
    conf_d.mkdir()
    opcache = conf_d / "10-opcache.ini"
    opcache.write_text("zend_extension=opcache.so\n")
    xdebug = conf_d / "20-xdebug.ini"
    xdebug.write_text(f"{XDEBUG_LINE}\n")
    return [opcache, xdebug]


# ==============================================================================
# Context Fixtures
# ==============================================================================


@pytest.fixture
def settings() -> RestartSettings:
    return RestartSettings()


@pytest.fixture
def make_context(settings):
    """
    Factory for ProcessContext objects.

    The scan-dir value is captured from the given environment dict the way
    detection does it at startup.

    Usage:
        def test_something(make_context):
            context = make_context(env={"PHP_INI_SCAN_DIR": ""}, loaded=True)
    """

    def _make(
        env: dict[str, str] | None = None,
        loaded: bool = True,
        version: str | None = "3.3.1",
        ini_paths: list[str] | None = None,
        argv: list[str] | None = None,
        interpreter: str | None = PHP_BINARY,
        interactive: bool = True,
        decorated: bool = False,
        **settings_overrides,
    ) -> ProcessContext:
        environ = {} if env is None else env
        ctx_settings = settings
        if settings_overrides:
            ctx_settings = RestartSettings(**settings_overrides)
        return ProcessContext(
            detection=DetectionState(
                extension_loaded=loaded,
                extension_version=version,
                original_scan_dir=environ.get(ctx_settings.scan_dir_var),
            ),
            environment=Environment(environ),
            argv=["bin/tool"] if argv is None else argv,
            interpreter=interpreter,
            interactive=interactive,
            decorated=decorated,
            ini_paths=[] if ini_paths is None else ini_paths,
            settings=ctx_settings,
        )

    return _make
