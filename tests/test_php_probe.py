"""Tests for the PHP probe, ini locator and process context assembly."""

import json
import os
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from nodebug.core.config import NodebugConfig
from nodebug.core.php import (
    IniLocator,
    PhpInfo,
    PhpNotFoundError,
    PhpProbe,
    build_process_context,
    detect_state,
    resolve_php_binary,
)
from nodebug.core.php.probe import parse_probe_output, parse_scanned_files
from nodebug.core.restart import Environment

RUN = "nodebug.core.php.probe.subprocess.run"

PROBE_OUTPUT = {
    "sapi": "cli",
    "binary": "/usr/bin/php8.3",
    "loaded": True,
    "version": "3.3.1",
    "ini": "/etc/php/8.3/cli/php.ini",
    "scanned": "/etc/php/8.3/cli/conf.d/10-opcache.ini,\n/etc/php/8.3/cli/conf.d/20-xdebug.ini\n",
}


def completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> MagicMock:
    return MagicMock(stdout=stdout, stderr=stderr, returncode=returncode)


class TestParseScannedFiles:
    def test_comma_newline_separated(self) -> None:
        assert parse_scanned_files("/a.ini,\n/b.ini\n") == ["/a.ini", "/b.ini"]

    def test_empty(self) -> None:
        assert parse_scanned_files("") == []

    def test_single(self) -> None:
        assert parse_scanned_files("/a.ini") == ["/a.ini"]


class TestParseProbeOutput:
    def test_full_output(self) -> None:
        info = parse_probe_output(json.dumps(PROBE_OUTPUT))

        assert info.available
        assert info.interactive
        assert info.binary == "/usr/bin/php8.3"
        assert info.extension_loaded
        assert info.extension_version == "3.3.1"
        assert info.ini_paths == [
            "/etc/php/8.3/cli/php.ini",
            "/etc/php/8.3/cli/conf.d/10-opcache.ini",
            "/etc/php/8.3/cli/conf.d/20-xdebug.ini",
        ]

    def test_no_ini_loaded(self) -> None:
        output = dict(PROBE_OUTPUT, ini="", scanned="", loaded=False, version="")
        info = parse_probe_output(json.dumps(output))

        assert info.ini_paths == [""]
        assert not info.extension_loaded

    def test_not_cli(self) -> None:
        info = parse_probe_output(json.dumps(dict(PROBE_OUTPUT, sapi="phpdbg")))
        assert not info.interactive

    def test_invalid_json(self) -> None:
        with pytest.raises(ValueError):
            parse_probe_output("Warning: something\n")

    def test_not_an_object(self) -> None:
        with pytest.raises(ValueError, match="not a JSON object"):
            parse_probe_output("[1, 2]")


class TestPhpProbe:
    def test_build_args(self) -> None:
        args = PhpProbe("/usr/bin/php", extension="pcov").build_args()

        assert args[:2] == ["/usr/bin/php", "-r"]
        assert '$ext = "pcov";' in args[2]

    def test_probe_success(self) -> None:
        with patch(RUN, return_value=completed(json.dumps(PROBE_OUTPUT))) as mock_run:
            info = PhpProbe("/usr/bin/php", timeout=5).probe()

        assert info.available
        assert info.extension_loaded
        call_kwargs = mock_run.call_args.kwargs
        assert call_kwargs["capture_output"] is True
        assert call_kwargs["timeout"] == 5

    def test_probe_non_zero_exit(self) -> None:
        with patch(RUN, return_value=completed("", returncode=255, stderr="Parse error")):
            info = PhpProbe("/usr/bin/php").probe()
        assert info == PhpInfo(available=False)

    def test_probe_bad_output(self) -> None:
        with patch(RUN, return_value=completed("not json")):
            assert not PhpProbe("/usr/bin/php").probe().available

    def test_probe_start_failure(self) -> None:
        with patch(RUN, side_effect=FileNotFoundError("php")):
            assert not PhpProbe("/missing/php").probe().available

    def test_probe_timeout(self) -> None:
        with patch(RUN, side_effect=subprocess.TimeoutExpired(cmd="php", timeout=1)):
            assert not PhpProbe("/usr/bin/php", timeout=1).probe().available

    def test_unavailable_info_is_not_interactive(self) -> None:
        info = PhpInfo(available=False)
        assert not info.interactive
        assert not info.extension_loaded


class TestResolvePhpBinary:
    def test_found(self) -> None:
        with patch("nodebug.core.php.probe.shutil.which", return_value="/usr/bin/php"):
            assert resolve_php_binary("php") == "/usr/bin/php"

    def test_not_found(self) -> None:
        with patch("nodebug.core.php.probe.shutil.which", return_value=None):
            with pytest.raises(PhpNotFoundError) as exc_info:
                resolve_php_binary("php9")
        assert exc_info.value.binary == "php9"
        assert "php9" in str(exc_info.value)


class TestIniLocator:
    def info(self, **kwargs) -> PhpInfo:
        defaults = {
            "available": True,
            "sapi": "cli",
            "loaded_ini": "/etc/php.ini",
            "scanned_inis": ["/etc/conf.d/a.ini"],
        }
        defaults.update(kwargs)
        return PhpInfo(**defaults)

    def test_from_probe(self) -> None:
        locator = IniLocator(self.info(), Environment({}), "NODEBUG_ORIGINAL_INIS")
        assert locator.get_all() == ["/etc/php.ini", "/etc/conf.d/a.ini"]

    def test_original_list_wins(self) -> None:
        environ = {"NODEBUG_ORIGINAL_INIS": os.pathsep.join(["", "/x/b.ini"])}
        locator = IniLocator(self.info(), Environment(environ), "NODEBUG_ORIGINAL_INIS")
        assert locator.get_all() == ["", "/x/b.ini"]

    def test_empty_original_list_ignored(self) -> None:
        environ = {"NODEBUG_ORIGINAL_INIS": ""}
        locator = IniLocator(self.info(), Environment(environ), "NODEBUG_ORIGINAL_INIS")
        assert locator.get_all() == ["/etc/php.ini", "/etc/conf.d/a.ini"]

    def test_message_lists_files(self) -> None:
        locator = IniLocator(self.info(), Environment({}), "NODEBUG_ORIGINAL_INIS")
        assert locator.get_message() == (
            "The following ini files were used by PHP:\n"
            "  - /etc/php.ini\n"
            "  - /etc/conf.d/a.ini"
        )

    def test_message_skips_missing_primary(self) -> None:
        info = self.info(loaded_ini="")
        locator = IniLocator(info, Environment({}), "NODEBUG_ORIGINAL_INIS")
        assert locator.get_message() == (
            "The following ini files were used by PHP:\n  - /etc/conf.d/a.ini"
        )

    def test_message_no_files(self) -> None:
        info = self.info(loaded_ini="", scanned_inis=[])
        locator = IniLocator(info, Environment({}), "NODEBUG_ORIGINAL_INIS")
        assert "does not exist" in locator.get_message()


class TestBuildProcessContext:
    def probe(self, **overrides) -> MagicMock:
        probe = MagicMock(spec=PhpProbe)
        fields = {
            "available": True,
            "sapi": "cli",
            "binary": "/usr/bin/php8.3",
            "extension_loaded": True,
            "extension_version": "3.3.1",
            "loaded_ini": "/etc/php.ini",
        }
        fields.update(overrides)
        probe.probe.return_value = PhpInfo(**fields)
        return probe

    def test_context_from_probe(self) -> None:
        environ = {"PHP_INI_SCAN_DIR": ""}
        context, info = build_process_context(
            NodebugConfig(),
            "/usr/bin/php",
            ["bin/tool", "install"],
            environment=Environment(environ),
            decorated=True,
            probe=self.probe(),
        )

        assert info.available
        assert context.interpreter == "/usr/bin/php8.3"
        assert context.interactive
        assert context.decorated
        assert context.argv == ["bin/tool", "install"]
        assert context.ini_paths == ["/etc/php.ini"]
        assert context.detection.extension_loaded
        assert context.detection.original_scan_dir == ""
        assert context.settings.allow_var == "NODEBUG_ALLOW_XDEBUG"

    def test_failed_probe_gives_no_interpreter(self) -> None:
        probe = MagicMock(spec=PhpProbe)
        probe.probe.return_value = PhpInfo(available=False)

        context, _ = build_process_context(
            NodebugConfig(), "/usr/bin/php", ["x"], environment=Environment({}), probe=probe
        )

        assert context.interpreter is None
        assert not context.interactive
        assert not context.detection.extension_loaded

    def test_custom_prefix(self) -> None:
        config = NodebugConfig(restart={"env_prefix": "COMPOSER"})
        context, _ = build_process_context(
            config, "php", ["x"], environment=Environment({}), probe=self.probe()
        )
        assert context.settings.allow_var == "COMPOSER_ALLOW_XDEBUG"
        assert context.settings.original_inis_var == "COMPOSER_ORIGINAL_INIS"


class TestDetectState:
    def test_absent_scan_dir(self) -> None:
        info = PhpInfo(available=True, extension_loaded=True, extension_version="")
        state = detect_state(info, Environment({}), "PHP_INI_SCAN_DIR")

        assert state.extension_loaded
        assert state.extension_version is None
        assert state.original_scan_dir is None

    def test_present_scan_dir(self) -> None:
        info = PhpInfo(available=True, extension_loaded=True, extension_version="3.3.1")
        state = detect_state(info, Environment({"PHP_INI_SCAN_DIR": "/a:/b"}), "PHP_INI_SCAN_DIR")

        assert state.extension_version == "3.3.1"
        assert state.original_scan_dir == "/a:/b"
