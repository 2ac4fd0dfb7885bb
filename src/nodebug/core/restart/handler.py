"""
Xdebug handler: the restart flow end to end.

Usage:
    >>> handler = XdebugHandler(context)
    >>> result = handler.check()
    >>> if result.restarted:
    ...     sys.exit(result.exit_code)
    >>> # otherwise continue normally

If the extension is loaded and no flag is set, a temp ini is written with
the activation line commented out. When additional inis were scanned they
are merged into the temp ini and the scan-dir variable is emptied. The
original ini list and extension version are exported for the child, and
the ALLOW flag marks the child so it is restarted only once and can put the
scan-dir variable back.

Setting ALLOW to any other non-empty value (e.g. ``1``) disables the
restart.
"""

from __future__ import annotations

import logging

from nodebug.core.restart.bridge import restore_after_restart, set_for_restart
from nodebug.core.restart.decision import decide
from nodebug.core.restart.ini import (
    build_ini_content,
    get_working_set,
    remove_tmp_ini,
    write_tmp_ini,
)
from nodebug.core.restart.models import (
    CheckResult,
    PrepareResult,
    ProcessContext,
    RestartFlag,
    RestartState,
)
from nodebug.core.restart.relauncher import build_command, format_command, relaunch

logger = logging.getLogger(__name__)


class XdebugHandler:
    """
    Restarts the current command without the debugging extension.

    Example:
        >>> handler = XdebugHandler(context)
        >>> handler.check().state
        <RestartState.NORMAL: 'normal'>
    """

    def __init__(self, context: ProcessContext, windows: bool | None = None) -> None:
        """
        Initialize the handler.

        Args:
            context: Current process context
            windows: Force the shell family for escaping (detected if None)
        """
        self._context = context
        self._windows = windows

    @property
    def context(self) -> ProcessContext:
        return self._context

    def current_flag(self) -> RestartFlag:
        return RestartFlag.parse(self._context.environment.get(self._context.settings.allow_var))

    def check(self) -> CheckResult:
        """
        Decide and act.

        Returns:
            RESTARTING with the child's exit code when a child ran; NORMAL
            when no restart was needed or preparing it failed; RESTARTED
            when this is the child (environment already restored)
        """
        flag = self.current_flag()
        state = decide(flag, self._context)

        if state is RestartState.RESTARTING:
            prepared = self.prepare_restart()
            if not prepared.ok:
                logger.warning(f"Restart aborted, continuing with extension: {prepared.reason}")
                return CheckResult(state=RestartState.NORMAL, reason=prepared.reason)

            assert prepared.command is not None  # for mypy
            exit_code = relaunch(
                prepared.command,
                env=self._context.environment.snapshot(),
                tmp_ini=prepared.tmp_ini,
            )
            return CheckResult(state=RestartState.RESTARTING, exit_code=exit_code)

        if state is RestartState.RESTARTED:
            restore_after_restart(
                self._context.environment,
                self._context.settings,
                flag,
                self._context.detection.original_scan_dir,
            )

        return CheckResult(state=state)

    def prepare_restart(self) -> PrepareResult:
        """
        Write the temp ini and the restart environment.

        Returns a failure on the first step that fails; the caller then
        runs in place with the extension still loaded.
        """
        context = self._context
        settings = context.settings

        files, replace = get_working_set(context.ini_paths, settings.extension)
        try:
            content = build_ini_content(files, replace, settings.extension)
        except OSError as e:
            return PrepareResult.failure(f"cannot read ini file: {e}")

        written, tmp_ini = write_tmp_ini(content)
        if not written:
            return PrepareResult.failure("cannot write temp ini")

        command = format_command(
            build_command(context, tmp_ini),
            meta=settings.escape_meta,
            windows=self._windows,
        )

        if not set_for_restart(
            context.environment,
            settings,
            context.ini_paths,
            context.detection.extension_version,
            context.detection.original_scan_dir,
        ):
            remove_tmp_ini(tmp_ini)
            return PrepareResult.failure("cannot set restart environment")

        return PrepareResult.success(command, tmp_ini)

    def get_skipped_version(self) -> str:
        """Version of the extension the parent skipped, "" if not restarted."""
        return self._context.environment.get(self._context.settings.version_var) or ""


__all__ = ["XdebugHandler"]
