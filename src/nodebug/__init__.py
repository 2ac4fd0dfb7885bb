"""
nodebug - Run PHP scripts without Xdebug

A CLI tool that detects a loaded Xdebug extension and restarts PHP once
without it, preserving arguments, color mode and exit code.
"""

__version__ = "0.1.0"

# Re-export the restart API for convenience
from nodebug.core.restart import CheckResult, ProcessContext, RestartState, XdebugHandler

__all__ = ["CheckResult", "ProcessContext", "RestartState", "XdebugHandler", "__version__"]
