"""
EastGate Bootstrap — App Configuration
========================================
Builds the core (seed or state document + startup invariant checks)
when Django finishes loading.

Rules:
- Runs once via ready()
- Skips during management commands that don't serve requests
- Skips under pytest; tests build their own stores
- If a startup check fails → SystemBootstrapError prevents startup
"""

import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger("eastgate.bootstrap")

# Commands that should NOT build the core
SKIP_COMMANDS = {
    "migrate",
    "makemigrations",
    "showmigrations",
    "sqlmigrate",
    "flush",
    "shell",
    "dbshell",
    "inspectdb",
    "test",
    "collectstatic",
    "check",
}


def _is_management_command_skip():
    """Check if current command should skip the startup build."""
    if len(sys.argv) >= 2:
        return sys.argv[1] in SKIP_COMMANDS
    return False


def _is_pytest_context() -> bool:
    return (
        "PYTEST_CURRENT_TEST" in os.environ
        or "pytest" in sys.modules
    )


class BootstrapConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.bootstrap"
    label = "bootstrap"
    verbose_name = "EastGate Bootstrap"

    def ready(self):
        if _is_management_command_skip() or _is_pytest_context():
            logger.info(
                "Startup build skipped for management/test context."
            )
            return

        from adapters.django_api.wiring import build_dependencies
        build_dependencies()
