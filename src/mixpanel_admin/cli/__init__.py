"""CLI package for mixpanel_admin.

This module provides the `mpadmin` command-line interface. All commands
delegate to the MixpanelClient facade, adding only I/O formatting.
"""

from mixpanel_admin.cli.main import app

__all__ = ["app"]
