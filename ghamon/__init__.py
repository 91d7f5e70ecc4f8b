"""ghamon: live terminal dashboard for GitHub Actions workflow runs.

Polls the latest run of every workflow across a list of repositories, one
repository at a time, and shows the results as a scrollable table.
"""

__version__ = "0.1.0"
__description__ = "Terminal dashboard for GitHub Actions workflow runs"

from ghamon.core.refresh_machine import RefreshMachine, handle
from ghamon.models.state import DashboardState

__all__ = ["DashboardState", "RefreshMachine", "handle", "__version__"]
