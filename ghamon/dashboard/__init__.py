"""Textual runtime shell for the live dashboard."""

from ghamon.dashboard.app import DashboardApp, run_dashboard

__all__ = ["DashboardApp", "run_dashboard"]
