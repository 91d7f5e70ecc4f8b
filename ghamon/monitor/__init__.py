"""Dashboard rendering — pure functions from ``DashboardState`` to Rich renderables.

Modules
-------
renderer
    ``render_dashboard`` builds the header, visible rows and footer;
    ``StatusPalette`` maps each ``StatusKind`` to a Rich style.
"""
