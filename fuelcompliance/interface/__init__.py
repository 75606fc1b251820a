"""Mini README: Interactive interfaces for the compliance dashboard.

Exports the FastAPI application factory that powers the browser dashboard.
The command line launcher lives in ``main_dashboard.py`` at the repository
root.
"""

from .web_app import create_application

__all__ = ["create_application"]
