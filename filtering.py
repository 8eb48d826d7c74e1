# filtering.py
"""
Name filter over the currently loaded app list.
"""

from typing import List

from models import HostedApp


def filter_apps(query: str, apps: List[HostedApp]) -> List[HostedApp]:
    """
    Case-insensitive substring match on the app name only.

    An empty query returns every app in the original order.
    """
    if not query:
        return list(apps)
    needle = query.lower()
    return [app for app in apps if needle in app.name.lower()]
