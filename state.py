# state.py
"""
Selection state for one client session.

This module is intentionally minimal.
Do NOT put business logic here: SelectionController and
ReconciliationEngine own the transitions, this only holds the data.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from models import EditableEnvVar, HostedApp, Subscription


class Stage(Enum):
    NO_SUBSCRIPTION = 'no_subscription'
    SUBSCRIPTIONS_LOADING = 'subscriptions_loading'
    SUBSCRIPTIONS = 'subscriptions'
    APPS_LOADING = 'apps_loading'
    APPS = 'apps'
    APP_SELECTED = 'app_selected'


@dataclass
class StageStatus:
    """Busy/error flags of one async stage.

    Every begin() hands out a new token; only the holder of the latest
    token may finish the stage, older responses are stale.
    """
    busy: bool = False
    error: Optional[str] = None
    token: int = 0

    def begin(self) -> int:
        self.token += 1
        self.busy = True
        self.error = None
        return self.token

    def is_current(self, token: int) -> bool:
        return token == self.token

    def finish(self, token: int, error: Optional[str] = None) -> bool:
        if not self.is_current(token):
            return False
        self.busy = False
        self.error = error
        return True

    def invalidate(self) -> None:
        self.token += 1
        self.busy = False


@dataclass
class SelectionState:
    subscriptions: List[Subscription] = field(default_factory=list)

    # last subscription the user picked, and the one `apps` belongs to
    subscription_id: Optional[str] = None
    apps_subscription_id: Optional[str] = None
    apps: List[HostedApp] = field(default_factory=list)
    filter_query: str = ''

    selected_app: Optional[HostedApp] = None

    # variable set, replaced wholesale on every load
    variables_app: Optional[HostedApp] = None
    variables: List[EditableEnvVar] = field(default_factory=list)

    subscriptions_status: StageStatus = field(default_factory=StageStatus)
    apps_status: StageStatus = field(default_factory=StageStatus)
    variables_status: StageStatus = field(default_factory=StageStatus)
    save_status: StageStatus = field(default_factory=StageStatus)

    @property
    def stage(self) -> Stage:
        if self.apps_status.busy:
            return Stage.APPS_LOADING
        if self.selected_app is not None:
            return Stage.APP_SELECTED
        if self.subscription_id is not None and self.apps_subscription_id == self.subscription_id:
            return Stage.APPS
        if self.subscriptions_status.busy:
            return Stage.SUBSCRIPTIONS_LOADING
        if self.subscriptions:
            return Stage.SUBSCRIPTIONS
        return Stage.NO_SUBSCRIPTION

    @property
    def has_variables(self) -> bool:
        return self.variables_app is not None and bool(self.variables)

    @property
    def any_busy(self) -> bool:
        return any(
            status.busy
            for status in (
                self.subscriptions_status,
                self.apps_status,
                self.variables_status,
                self.save_status,
            )
        )
