# selection.py
"""
Cascading subscription -> app -> variables selection.

Every transition awaits exactly one remote call and applies its result in
one step. Responses that arrive after a newer request for the same stage
are discarded, so the last selection always wins.
"""

from typing import List, Optional

from filtering import filter_apps
from gateway import RemoteError, RemoteGateway
from models import EditableEnvVar, HostedApp, Subscription
from reconciliation import ReconciliationEngine
from state import SelectionState

import logging
logger = logging.getLogger(__name__)


class SelectionController:

    def __init__(
        self,
        gateway: RemoteGateway,
        state: Optional[SelectionState] = None,
        engine: Optional[ReconciliationEngine] = None,
    ) -> None:
        self.gateway = gateway
        self.state = state if state is not None else SelectionState()
        self.engine = engine if engine is not None else ReconciliationEngine(gateway, self.state)

    # -------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------

    async def load_subscriptions(self) -> List[Subscription]:
        """
        List subscriptions. Failures are logged, never raised.
        """
        status = self.state.subscriptions_status
        token = status.begin()
        try:
            subscriptions = await self.gateway.list_subscriptions()
        except RemoteError as e:
            logger.error(f"Error fetching subscriptions: {e}")
            if status.finish(token, error=str(e)):
                self.state.subscriptions = []
            return []

        if not status.finish(token):
            logger.debug("Discarding stale subscription list")
            return self.state.subscriptions

        self.state.subscriptions = list(subscriptions)
        logger.info(f"{len(self.state.subscriptions)} subscriptions loaded")
        return self.state.subscriptions

    async def select_subscription(self, subscription_id: str) -> Optional[List[HostedApp]]:
        """
        Load the apps of a subscription.

        On success the selected app and its variables are dropped; on failure
        the previous subscription and its apps stay selected.
        Returns None if a newer selection superseded this one.
        """
        status = self.state.apps_status
        token = status.begin()
        self.state.subscription_id = subscription_id
        logger.info(f"Subscription {subscription_id} selected")

        try:
            apps = await self.gateway.list_apps(subscription_id)
        except RemoteError as e:
            if status.finish(token, error=str(e)):
                logger.warning(f"Listing apps of {subscription_id} failed: {e}")
                # the highlighted subscription stays the one whose apps are shown
                self.state.subscription_id = self.state.apps_subscription_id
            raise

        if not status.finish(token):
            logger.debug(f"Discarding stale app list of {subscription_id}")
            return None

        self.state.apps = list(apps)
        self.state.apps_subscription_id = subscription_id
        self.state.selected_app = None
        self.engine.clear()
        return self.state.apps

    # -------------------------------------------------------------------
    # Apps
    # -------------------------------------------------------------------

    async def select_app(self, app: HostedApp) -> Optional[List[EditableEnvVar]]:
        self.state.selected_app = app
        logger.info(f"App {app.name} ({app.resource_group}) selected")
        return await self.engine.load(app)

    def set_filter(self, query: Optional[str]) -> List[HostedApp]:
        self.state.filter_query = query or ''
        return self.visible_apps()

    def visible_apps(self) -> List[HostedApp]:
        return filter_apps(self.state.filter_query, self.state.apps)
