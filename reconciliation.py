# reconciliation.py
"""
Environment-variable reconciliation.

Responsibilities:
- Turn fetched variables into edit-tracked EditableEnvVar objects
- Apply local edits without touching previous_value
- Send the whole edited set on save, then reload from the remote side
"""

from dataclasses import replace
from typing import List, Optional

from gateway import RemoteError, RemoteGateway
from models import EditableEnvVar, HostedApp
from state import SelectionState

import logging
logger = logging.getLogger(__name__)


class ReloadError(RemoteError):
    """The replace was committed, the reload that followed it failed."""


class ReconciliationEngine:

    def __init__(self, gateway: RemoteGateway, state: Optional[SelectionState] = None) -> None:
        self.gateway = gateway
        self.state = state if state is not None else SelectionState()

    @property
    def variables(self) -> List[EditableEnvVar]:
        return self.state.variables

    # -------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------

    async def load(self, app: HostedApp) -> Optional[List[EditableEnvVar]]:
        """
        Fetch the variables of `app` and replace the current set.

        Returns None when a newer load superseded this one.
        """
        status = self.state.variables_status
        token = status.begin()
        try:
            remote = await self.gateway.fetch_variables(app)
        except RemoteError as e:
            if status.finish(token, error=str(e)):
                logger.warning(f"Fetching variables of {app.name} failed: {e}")
            raise

        if not status.finish(token):
            logger.debug(f"Discarding stale variables of {app.name}")
            return None

        logger.debug(f"envVars: {remote}")
        self.state.variables = [EditableEnvVar.from_remote(var) for var in remote]
        self.state.variables_app = app
        return self.state.variables

    def clear(self) -> None:
        self.state.variables_status.invalidate()
        self.state.variables = []
        self.state.variables_app = None

    # -------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------

    def find(self, name: str) -> Optional[EditableEnvVar]:
        for var in self.state.variables:
            if var.name == name:
                return var
        return None

    def edit(self, name: str, value: Optional[str]) -> bool:
        var = self.find(name)
        if var is None:
            logger.debug(f"Ignoring edit of unknown variable {name}")
            return False
        # clearing a variable that was never set leaves it unset
        if value == "" and var.previous_value is None:
            value = None
        var.value = value
        return True

    def needs_attention(self, name: str) -> bool:
        var = self.find(name)
        return var is not None and var.needs_attention

    def attention_variables(self) -> List[EditableEnvVar]:
        return [var for var in self.state.variables if var.needs_attention]

    def changed_variables(self) -> List[EditableEnvVar]:
        return [var for var in self.state.variables if var.changed]

    @property
    def has_changes(self) -> bool:
        return any(var.changed for var in self.state.variables)

    # -------------------------------------------------------------------
    # Saving
    # -------------------------------------------------------------------

    def payload(self) -> List[EditableEnvVar]:
        """
        The entire current edited set, in load order.
        """
        return [replace(var) for var in self.state.variables]

    async def save(self, app: HostedApp) -> Optional[List[EditableEnvVar]]:
        """
        Replace the remote variables of `app` with the edited set and reload.

        The reload only runs while `app` is still the selected app and no
        newer variables load started meanwhile. On a failed replace the
        edited set stays exactly as it was; a failed reload after a
        committed replace raises ReloadError.
        """
        status = self.state.save_status
        token = status.begin()
        loads_before = self.state.variables_status.token
        try:
            await self.gateway.replace_variables(app, self.payload())
        except RemoteError as e:
            status.finish(token, error=str(e))
            logger.warning(f"Saving variables of {app.name} failed: {e}")
            raise
        logger.info(f"Variables of {app.name} saved")

        if (
            self.state.variables_status.token != loads_before
            or self.state.selected_app not in (None, app)
            or self.state.variables_app not in (None, app)
        ):
            logger.info(f"Skipping reload of {app.name}, another app was selected")
            status.finish(token)
            return None

        try:
            result = await self.load(app)
        except RemoteError as e:
            status.finish(token)
            raise ReloadError(f"{app.name} saved, but reloading its variables failed: {e}") from e

        status.finish(token)
        return result
