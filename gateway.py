# gateway.py
"""
Remote gateway contract.

The selection and reconciliation logic only ever talks to the cloud through
an object implementing RemoteGateway. Every operation is an independent
coroutine that raises RemoteError on any failure (auth, network, remote
validation). Callers never retry automatically.
"""

from typing import Iterable, List, Mapping, Optional, Protocol

from models import EditableEnvVar, HostedApp, RemoteEnvVar, Subscription

import logging
logger = logging.getLogger(__name__)


class RemoteError(Exception):
    """Any failure reported by a RemoteGateway."""


class RemoteGateway(Protocol):

    async def list_subscriptions(self) -> List[Subscription]:
        ...

    async def list_apps(self, subscription_id: str) -> List[HostedApp]:
        ...

    async def fetch_variables(self, app: HostedApp) -> List[RemoteEnvVar]:
        ...

    async def replace_variables(self, app: HostedApp, variables: List[EditableEnvVar]) -> None:
        ...


# -------------------------------------------------------------------
# Shared helpers for gateway implementations
# -------------------------------------------------------------------

def merge_expected(
    settings: Mapping[str, str],
    expected_names: Optional[Iterable[str]] = None,
) -> List[RemoteEnvVar]:
    """
    Combine the remote settings with the expected variable names.

    Expected names without a remote value come back as value=None.
    The result is sorted by name.
    """
    expected = set(expected_names or ())
    merged = {
        name: RemoteEnvVar(name=name, value=None, is_expected=True)
        for name in expected
    }
    for name, value in settings.items():
        merged[name] = RemoteEnvVar(name=name, value=value, is_expected=name in expected)

    return [merged[name] for name in sorted(merged)]


def settings_payload(variables: Iterable[EditableEnvVar]) -> dict:
    """
    Name -> value dictionary sent on replace.

    Unset (None) and empty values are left out, so they are removed remotely.
    """
    payload = {}
    for var in variables:
        if var.value:
            payload[var.name] = var.value
        else:
            logger.debug(f"Not sending empty variable {var.name}")
    return payload
