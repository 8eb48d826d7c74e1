# azure_cli.py
"""
Azure Resource Manager gateway backed by the Azure CLI.

Responsibilities:
- Call ARM through `az rest` (credentials come from the logged-in CLI)
- Map ARM JSON onto the data model
- Turn every CLI failure into RemoteError
- Never block the event loop (the CLI runs in a worker thread)
"""

import asyncio
import json
import subprocess
from typing import Any, Callable, Iterable, List, Optional

from gateway import RemoteError, merge_expected, settings_payload
from models import EditableEnvVar, HostedApp, RemoteEnvVar, Subscription
from storage import read_expected_names

import logging
logger = logging.getLogger(__name__)

ARM_ENDPOINT = 'https://management.azure.com'
SUBSCRIPTIONS_API_VERSION = '2016-06-01'
WEB_API_VERSION = '2023-12-01'


class AzureCliGateway:
    """RemoteGateway talking to Azure App Service through `az rest`."""

    def __init__(
        self,
        *,
        az_command: str = 'az',
        timeout: float = 60,
        expected_names: Callable[[], Iterable[str]] = read_expected_names,
    ) -> None:
        self.az_command = az_command
        self.timeout = timeout
        self.expected_names = expected_names

    # ------------------------------------------------------------------
    # az rest
    # ------------------------------------------------------------------

    def _az_rest(self, method: str, url: str, body: Optional[dict] = None) -> Any:
        cmd = [self.az_command, 'rest', '--method', method, '--url', url, '--output', 'json']
        if body is not None:
            cmd += ['--headers', 'Content-Type=application/json', '--body', json.dumps(body)]

        logger.info(f"az rest {method.upper()} {url[:160]}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise RemoteError(f"az rest {method} timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise RemoteError(f"Azure CLI not found: {self.az_command}") from e

        if result.returncode != 0:
            stderr = (result.stderr or '').strip()
            logger.warning(f"az rest error: {stderr[:200]}")
            raise RemoteError(stderr[:500] or f"az rest exited with code {result.returncode}")

        if not result.stdout.strip():
            return None
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise RemoteError(f"Unexpected response from {url[:160]}") from e

    async def _call(self, method: str, url: str, body: Optional[dict] = None) -> Any:
        return await asyncio.to_thread(self._az_rest, method, url, body)

    @staticmethod
    def _site_url(app: HostedApp, suffix: str) -> str:
        if not app.subscription:
            raise RemoteError(f"Hosted app {app.name} has no subscription id")
        return (
            f"{ARM_ENDPOINT}/subscriptions/{app.subscription}"
            f"/resourceGroups/{app.resource_group}"
            f"/providers/Microsoft.Web/sites/{app.name}"
            f"/{suffix}?api-version={WEB_API_VERSION}"
        )

    # ------------------------------------------------------------------
    # RemoteGateway protocol
    # ------------------------------------------------------------------

    async def list_subscriptions(self) -> List[Subscription]:
        url = f"{ARM_ENDPOINT}/subscriptions?api-version={SUBSCRIPTIONS_API_VERSION}"
        body = await self._call('get', url)
        try:
            result = [Subscription.from_dict(item) for item in body['value']]
        except (KeyError, TypeError) as e:
            raise RemoteError(f"Malformed subscription list: {e}") from e
        logger.debug(f"call list_subscriptions: {result}")
        return result

    async def list_apps(self, subscription_id: str) -> List[HostedApp]:
        url = (
            f"{ARM_ENDPOINT}/subscriptions/{subscription_id}"
            f"/providers/Microsoft.Web/sites?api-version={WEB_API_VERSION}"
        )
        apps: List[HostedApp] = []
        while url:
            body = await self._call('get', url)
            try:
                apps.extend(
                    HostedApp.from_dict(item['properties'], subscription=subscription_id)
                    for item in body['value']
                )
            except (KeyError, TypeError) as e:
                raise RemoteError(f"Malformed site list: {e}") from e
            url = body.get('nextLink')

        logger.debug(f"call list_webapps: {apps}")
        return apps

    async def fetch_variables(self, app: HostedApp) -> List[RemoteEnvVar]:
        logger.info(
            f"call get_appservice_envs; subscription: {app.subscription}, "
            f"resource_group: {app.resource_group}, name: {app.name}"
        )
        body = await self._call('post', self._site_url(app, 'config/appsettings/list'))
        try:
            settings = body['properties'] or {}
        except (KeyError, TypeError) as e:
            raise RemoteError(f"Malformed app settings for {app.name}: {e}") from e
        return merge_expected(settings, self.expected_names())

    async def replace_variables(self, app: HostedApp, variables: List[EditableEnvVar]) -> None:
        properties = settings_payload(variables)
        logger.info(f"call replace_appservice_envs; name: {app.name}, {len(properties)} settings")
        await self._call(
            'put',
            self._site_url(app, 'config/appsettings'),
            {'properties': properties},
        )
