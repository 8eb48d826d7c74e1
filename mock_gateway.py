# mock_gateway.py
"""
In-memory RemoteGateway for offline use and tests.
"""

import asyncio
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from gateway import RemoteError, merge_expected, settings_payload
from models import EditableEnvVar, HostedApp, RemoteEnvVar, Subscription, SubscriptionPolicies

import logging
logger = logging.getLogger(__name__)

AppKey = Tuple[Optional[str], str, str]

MOCK_SUBSCRIPTIONS = [
    Subscription(
        subscription_id='00000000-0000-0000-0000-000000000001',
        display_name='Development',
        state='Active',
        id='/subscriptions/00000000-0000-0000-0000-000000000001',
        authorization_source='RoleBased',
        policies=SubscriptionPolicies('Public_2014-09-01', 'PayAsYouGo_2014-09-01', 'Off'),
    ),
    Subscription(
        subscription_id='00000000-0000-0000-0000-000000000002',
        display_name='Production',
        state='Active',
        id='/subscriptions/00000000-0000-0000-0000-000000000002',
        authorization_source='RoleBased',
        policies=SubscriptionPolicies('Public_2014-09-01', 'EnterpriseAgreement_2014-09-01', 'Off'),
    ),
]

MOCK_APPS: Dict[str, List[HostedApp]] = {
    '00000000-0000-0000-0000-000000000001': [
        HostedApp('frontend-dev', 'rg-web-dev', '00000000-0000-0000-0000-000000000001'),
        HostedApp('api-dev', 'rg-web-dev', '00000000-0000-0000-0000-000000000001'),
    ],
    '00000000-0000-0000-0000-000000000002': [
        HostedApp('frontend', 'rg-web', '00000000-0000-0000-0000-000000000002'),
        HostedApp('api', 'rg-web', '00000000-0000-0000-0000-000000000002'),
        HostedApp('worker', 'rg-jobs', '00000000-0000-0000-0000-000000000002'),
    ],
}

MOCK_SETTINGS: Dict[str, Dict[str, str]] = {
    'frontend-dev': {'API_URL': 'https://api-dev.example.com', 'NODE_ENV': 'development'},
    'api-dev': {'DATABASE_URL': 'postgres://dev', 'LOG_LEVEL': 'debug'},
    'frontend': {'API_URL': 'https://api.example.com', 'NODE_ENV': 'production'},
    'api': {'DATABASE_URL': 'postgres://prod', 'LOG_LEVEL': 'info'},
    'worker': {'QUEUE_NAME': 'jobs'},
}


def app_key(app: HostedApp) -> AppKey:
    return (app.subscription, app.resource_group, app.name)


class MockGateway:
    """RemoteGateway over in-memory data.

    `calls` records (operation, argument) tuples; operations named in
    `fail_on` raise RemoteError; `delay` adds an artificial latency.
    """

    def __init__(
        self,
        subscriptions: Optional[List[Subscription]] = None,
        apps: Optional[Dict[str, List[HostedApp]]] = None,
        settings: Optional[Dict[AppKey, Dict[str, str]]] = None,
        *,
        expected_names: Optional[Callable[[], Iterable[str]]] = None,
        delay: float = 0.0,
    ) -> None:
        if subscriptions is None:
            subscriptions = MOCK_SUBSCRIPTIONS
        if apps is None:
            apps = MOCK_APPS
        if settings is None:
            settings = {
                app_key(app): dict(MOCK_SETTINGS.get(app.name, {}))
                for app_list in apps.values()
                for app in app_list
            }

        self.subscriptions = list(subscriptions)
        self.apps = {sub: list(app_list) for sub, app_list in apps.items()}
        self.settings = {key: dict(values) for key, values in settings.items()}
        self.expected_names = expected_names or (lambda: ())
        self.delay = delay
        self.fail_on: set = set()
        self.calls: List[tuple] = []

    async def _enter(self, operation: str, argument=None) -> None:
        self.calls.append((operation, argument))
        if self.delay:
            await asyncio.sleep(self.delay)
        if operation in self.fail_on:
            raise RemoteError(f"{operation} failed (mock)")

    async def list_subscriptions(self) -> List[Subscription]:
        await self._enter('list_subscriptions')
        return list(self.subscriptions)

    async def list_apps(self, subscription_id: str) -> List[HostedApp]:
        await self._enter('list_apps', subscription_id)
        return list(self.apps.get(subscription_id, []))

    async def fetch_variables(self, app: HostedApp) -> List[RemoteEnvVar]:
        await self._enter('fetch_variables', app)
        return merge_expected(self.settings.get(app_key(app), {}), self.expected_names())

    async def replace_variables(self, app: HostedApp, variables: List[EditableEnvVar]) -> None:
        await self._enter('replace_variables', (app, list(variables)))
        self.settings[app_key(app)] = settings_payload(variables)
        logger.info(f"mock replace for {app.name}: {len(self.settings[app_key(app)])} settings")
