# models.py
"""
Data model for subscriptions, hosted apps and their environment variables.

Remote objects are immutable once fetched. EditableEnvVar is the only
mutable type: its value follows the user's edits, previous_value keeps the
value seen at load time.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


# -------------------------------------------------------------------
# Subscriptions
# -------------------------------------------------------------------

@dataclass(frozen=True)
class SubscriptionPolicies:
    location_placement_id: str = ''
    quota_id: str = ''
    spending_limit: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SubscriptionPolicies':
        return cls(
            location_placement_id=data.get('locationPlacementId', ''),
            quota_id=data.get('quotaId', ''),
            spending_limit=data.get('spendingLimit', ''),
        )


@dataclass(frozen=True)
class Subscription:
    subscription_id: str
    display_name: str
    state: str
    id: str = ''
    authorization_source: str = ''
    policies: SubscriptionPolicies = field(default_factory=SubscriptionPolicies)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Subscription':
        """
        Build from an ARM subscription object (camelCase keys).
        """
        return cls(
            subscription_id=data['subscriptionId'],
            display_name=data.get('displayName', data['subscriptionId']),
            state=data.get('state', ''),
            id=data.get('id', ''),
            authorization_source=data.get('authorizationSource', ''),
            policies=SubscriptionPolicies.from_dict(data.get('subscriptionPolicies') or {}),
        )


# -------------------------------------------------------------------
# Hosted apps
# -------------------------------------------------------------------

@dataclass(frozen=True)
class HostedApp:
    name: str
    resource_group: str
    subscription: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], subscription: Optional[str] = None) -> 'HostedApp':
        """
        Build from the `properties` of an ARM site object.
        """
        return cls(
            name=data['name'],
            resource_group=data['resourceGroup'],
            subscription=subscription if subscription is not None else data.get('subscription'),
        )


# -------------------------------------------------------------------
# Environment variables
# -------------------------------------------------------------------

@dataclass(frozen=True)
class RemoteEnvVar:
    name: str
    value: Optional[str]
    is_expected: bool = False


@dataclass
class EditableEnvVar:
    name: str
    value: Optional[str]
    is_expected: bool
    previous_value: Optional[str]

    @classmethod
    def from_remote(cls, var: RemoteEnvVar) -> 'EditableEnvVar':
        return cls(
            name=var.name,
            value=var.value,
            is_expected=var.is_expected,
            previous_value=var.value,
        )

    @property
    def changed(self) -> bool:
        return self.value != self.previous_value

    @property
    def needs_attention(self) -> bool:
        # expected but empty, judged on the live value
        return self.is_expected and not self.value
