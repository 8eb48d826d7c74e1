# ui/selection_panel.py
"""
Subscription and app selection UI.

Responsibilities:
- Show subscriptions as cards, load apps on click
- Show the apps of the selected subscription, filtered by name
- Load the variables of the clicked app
"""

from typing import Callable

from nicegui import ui

from gateway import RemoteError
from models import HostedApp
from selection import SelectionController

import logging
logger = logging.getLogger(__name__)


def _card_classes(selected: bool) -> str:
    base = 'w-64 cursor-pointer'
    return f'{base} border-2 border-primary' if selected else base


def render_selection_panel(
    controller: SelectionController,
    on_variables_changed: Callable[[], None],
) -> Callable[[], None]:
    """
    Render the panel; returns a callback that redraws the subscription cards.
    """
    state = controller.state

    async def pick_subscription(subscription_id: str) -> None:
        try:
            await controller.select_subscription(subscription_id)
        except RemoteError as e:
            ui.notify(f'Loading apps failed: {e}', type='negative')
        subscriptions_section.refresh()
        apps_section.refresh()
        on_variables_changed()

    async def pick_app(app: HostedApp) -> None:
        try:
            await controller.select_app(app)
        except RemoteError as e:
            ui.notify(f'Loading variables of {app.name} failed: {e}', type='negative')
        apps_section.refresh()
        on_variables_changed()

    def search(query: str) -> None:
        controller.set_filter(query)
        apps_section.refresh()

    # -----------------------------
    # Subscriptions
    # -----------------------------
    @ui.refreshable
    def subscriptions_section():
        if not state.subscriptions:
            if state.subscriptions_status.error:
                ui.label('Could not list subscriptions, is the Azure CLI logged in?') \
                    .classes('text-sm text-red-400')
            elif state.subscriptions_status.token and not state.subscriptions_status.busy:
                ui.label('No subscriptions found').classes('text-sm text-gray-400')
            return

        with ui.row().classes('w-full gap-4 no-wrap overflow-x-auto'):
            for subscription in state.subscriptions:
                selected = subscription.subscription_id == state.subscription_id
                with ui.card().classes(_card_classes(selected)).on(
                    'click', lambda s=subscription: pick_subscription(s.subscription_id)
                ):
                    ui.label(subscription.display_name).classes('font-bold')
                    with ui.row().classes('items-center gap-2'):
                        ui.label('State').classes('text-sm text-gray-400')
                        ui.badge(
                            subscription.state,
                            color='positive' if subscription.state == 'Active' else 'grey',
                        ).props('rounded')

    # -----------------------------
    # Apps
    # -----------------------------
    @ui.refreshable
    def apps_section():
        apps = controller.visible_apps()
        if not apps:
            if state.apps_subscription_id == state.subscription_id and not state.apps_status.busy:
                ui.label('No app services match').classes('text-sm text-gray-400')
            return

        with ui.row().classes('w-full gap-4 no-wrap overflow-x-auto'):
            for app in apps:
                with ui.card().classes(_card_classes(app == state.selected_app)).on(
                    'click', lambda a=app: pick_app(a)
                ):
                    ui.label(app.name).classes('font-bold')
                    with ui.row().classes('items-center gap-2'):
                        ui.label('Resource Group').classes('text-sm text-gray-400')
                        ui.label(app.resource_group).classes('text-sm')

    with ui.column().classes('w-full'):
        with ui.row().classes('items-center gap-2'):
            ui.label('Select Subscription').classes('text-lg font-semibold')
            ui.spinner(size='sm').bind_visibility_from(state.subscriptions_status, 'busy')
        subscriptions_section()

        with ui.row().classes('w-full items-center gap-2 no-wrap') \
                .bind_visibility_from(state, 'subscription_id', backward=lambda v: v is not None):
            ui.label('Select AppService').classes('text-lg font-semibold')
            ui.spinner(size='sm').bind_visibility_from(state.apps_status, 'busy')
            ui.input(
                placeholder='Search with name',
                value=state.filter_query,
                on_change=lambda e: search(e.value),
            ).props('dense clearable').classes('flex-grow pl-3')
        apps_section()

    return subscriptions_section.refresh
