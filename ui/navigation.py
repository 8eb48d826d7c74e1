# ui/navigation.py
"""
Pages, header and per-client wiring.

Every page visit builds its own SelectionState, controller and engine;
only the gateway is shared between clients.
"""

from nicegui import ui

from azure_cli import AzureCliGateway
from envfile import EXPORT_FILENAME, serialize_env
from mock_gateway import MockGateway
from selection import SelectionController
from state import SelectionState
from storage import get_options, import_default_settings, read_expected_names
from ui.env_editor import render_env_editor
from ui.selection_panel import render_selection_panel

import logging
logger = logging.getLogger(__name__)


# -------------------
# Gateway
# -------------------
def build_gateway(options: dict):
    if options['gateway'] == 'mock':
        logger.info("Using in-memory mock gateway")
        return MockGateway(expected_names=read_expected_names)

    if options['gateway'] != 'az':
        logger.warning(f"Unknown gateway {options['gateway']!r}, falling back to Azure CLI")
    return AzureCliGateway(
        az_command=options['az_command'],
        timeout=options['az_timeout'],
    )


gateway = build_gateway(get_options())


# -------------------
# Options menu actions
# -------------------
def _settings_dialog() -> ui.dialog:
    with ui.dialog() as dialog, ui.card().classes('w-[520px]'):
        ui.label('Choose Default Settings').classes('text-lg font-bold')
        ui.label('JSON list of {"name": ..., "value": ...}; listed names are marked as expected.') \
            .classes('text-sm text-gray-400')

        async def upload_settings(e):
            content = await e.file.read()
            try:
                import_default_settings(content)
            except ValueError as err:
                ui.notify(str(err), type='negative')
                return
            ui.notify(f'Default settings "{e.file.name}" imported, applies on next load', type='positive')
            dialog.close()

        ui.upload(
            label='Default settings (.json)',
            auto_upload=True,
            on_upload=upload_settings,
        ).props('accept=.json').classes('w-full')

        with ui.row().classes('justify-end w-full'):
            ui.button('Cancel', on_click=dialog.close)

    return dialog


def _export_env(state: SelectionState) -> None:
    if not state.has_variables:
        ui.notify('No environment variables loaded', type='warning')
        return
    ui.download.content(serialize_env(state.variables), EXPORT_FILENAME)
    logger.info(f"Exported {len(state.variables)} variables of {state.variables_app.name}")


# -------------------
# Header (called inside each page)
# -------------------
def build_header(state: SelectionState):
    dark = ui.dark_mode()
    dark.enable()
    settings_dialog = _settings_dialog()

    with ui.header().classes('items-center'):
        ui.label('Azure Configure').classes('text-lg font-bold')
        ui.space()
        with ui.button('Option', icon='menu').props('flat color=white'):
            with ui.menu():
                ui.menu_item('Choose Default Settings', on_click=settings_dialog.open)
                ui.menu_item('Save As...', on_click=lambda: _export_env(state))


# -------------------
# Pages
# -------------------
@ui.page('/')
def home_page():
    state = SelectionState()
    controller = SelectionController(gateway, state)
    logger.info("home_page called")

    build_header(state)

    with ui.column().classes('w-full max-w-6xl mx-auto'):
        refresh_editor = None

        def variables_changed():
            if refresh_editor:
                refresh_editor()

        refresh_subscriptions = render_selection_panel(controller, variables_changed)
        refresh_editor = render_env_editor(controller)

    async def initial_load():
        await controller.load_subscriptions()
        refresh_subscriptions()

    ui.timer(0.1, initial_load, once=True)
