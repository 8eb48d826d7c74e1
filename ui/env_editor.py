# ui/env_editor.py
"""
Environment variable editor UI.

Responsibilities:
- Render one input per variable of the selected app
- Highlight expected variables without a value, mark local changes
- Copy single values to the clipboard
- Save the edited set and show the reloaded state
"""

from typing import Callable, Dict

from nicegui import ui

from gateway import RemoteError
from reconciliation import ReloadError
from selection import SelectionController

import logging
logger = logging.getLogger(__name__)


def render_env_editor(controller: SelectionController) -> Callable[[], None]:
    """
    Render the editor; returns its refresh callback.
    """
    state = controller.state
    engine = controller.engine
    markers: Dict[str, tuple] = {}

    def on_edit(name: str, value) -> None:
        engine.edit(name, value)
        var = engine.find(name)
        if var is None or name not in markers:
            return
        attention, changed = markers[name]
        attention.set_visibility(var.needs_attention)
        changed.set_visibility(var.changed)

    def copy_value(name: str) -> None:
        var = engine.find(name)
        if var is None:
            return
        ui.clipboard.write(var.value or '')
        ui.notify(f'{name} copied', type='info')

    async def save() -> None:
        app = state.variables_app
        if app is None:
            return
        try:
            await engine.save(app)
        except ReloadError as e:
            ui.notify(str(e), type='warning', close_button='OK')
            editor.refresh()
            return
        except RemoteError as e:
            ui.notify(f'Save failed, your edits are kept: {e}', type='negative', close_button='OK')
            return
        ui.notify(f'{app.name} saved', type='positive')
        editor.refresh()

    @ui.refreshable
    def editor():
        markers.clear()
        app = state.variables_app
        if app is None:
            return

        ui.separator().classes('my-3')
        ui.label('Appservice Environment Variables').classes('text-lg font-semibold')

        if not state.variables:
            ui.label(f'{app.name} has no environment variables').classes('text-sm text-gray-400')
            return

        with ui.column().classes('w-full gap-1'):
            for var in state.variables:
                with ui.row().classes('w-full items-center no-wrap'):
                    ui.label(var.name).classes('w-1/3 font-mono text-sm break-all')
                    field = ui.input(
                        value=var.value or '',
                        on_change=lambda e, n=var.name: on_edit(n, e.value),
                    ).props('dense outlined').classes('flex-grow')
                    if var.needs_attention:
                        field.props('color=warning')
                    with field.add_slot('append'):
                        attention = ui.icon('warning', color='warning')
                        attention.tooltip('Expected variable has no value')
                        changed = ui.icon('edit', color='primary')
                        changed.tooltip(f'Changed, was: {var.previous_value or "(unset)"}')
                    attention.set_visibility(var.needs_attention)
                    changed.set_visibility(var.changed)
                    markers[var.name] = (attention, changed)

                    ui.button(
                        icon='content_copy',
                        on_click=lambda n=var.name: copy_value(n),
                    ).props('flat dense round')

        with ui.row().classes('items-center mt-4'):
            ui.button('Save', icon='save', on_click=save) \
                .bind_enabled_from(state, 'any_busy', backward=lambda busy: not busy)
            ui.spinner(size='sm').bind_visibility_from(state.save_status, 'busy')

    with ui.column().classes('w-full'):
        with ui.row().classes('items-center'):
            ui.spinner(size='sm').bind_visibility_from(state.variables_status, 'busy')
        editor()

    return editor.refresh
