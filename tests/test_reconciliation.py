"""Load / edit / save cycle of the reconciliation engine."""

import pytest

from conftest import API, SUB_ID, WEB
from gateway import RemoteError
from reconciliation import ReloadError


def as_pairs(variables):
    return {var.name: var.value for var in variables}


class TestLoad:
    async def test_snapshots_previous_value(self, engine):
        """
        Given the remote side returns A=1 and an expected but unset B
        When the variables are loaded
        Then previous_value mirrors the fetched value of each variable
        """
        variables = await engine.load(WEB)

        assert [(v.name, v.value, v.previous_value, v.is_expected) for v in variables] == [
            ("A", "1", "1", True),
            ("B", None, None, True),
        ]

    async def test_load_replaces_unsaved_edits(self, engine):
        """
        Given a loaded set with a local edit
        When the same app is loaded again
        Then the edit is gone
        """
        await engine.load(WEB)
        engine.edit("A", "local")

        await engine.load(WEB)

        assert engine.find("A").value == "1"
        assert not engine.has_changes

    async def test_failed_load_propagates_and_records_error(self, engine, gateway, state):
        gateway.fail_on.add("fetch_variables")

        with pytest.raises(RemoteError):
            await engine.load(WEB)

        assert state.variables_status.busy is False
        assert "fetch_variables" in state.variables_status.error


class TestEdit:
    async def test_edit_keeps_previous_value(self, engine):
        """
        Given a loaded set
        When a variable is edited several times
        Then only value changes, previous_value stays at the fetched value
        """
        await engine.load(WEB)

        engine.edit("A", "x")
        engine.edit("A", "y")

        assert [v.name for v in engine.variables] == ["A", "B"]
        var = engine.find("A")
        assert var.value == "y"
        assert var.previous_value == "1"
        assert var.changed

    async def test_edit_unknown_name_is_ignored(self, engine):
        await engine.load(WEB)

        assert engine.edit("NOPE", "x") is False
        assert as_pairs(engine.variables) == {"A": "1", "B": None}

    async def test_attention_follows_live_value(self, engine):
        """
        Given an expected variable without a value
        When the user types a value but has not saved
        Then it no longer needs attention
        """
        await engine.load(WEB)
        assert engine.needs_attention("B")
        assert [v.name for v in engine.attention_variables()] == ["B"]

        engine.edit("B", "x")

        assert not engine.needs_attention("B")

    async def test_cleared_expected_value_needs_attention(self, engine):
        await engine.load(WEB)

        engine.edit("A", "")

        assert engine.needs_attention("A")
        assert [v.name for v in engine.changed_variables()] == ["A"]

    async def test_clearing_unset_value_leaves_it_unset(self, engine):
        """
        Given the expected B was never set
        When a value is typed and then erased again
        Then B is unset and unchanged, and still needs attention
        """
        await engine.load(WEB)

        engine.edit("B", "x")
        engine.edit("B", "")

        b = engine.find("B")
        assert b.value is None
        assert not b.changed
        assert b.needs_attention
        assert not engine.has_changes


class TestSave:
    async def test_round_trip_without_edits(self, engine, gateway):
        """
        Given a freshly loaded set
        When it is saved without edits
        Then the payload equals what was fetched
        """
        fetched = await gateway.fetch_variables(WEB)
        await engine.load(WEB)

        await engine.save(WEB)

        replace_calls = [arg for op, arg in gateway.calls if op == "replace_variables"]
        assert len(replace_calls) == 1
        app, payload = replace_calls[0]
        assert app == WEB
        assert as_pairs(payload) == {v.name: v.value for v in fetched}

    async def test_edit_save_and_resnapshot(self, engine, gateway):
        """
        Given A=1 and an unset expected B
        When B is edited to 2 and saved
        Then the full set is sent and the reload snapshots B's new value
        """
        await engine.load(WEB)
        engine.edit("B", "2")

        await engine.save(WEB)

        _, payload = [arg for op, arg in gateway.calls if op == "replace_variables"][0]
        assert [(v.name, v.value) for v in payload] == [("A", "1"), ("B", "2")]

        b = engine.find("B")
        assert b.previous_value == "2"
        assert not b.changed
        assert [op for op, _ in gateway.calls][-2:] == ["replace_variables", "fetch_variables"]

    async def test_payload_is_a_copy(self, engine):
        await engine.load(WEB)

        payload = engine.payload()
        payload[0].value = "mutated"

        assert engine.find("A").value == "1"

    async def test_failed_save_keeps_edits(self, engine, gateway, state):
        """
        Given local edits
        When the replace call fails
        Then the error propagates and the edited set is untouched
        """
        await engine.load(WEB)
        engine.edit("A", "edited")
        gateway.fail_on.add("replace_variables")

        with pytest.raises(RemoteError):
            await engine.save(WEB)

        assert as_pairs(engine.variables) == {"A": "edited", "B": None}
        assert engine.find("A").previous_value == "1"
        assert state.save_status.busy is False
        assert state.save_status.error

        gateway.fail_on.clear()
        await engine.save(WEB)
        assert engine.find("A").previous_value == "edited"

    async def test_failed_reload_after_committed_save(self, engine, gateway, state):
        """
        Given local edits
        When the replace succeeds but the reload fails
        Then a ReloadError is raised, the save itself counts as done
        and the fetch error is recorded on the variables stage
        """
        await engine.load(WEB)
        engine.edit("A", "2")
        gateway.fail_on.add("fetch_variables")

        with pytest.raises(ReloadError):
            await engine.save(WEB)

        assert gateway.settings[(SUB_ID, "rg-web", "myweb")] == {"A": "2"}
        assert state.save_status.busy is False
        assert state.save_status.error is None
        assert state.variables_status.error
        assert engine.find("A").value == "2"

    async def test_failed_replace_is_not_a_reload_error(self, engine, gateway):
        await engine.load(WEB)
        gateway.fail_on.add("replace_variables")

        with pytest.raises(RemoteError) as excinfo:
            await engine.save(WEB)

        assert not isinstance(excinfo.value, ReloadError)

    async def test_save_skips_reload_when_other_app_displayed(self, engine, gateway, state):
        await engine.load(API)

        await engine.save(WEB)

        assert state.variables_app == API
        assert [op for op, _ in gateway.calls].count("fetch_variables") == 1

    async def test_cleared_value_is_removed_remotely(self, engine, gateway):
        await engine.load(WEB)
        engine.edit("A", "")

        await engine.save(WEB)

        a = engine.find("A")
        assert a.value is None
        assert a.needs_attention
