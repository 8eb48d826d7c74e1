"""Export of the loaded variable set as .env text."""

from envfile import EXPORT_FILENAME, serialize_env
from models import EditableEnvVar


def var(name, value):
    return EditableEnvVar(name=name, value=value, is_expected=False, previous_value=value)


class TestSerializeEnv:
    def test_one_line_per_variable_in_order(self):
        text = serialize_env([var("B", "2"), var("A", "1")])

        assert text == 'B="2"\nA="1"'

    def test_unset_value_exports_empty(self):
        assert serialize_env([var("EMPTY", None)]) == 'EMPTY=""'

    def test_quotes_and_backslashes_are_escaped(self):
        assert serialize_env([var("Q", 'say "hi" \\o/')]) == 'Q="say \\"hi\\" \\\\o/"'

    def test_uses_current_values(self):
        edited = var("A", "1")
        edited.value = "changed"

        assert serialize_env([edited]) == 'A="changed"'

    def test_empty_set(self):
        assert serialize_env([]) == ""

    def test_filename(self):
        assert EXPORT_FILENAME == ".env"
