"""
Unit tests for command templates.
"""

import pytest

from camcorder.core.errors import UnresolvedPlaceholder
from camcorder.core.template import CommandTemplate, Literal, Placeholder, resolve


class TestCommandTemplate:
    """Template construction and introspection."""

    def test_of_wraps_strings_as_literals(self):
        """Plain strings become Literal tokens, placeholders stay as-is."""
        template = CommandTemplate.of("rec -o ", Placeholder.OUTPUT_FILE)

        assert template.tokens == (Literal("rec -o "), Placeholder.OUTPUT_FILE)

    def test_invalid_token_rejected(self):
        """Test rejecting tokens that are neither text nor placeholders."""
        with pytest.raises(TypeError):
            CommandTemplate(("rec", 42))

    def test_placeholders(self, rec_template):
        """Test collecting the placeholder kinds."""
        assert rec_template.placeholders == {Placeholder.WINDOW_ID, Placeholder.OUTPUT_FILE}

    def test_command_name(self, rec_template):
        """Test the command name from the first literal."""
        assert rec_template.command_name == "rec"

    def test_command_name_strips_directory(self):
        """Test that the command name drops its directory."""
        template = CommandTemplate.of("/usr/bin/recordmydesktop -o ", Placeholder.OUTPUT_FILE)
        assert template.command_name == "recordmydesktop"

    def test_command_name_empty_when_starting_with_placeholder(self):
        """Test no command name for a leading placeholder."""
        template = CommandTemplate.of(Placeholder.INPUT_FILE, " --help")
        assert template.command_name == ""

    def test_describe(self, rec_template):
        """Test the human readable form."""
        assert rec_template.describe() == "rec --id <window-id> -o <output-file>"

    def test_templates_are_immutable(self, rec_template):
        """Test that templates cannot be modified."""
        with pytest.raises(AttributeError):
            rec_template.tokens = ()


class TestResolve:
    """resolve() behavior."""

    def test_happy_path(self, rec_template):
        """Literals and values are concatenated in order."""
        command = resolve(rec_template, {
            Placeholder.WINDOW_ID: "0x15",
            Placeholder.OUTPUT_FILE: "/tmp/out.ogv",
        })

        assert command == "rec --id 0x15 -o /tmp/out.ogv"

    def test_no_separators_inserted(self):
        """Test that tokens are joined without separators."""
        template = CommandTemplate.of("a", Placeholder.TEMP_DIR, "b", Placeholder.TEMP_DIR)

        assert template.resolve({Placeholder.TEMP_DIR: "X"}) == "aXbX"

    def test_missing_placeholder(self):
        """Missing kinds raise UnresolvedPlaceholder naming the kind."""
        template = CommandTemplate.of(
            "convert ", Placeholder.TEMP_DIR, "/* ", Placeholder.OUTPUT_FILE
        )

        with pytest.raises(UnresolvedPlaceholder) as exc_info:
            template.resolve({Placeholder.OUTPUT_FILE: "out.gif"})

        assert exc_info.value.kind is Placeholder.TEMP_DIR
        assert "TEMP_DIR" in str(exc_info.value)

    def test_values_not_quoted(self):
        """Values are used verbatim; quoting is the template author's job."""
        template = CommandTemplate.of("rec -o '", Placeholder.OUTPUT_FILE, "'")

        command = template.resolve({Placeholder.OUTPUT_FILE: "my video.ogv"})

        assert command == "rec -o 'my video.ogv'"

    def test_extra_context_ignored(self):
        """Test that unused context values are ignored."""
        template = CommandTemplate.of("true")

        assert template.resolve({Placeholder.OUTPUT_FILE: "x"}) == "true"

    @pytest.mark.parametrize("parts,context,expected", [
        (("ls",), {}, "ls"),
        ((Placeholder.INPUT_FILE,), {Placeholder.INPUT_FILE: "in"}, "in"),
        (
            ("cp ", Placeholder.INPUT_FILE, " ", Placeholder.TEMP_FILE),
            {Placeholder.INPUT_FILE: "a", Placeholder.TEMP_FILE: "/tmp/t"},
            "cp a /tmp/t",
        ),
    ])
    def test_concatenation(self, parts, context, expected):
        """Test concatenating templates."""
        assert CommandTemplate.of(*parts).resolve(context) == expected
