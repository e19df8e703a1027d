"""
Tests for command parsing.

Tests:
- Plain text yields no command
- Command and addressee extraction
- Command stripping
"""

import pytest

from botpipe.pipe.commands import CommandDescriptor, parse_command, strip_command


class TestParseCommand:
    """Tests for parse_command."""

    @pytest.mark.parametrize("text", [
        "hello",
        "hello /start",
        " /start",
        "@bot /start",
        "",
        "   ",
        None,
    ])
    def test_non_command_text_is_empty(self, text):
        """Test that text not starting with the marker gives ("", "")."""
        assert tuple(parse_command(text)) == ("", "")

    def test_command_with_addressee(self):
        command, addressee = parse_command("/cmd@name rest of the text")

        assert command == "/cmd"
        assert addressee == "name"

    def test_command_without_addressee(self):
        command, addressee = parse_command("/cmd rest of the text")

        assert command == "/cmd"
        assert addressee == ""

    def test_bare_command(self):
        assert tuple(parse_command("/start")) == ("/start", "")

    def test_splits_addressee_once(self):
        """Test that only the first separator splits the token."""
        assert tuple(parse_command("/cmd@a@b x")) == ("/cmd", "a@b")

    def test_addressee_only_in_first_token(self):
        assert tuple(parse_command("/cmd mail@example.com")) == ("/cmd", "")

    def test_marker_is_kept(self):
        descriptor = parse_command("/help")
        assert descriptor.command.startswith("/")

    def test_descriptor_truthiness(self):
        assert parse_command("/x")
        assert not parse_command("x")
        assert CommandDescriptor() == parse_command("")


class TestStripCommand:
    """Tests for strip_command."""

    def test_strips_command_and_addressee(self):
        assert strip_command("/say@bot  hi there ") == "hi there"

    def test_strips_plain_command(self):
        assert strip_command("/say hello") == "hello"

    def test_command_only(self):
        assert strip_command("/start") == ""

    def test_plain_text_is_trimmed(self):
        assert strip_command("  just text ") == "just text"

    def test_empty(self):
        assert strip_command("") == ""
        assert strip_command(None) == ""
