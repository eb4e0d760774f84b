from prettier_bot.services.command_catalog import BuiltinCommand, CustomCommand, builtin_commands
from prettier_bot.services.preference_service import (
    config_options,
    enabled_titles,
    find_command,
    toggle_command,
    upsert_custom_command,
)

WA_FORMAT = CustomCommand("wa-format", "WhatsApp Format", "Format for WhatsApp: ")


def ids(commands):
    return [command.id for command in commands]


class TestToggleCommand:
    def test_absent_builtin_is_appended(self):
        updated, changed = toggle_command([BuiltinCommand("correct")], "shorter")
        assert changed is True
        assert ids(updated) == ["correct", "shorter"]

    def test_present_command_is_removed(self):
        updated, changed = toggle_command([BuiltinCommand("correct"), BuiltinCommand("shorter")], "shorter")
        assert changed is True
        assert ids(updated) == ["correct"]

    def test_toggle_twice_restores_membership(self):
        start = [BuiltinCommand("correct")]
        once, _ = toggle_command(start, "emojis")
        twice, _ = toggle_command(once, "emojis")
        assert ids(twice) == ids(start)

    def test_two_different_ids_are_order_independent(self):
        start = [BuiltinCommand("correct"), BuiltinCommand("longer")]
        a, _ = toggle_command(start, "emojis")
        a, _ = toggle_command(a, "longer")
        b, _ = toggle_command(start, "longer")
        b, _ = toggle_command(b, "emojis")
        assert set(ids(a)) == set(ids(b)) == {"correct", "emojis"}

    def test_unknown_id_is_noop(self):
        start = [BuiltinCommand("correct")]
        updated, changed = toggle_command(start, "not-a-command")
        assert changed is False
        assert updated == start

    def test_removed_custom_cannot_be_added_back_by_id(self):
        start = [BuiltinCommand("correct"), WA_FORMAT]
        removed, _ = toggle_command(start, "wa-format")
        restored, changed = toggle_command(removed, "wa-format")
        assert changed is False
        assert ids(restored) == ["correct"]

    def test_does_not_mutate_input(self):
        start = [BuiltinCommand("correct")]
        toggle_command(start, "shorter")
        assert ids(start) == ["correct"]


class TestUpsertCustomCommand:
    def test_new_id_is_appended(self):
        updated, replaced = upsert_custom_command([BuiltinCommand("correct")], WA_FORMAT)
        assert replaced is False
        assert updated == [BuiltinCommand("correct"), WA_FORMAT]

    def test_same_id_overwrites_in_place(self):
        newer = CustomCommand("wa-format", "WhatsApp", "Rewrite for a WhatsApp chat: ")
        start = [WA_FORMAT, BuiltinCommand("correct")]
        updated, replaced = upsert_custom_command(start, newer)
        assert replaced is True
        assert updated == [newer, BuiltinCommand("correct")]


class TestConfigOptions:
    def test_lists_every_builtin_with_marker(self):
        options = config_options([BuiltinCommand("shorter")])
        assert [command.id for command, _ in options] == [command.id for command in builtin_commands()]
        enabled = {command.id for command, on in options if on}
        assert enabled == {"shorter"}

    def test_enabled_custom_commands_follow_builtins(self):
        options = config_options([BuiltinCommand("correct"), WA_FORMAT])
        assert options[-1] == (WA_FORMAT, True)


class TestHelpers:
    def test_find_command(self):
        assert find_command([WA_FORMAT], "wa-format") is WA_FORMAT
        assert find_command([WA_FORMAT], "correct") is None

    def test_enabled_titles(self):
        assert enabled_titles([BuiltinCommand("correct"), WA_FORMAT]) == ["Correct Grammar", "WhatsApp Format"]
