from unittest.mock import patch

from prettier_bot.services import config_service
from prettier_bot.services.command_catalog import BuiltinCommand, CustomCommand
from prettier_bot.services.result import Result
from prettier_bot.services.state_machine import ConfigState
from prettier_bot.services.telegram_service import MARK_OFF, MARK_ON

WA_FORMAT = CustomCommand("wa-format", "WhatsApp Format", "Format for WhatsApp: ")


def button_texts(keyboard):
    return [row[0]["text"] for row in keyboard["inline_keyboard"]]


class TestRenderConfigView:
    def test_markers_reflect_preferences(self):
        text, keyboard = config_service.render_config_view([BuiltinCommand("correct"), WA_FORMAT])

        labels = button_texts(keyboard)
        assert f"{MARK_ON} Correct Grammar" in labels
        assert f"{MARK_OFF} Make Shorter" in labels
        assert f"{MARK_ON} WhatsApp Format" in labels
        assert "Enabled: 2" in text

    def test_actions_are_last(self):
        _, keyboard = config_service.render_config_view([BuiltinCommand("correct")])
        rows = keyboard["inline_keyboard"]
        assert rows[-2][0]["callback_data"] == "addcustom:"
        assert rows[-1][0]["callback_data"] == "done:"


class TestShowConfig:
    def test_sends_view_and_enters_presenting(self, ctx, telegram):
        result = config_service.show_config(ctx, "42")

        assert result.ok is True
        assert ctx.sessions.get_state("42") == ConfigState.PRESENTING
        _, kwargs = telegram.send_message.call_args
        assert f"{MARK_ON} Correct Grammar" in button_texts(kwargs["reply_markup"])

    def test_clears_pending_intake(self, ctx):
        ctx.sessions.set_state("42", ConfigState.AWAITING_CUSTOM_INPUT)
        config_service.show_config(ctx, "42")
        assert ctx.sessions.is_awaiting_custom_input("42") is False


class TestHandleToggle:
    def test_toggle_adds_and_persists(self, ctx, telegram):
        updated = config_service.handle_toggle(ctx, "42", 7, "cb1", "shorter")

        assert [command.id for command in updated] == ["correct", "shorter"]
        assert [command.id for command in ctx.store.get("42")] == ["correct", "shorter"]
        telegram.edit_message.assert_called_once()
        args, kwargs = telegram.edit_message.call_args
        assert args[:2] == ("42", 7)
        assert f"{MARK_ON} Make Shorter" in button_texts(kwargs["reply_markup"])
        telegram.answer_callback_query.assert_called_once_with("cb1", "Make Shorter on")

    def test_toggle_twice_is_membership_noop_with_two_saves(self, ctx):
        with patch.object(ctx.store, "save", wraps=ctx.store.save) as save_spy:
            config_service.handle_toggle(ctx, "42", 7, "cb1", "shorter")
            config_service.handle_toggle(ctx, "42", 7, "cb2", "shorter")

        assert save_spy.call_count == 2
        assert "shorter" not in [command.id for command in ctx.store.get("42")]

    def test_last_command_can_be_removed(self, ctx, telegram):
        with patch.object(ctx.store, "save", wraps=ctx.store.save) as save_spy:
            updated = config_service.handle_toggle(ctx, "42", 7, "cb1", "correct")

        assert updated == []
        save_spy.assert_called_once_with("42", [])
        telegram.answer_callback_query.assert_called_once_with("cb1", "Removed")
        args, _ = telegram.edit_message.call_args
        assert "Enabled: 0" in args[2]

    def test_sole_custom_command_can_be_removed(self, ctx):
        ctx.store.save("42", [WA_FORMAT])

        updated = config_service.handle_toggle(ctx, "42", 7, "cb1", "wa-format")

        assert updated == []

    def test_removed_custom_is_not_restored(self, ctx, telegram):
        ctx.store.save("42", [BuiltinCommand("correct")])

        updated = config_service.handle_toggle(ctx, "42", 7, "cb1", "wa-format")

        assert updated == [BuiltinCommand("correct")]
        telegram.edit_message.assert_not_called()
        telegram.answer_callback_query.assert_called_once_with("cb1", config_service.MSG_CANNOT_RESTORE)

    def test_custom_command_can_be_removed(self, ctx):
        ctx.store.save("42", [BuiltinCommand("correct"), WA_FORMAT])

        updated = config_service.handle_toggle(ctx, "42", 7, "cb1", "wa-format")

        assert updated == [BuiltinCommand("correct")]

    def test_toggle_after_restart_reenters_presenting(self, ctx):
        assert ctx.sessions.get_state("42") == ConfigState.IDLE
        config_service.handle_toggle(ctx, "42", 7, "cb1", "emojis")
        assert ctx.sessions.get_state("42") == ConfigState.PRESENTING

    def test_save_failure_still_redraws(self, ctx, telegram):
        with patch.object(ctx.store, "save", return_value=Result.failure("down", "db_error")):
            updated = config_service.handle_toggle(ctx, "42", 7, "cb1", "emojis")

        assert [command.id for command in updated] == ["correct", "emojis"]
        telegram.edit_message.assert_called_once()


class TestHandleAddCustom:
    def test_enters_intake_and_sends_instructions(self, ctx, telegram):
        config_service.handle_add_custom(ctx, "42", "cb1")

        assert ctx.sessions.is_awaiting_custom_input("42") is True
        args, _ = telegram.send_message.call_args
        assert 'starting with "Create a command"' in args[1]
        telegram.answer_callback_query.assert_called_once_with("cb1")


class TestHandleDone:
    def test_confirms_and_goes_idle(self, ctx, telegram):
        ctx.store.save("42", [BuiltinCommand("correct"), WA_FORMAT])
        ctx.sessions.set_state("42", ConfigState.PRESENTING)

        config_service.handle_done(ctx, "42", 7, "cb1")

        assert ctx.sessions.get_state("42") == ConfigState.IDLE
        args, _ = telegram.edit_message.call_args
        assert args[0:2] == ("42", 7)
        assert "• Correct Grammar" in args[2]
        assert "• WhatsApp Format" in args[2]

    def test_done_after_removing_everything_confirms_default(self, ctx, telegram):
        config_service.handle_toggle(ctx, "42", 7, "cb1", "correct")
        telegram.reset_mock()

        commands = config_service.handle_done(ctx, "42", 7, "cb2")

        assert commands == [BuiltinCommand("correct")]
        args, _ = telegram.edit_message.call_args
        assert args[2] == "💾 Saved! Your commands:\n• Correct Grammar"

    def test_done_persists(self, ctx):
        with patch.object(ctx.store, "save", wraps=ctx.store.save) as save_spy:
            config_service.handle_done(ctx, "42", 7, "cb1")
        save_spy.assert_called_once()

    def test_falls_back_to_new_message_when_edit_fails(self, ctx, telegram):
        telegram.edit_message.return_value = Result.failure("message to edit not found", "telegram_error")

        config_service.handle_done(ctx, "42", 7, "cb1")

        telegram.send_message.assert_called_once()


class TestCancel:
    def test_cancel_clears_intake(self, ctx):
        ctx.sessions.set_state("42", ConfigState.AWAITING_CUSTOM_INPUT)
        config_service.cancel(ctx, "42")
        assert ctx.sessions.get_state("42") == ConfigState.IDLE
