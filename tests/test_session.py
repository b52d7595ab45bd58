"""
输入会话状态机测试
"""

import pytest

from cantoinput.engine import (Mode, Modifier, SessionContext, SpecialKey, handle_keystroke,
                               initial_state)


def type_keys(state, keys, context):
    """依次输入，返回最后一次结果与所有上屏文字"""
    commits = []
    result = None
    for k in keys:
        result = handle_keystroke(state, k, (), context)
        state = result.state
        if result.commit_text:
            commits.append(result.commit_text)
    return result, commits


class TestInitialState:

    def test_initial(self):
        state = initial_state()
        assert state.mode is Mode.COMPOSITION
        assert state.input_buffer == ""
        assert state.candidates is None
        assert state.page_index == 0

    def test_requires_context(self):
        with pytest.raises(ValueError):
            handle_keystroke(initial_state(), "a")


class TestLetters:

    def test_letter_appends_and_resolves(self, context):
        result, _ = type_keys(initial_state(), "nei", context)
        assert result.consumed
        assert result.commit_text is None
        assert result.state.input_buffer == "nei"
        assert result.state.candidates == ("你", "妳", "尼", "你好")

    def test_longer_buffer_narrows(self, context):
        result, _ = type_keys(initial_state(), "neih", context)
        assert result.state.candidates == ("你好",)

    def test_unmatched_buffer_has_no_candidates(self, context):
        result, _ = type_keys(initial_state(), "xyz", context)
        assert result.consumed
        assert result.state.input_buffer == "xyz"
        assert result.state.candidates is None
        assert result.state.view().page_label == ""

    def test_shift_folds_to_lowercase(self, context):
        result = handle_keystroke(initial_state(), "N", [Modifier.SHIFT], context)
        assert result.consumed
        assert result.state.input_buffer == "n"

    def test_letter_resets_page(self, twenty_context):
        state = handle_keystroke(initial_state(), "a", (), twenty_context).state
        state = handle_keystroke(state, SpecialKey.PAGE_DOWN, (), twenty_context).state
        assert state.page_index == 1
        state = handle_keystroke(state, "a", (), twenty_context).state
        assert state.page_index == 0

    def test_state_is_not_mutated(self, context):
        state = initial_state()
        handle_keystroke(state, "n", (), context)
        assert state.input_buffer == ""


class TestEditingKeys:

    def test_backspace(self, context):
        state = type_keys(initial_state(), "neih", context)[0].state
        result = handle_keystroke(state, SpecialKey.BACKSPACE, (), context)
        assert result.consumed
        assert result.state.input_buffer == "nei"
        assert result.state.candidates == ("你", "妳", "尼", "你好")

    def test_backspace_to_empty_clears_candidates(self, context):
        state = handle_keystroke(initial_state(), "n", (), context).state
        result = handle_keystroke(state, "\b", (), context)
        assert result.consumed
        assert result.state.input_buffer == ""
        assert result.state.candidates is None

    def test_backspace_on_empty_propagates(self, context):
        result = handle_keystroke(initial_state(), SpecialKey.BACKSPACE, (), context)
        assert not result.consumed

    def test_escape(self, context):
        state = type_keys(initial_state(), "nei", context)[0].state
        result = handle_keystroke(state, SpecialKey.ESCAPE, (), context)
        assert result.consumed
        assert result.state == initial_state()

    def test_escape_on_empty_propagates(self, context):
        assert not handle_keystroke(initial_state(), SpecialKey.ESCAPE, (), context).consumed

    def test_enter_swallowed_while_composing(self, context):
        state = type_keys(initial_state(), "nei", context)[0].state
        result = handle_keystroke(state, SpecialKey.ENTER, (), context)
        assert result.consumed
        assert result.commit_text is None
        assert result.state == state

    def test_enter_on_empty_propagates(self, context):
        assert not handle_keystroke(initial_state(), "\n", (), context).consumed


class TestSelection:

    def test_digit_commits_and_resets(self, context):
        result, commits = type_keys(initial_state(), "nei2", context)
        assert commits == ["妳"]
        assert result.consumed
        assert result.state == initial_state()

    def test_space_commits_first_of_page(self, context):
        result, commits = type_keys(initial_state(), "hou ", context)
        assert commits == ["好"]
        assert result.state.input_buffer == ""

    def test_out_of_range_digit_consumed(self, context):
        state = type_keys(initial_state(), "hou", context)[0].state
        result = handle_keystroke(state, "9", (), context)
        assert result.consumed
        assert result.commit_text is None
        assert result.state == state

    def test_digit_without_candidates_passes(self, context):
        result = handle_keystroke(initial_state(), "1", (), context)
        assert not result.consumed
        state = type_keys(initial_state(), "xyz", context)[0].state
        result = handle_keystroke(state, "1", (), context)
        assert not result.consumed
        assert result.state.input_buffer == "xyz"

    def test_space_without_candidates_passes(self, context):
        assert not handle_keystroke(initial_state(), " ", (), context).consumed

    def test_select_on_later_page(self, twenty_context):
        state = handle_keystroke(initial_state(), "a", (), twenty_context).state
        state = handle_keystroke(state, SpecialKey.RIGHT, (), twenty_context).state
        result = handle_keystroke(state, "3", (), twenty_context)
        assert result.commit_text == "甲11"

    def test_space_on_later_page(self, twenty_context):
        result, commits = type_keys(initial_state(), "a==", twenty_context)
        assert result.state.page_index == 2
        result = handle_keystroke(result.state, " ", (), twenty_context)
        assert result.commit_text == "甲18"

    def test_out_of_range_on_last_page(self, twenty_context):
        state = type_keys(initial_state(), "a..", twenty_context)[0].state
        result = handle_keystroke(state, "3", (), twenty_context)
        assert result.consumed
        assert result.commit_text is None
        assert result.state == state


class TestPaging:

    def test_forward_and_back(self, twenty_context):
        state = handle_keystroke(initial_state(), "a", (), twenty_context).state
        assert state.view().visible == [f"甲{i:02d}" for i in range(9)]

        for key, expected in [(SpecialKey.PAGE_DOWN, 1), ("]", 2), (SpecialKey.DOWN, 2),
                              ("-", 1), (SpecialKey.UP, 0), ("[", 0)]:
            result = handle_keystroke(state, key, (), twenty_context)
            assert result.consumed
            state = result.state
            assert state.page_index == expected

    def test_last_page_view(self, twenty_context):
        state = type_keys(initial_state(), "a}}}", twenty_context)[0].state
        view = state.view()
        assert view.visible == ["甲18", "甲19"]
        assert view.page_label == "3/3"

    def test_alias_is_not_punctuation_while_candidates(self, context):
        state = type_keys(initial_state(), "nei", context)[0].state
        result = handle_keystroke(state, ",", (), context)
        assert result.consumed
        assert result.commit_text is None

    def test_navigation_without_candidates_propagates(self, context):
        result = handle_keystroke(initial_state(), SpecialKey.PAGE_DOWN, (), context)
        assert not result.consumed
        result = handle_keystroke(initial_state(), SpecialKey.LEFT, (), context)
        assert not result.consumed


class TestPunctuation:

    def test_substitution(self, context):
        result = handle_keystroke(initial_state(), ",", (), context)
        assert result.consumed
        assert result.commit_text == "，"

    def test_alias_becomes_punctuation_without_candidates(self, context):
        assert handle_keystroke(initial_state(), "<", (), context).commit_text == "《"

    def test_substitution_keeps_unmatched_buffer(self, context):
        state = type_keys(initial_state(), "xyz", context)[0].state
        result = handle_keystroke(state, "!", (), context)
        assert result.commit_text == "！"
        assert result.state.input_buffer == "xyz"

    def test_unmapped_passes(self, context):
        result = handle_keystroke(initial_state(), "@", (), context)
        assert not result.consumed
        assert result.commit_text is None


class TestModes:

    def test_toggle_clears_state(self, context):
        state = type_keys(initial_state(), "nei", context)[0].state
        result = handle_keystroke(state, SpecialKey.ENTER, [Modifier.CTRL], context)
        assert result.consumed
        assert result.state.mode is Mode.PASSTHROUGH
        assert result.state.input_buffer == ""
        assert result.state.candidates is None

        back = handle_keystroke(result.state, SpecialKey.ENTER, ["ctrl"], context)
        assert back.state == initial_state()

    def test_passthrough_letters(self, context):
        state = initial_state(Mode.PASSTHROUGH)
        for key in ["a", "1", " ", SpecialKey.BACKSPACE, SpecialKey.PAGE_DOWN]:
            result = handle_keystroke(state, key, (), context)
            assert not result.consumed
            assert result.state == state

    def test_passthrough_punctuation(self, context):
        state = initial_state(Mode.PASSTHROUGH)
        result = handle_keystroke(state, ".", (), context)
        assert result.consumed
        assert result.commit_text == "。"

    def test_passthrough_punctuation_disabled(self, dictionary, punctuation):
        ctx = SessionContext(dictionary=dictionary, punctuation=punctuation, passthrough_punctuation=False)
        result = handle_keystroke(initial_state(Mode.PASSTHROUGH), ".", (), ctx)
        assert not result.consumed

    def test_shortcuts_pass_through(self, context):
        state = type_keys(initial_state(), "nei", context)[0].state
        for mods in ([Modifier.CTRL], [Modifier.ALT]):
            result = handle_keystroke(state, "c", mods, context)
            assert not result.consumed
            assert result.state == state


class TestKeys:

    def test_key_names(self, context):
        state = handle_keystroke(initial_state(), "n", (), context).state
        assert handle_keystroke(state, "backspace", (), context).state.input_buffer == ""

    def test_unknown_key(self, context):
        with pytest.raises(ValueError):
            handle_keystroke(initial_state(), "f13", (), context)

    def test_simplified_candidates(self, simplified_context):
        result, commits = type_keys(initial_state(), "hai", simplified_context)
        assert result.state.candidates == ("系", "喺")
        result, commits = type_keys(initial_state(), "gwongdung1", simplified_context)
        assert commits == ["广东"]
