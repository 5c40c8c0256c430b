from observation_tracker.schemas.framework import Question, Section
from observation_tracker.services import framework_editor as editor


def _questions(*ids):
    return [Question(id=i, text=f"Question {i}", scale=4) for i in ids]


def _ids(questions):
    return [q.id for q in questions]


def test_move_up_swaps_with_previous():
    assert _ids(editor.move_question(_questions("a", "b", "c"), "b", "up")) == ["b", "a", "c"]


def test_move_down_swaps_with_next():
    assert _ids(editor.move_question(_questions("a", "b", "c"), "b", "down")) == ["a", "c", "b"]


def test_move_first_up_is_noop():
    assert _ids(editor.move_question(_questions("a", "b"), "a", "up")) == ["a", "b"]


def test_move_last_down_is_noop():
    assert _ids(editor.move_question(_questions("a", "b"), "b", "down")) == ["a", "b"]


def test_move_unknown_id_is_noop():
    assert _ids(editor.move_question(_questions("a", "b"), "zzz", "up")) == ["a", "b"]


def test_move_does_not_mutate_input():
    original = _questions("a", "b")
    editor.move_question(original, "b", "up")
    assert _ids(original) == ["a", "b"]


def test_duplicate_inserts_copy_after_original():
    out = editor.duplicate_question(_questions("a", "b"), "a")
    assert len(out) == 3
    assert out[0].id == "a"
    assert out[1].id != "a"
    assert out[1].text == "Question a (Copy)"
    assert out[2].id == "b"


def test_add_and_remove_question():
    out = editor.add_question(_questions("a"))
    assert len(out) == 2
    assert out[1].id.startswith("question-")
    assert _ids(editor.remove_question(out, "a")) == [out[1].id]


def test_sections_add_remove_and_weight():
    sections = [Section(id="s1", title="One", weight=60)]
    sections = editor.add_section(sections, title="Two", weight=40)
    assert editor.total_section_weight(sections) == 100
    assert [s.title for s in editor.remove_section(sections, "s1")] == ["Two"]
