import pytest

from mdpane.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeyStroke,
    KeymapConflictError,
    KeymapRegistry,
    WhenClause,
    load_default_keymaps,
)


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    chord: str = "ctrl+b",
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        mode="editor",
        sequence=KeySequence.from_chords(chord),
        action_id=action_id,
        when=when,
    )


def test_keystroke_normalizes_modifiers_and_case() -> None:
    stroke = KeyStroke(key="Z", modifiers=("Shift", "control"))

    assert stroke.token == "ctrl+shift+z"
    assert stroke == KeyStroke.parse("ctrl+shift+z")
    assert stroke.label() == "Ctrl+Shift+Z"


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="editor.bold")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode="editor")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="editor.bold"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="editor.bold.again"))


def test_register_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="editor.bold"))


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="default"))
    registry.register_binding(
        make_binding(binding_id="selected", when=(WhenClause("has_selection"),))
    )
    registry.register_binding(
        make_binding(binding_id="caret", when=(WhenClause.parse("!has_selection"),))
    )

    assert registry.stats().binding_count == 3


def test_register_binding_with_replace_drops_conflicts() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    first = make_binding(binding_id="first")
    second = make_binding(binding_id="second")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_update_binding_changes_chord() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="binding"))
    before = registry.revision()

    updated = registry.update_binding(
        "binding", sequence=KeySequence.from_chords("ctrl+alt+b"), description="bold"
    )

    assert updated.sequence.tokens == ("alt+ctrl+b",)
    assert updated.description == "bold"
    assert registry.revision() == before + 1


def test_update_binding_rejects_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="bold"))
    registry.register_binding(make_binding(binding_id="italic", chord="ctrl+i"))

    with pytest.raises(KeymapConflictError):
        registry.update_binding("italic", sequence=KeySequence.from_chords("ctrl+b"))

    assert registry.get_binding("italic").sequence.tokens == ("ctrl+i",)


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.unregister_binding("binding") is None


def test_load_default_keymaps_shortcut_table() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    table = {
        binding.key_signature: binding.action_id
        for binding in registry.iter_bindings("editor")
    }
    assert table == {
        "ctrl+z": "edit.undo",
        "ctrl+shift+z": "edit.redo",
        "ctrl+y": "edit.redo",
        "ctrl+o": "file.open",
        "ctrl+s": "file.save",
        "ctrl+shift+s": "file.save_as",
        "ctrl+b": "format.bold",
        "ctrl+i": "format.italic",
        "ctrl+u": "format.underline",
        "ctrl+d": "format.strikethrough",
        "ctrl+e": "format.code",
        "ctrl+k": "insert.link",
    }
    assert registry.has_action("paragraph.heading6")
    assert registry.has_action("file.import.mediawiki")
    assert not registry.has_action("file.export.csv")


def test_load_default_keymaps_include_filters() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(
        registry,
        include_actions=("format.bold",),
        include_bindings=("format.bold", "edit.undo"),
    )

    assert registry.stats().action_count == 1
    assert registry.stats().binding_count == 1
    assert registry.get_binding("format.bold").action_id == "format.bold"


def test_load_default_keymaps_per_mode_override() -> None:
    registry = KeymapRegistry()
    custom = Binding(
        id="format.bold",
        mode="editor",
        sequence=KeySequence.from_chords("ctrl+g"),
        action_id="format.bold",
    )

    load_default_keymaps(registry, per_mode_overrides={"editor": (custom,)})

    assert registry.get_binding("format.bold").sequence.tokens == ("ctrl+g",)
    assert registry.bindings_for_action("format.bold") == (custom,)


def test_load_default_keymaps_override_must_match_mode() -> None:
    registry = KeymapRegistry()
    custom = Binding(
        id="format.bold",
        mode="preview",
        sequence=KeySequence.from_chords("ctrl+g"),
        action_id="format.bold",
    )

    with pytest.raises(ValueError):
        load_default_keymaps(registry, per_mode_overrides={"editor": (custom,)})
