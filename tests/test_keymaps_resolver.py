from __future__ import annotations

from mdpane.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeymapRegistry,
    KeymapResolver,
    WhenClause,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    chords: tuple[str, ...] = ("ctrl+b",),
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
    timeout_ms: int = 1000,
) -> Binding:
    return Binding(
        id=binding_id,
        mode="editor",
        sequence=KeySequence.from_chords(*chords, timeout_ms=timeout_ms),
        action_id=action_id,
        when=when,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    for action_id in {binding.action_id for binding in bindings}:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_single_chord() -> None:
    binding = make_binding("editor.bold")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("editor", ("ctrl+b",))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id
    assert result.match.action.id == "core.test"


def test_resolver_misses_unknown_chord_and_mode() -> None:
    resolver = KeymapResolver(build_registry([make_binding("editor.bold")]))

    assert resolver.resolve("editor", ("ctrl+q",)).status == "miss"
    assert resolver.resolve("preview", ("ctrl+b",)).status == "miss"


def test_resolver_reports_pending_with_timeout_for_prefix() -> None:
    binding = make_binding("editor.heading", chords=("ctrl+h", "1"), timeout_ms=1500)
    resolver = KeymapResolver(build_registry([binding]))

    pending = resolver.resolve("editor", ("ctrl+h",))
    done = resolver.resolve("editor", ("ctrl+h", "1"))

    assert pending.status == "pending"
    assert pending.timeout_ms == 1500
    assert done.status == "match"


def test_resolver_prefers_gated_binding_when_it_applies() -> None:
    plain = make_binding("editor.copy_line", action_id="core.line")
    gated = make_binding(
        "editor.copy_selection",
        action_id="core.selection",
        when=(WhenClause("has_selection"),),
    )
    resolver = KeymapResolver(build_registry([plain, gated]))

    caret = resolver.resolve("editor", ("ctrl+b",), context={"has_selection": False})
    selected = resolver.resolve("editor", ("ctrl+b",), context={"has_selection": True})

    assert caret.match is not None and caret.match.binding.id == plain.id
    assert selected.match is not None and selected.match.binding.id == gated.id


def test_resolver_cache_refreshes_on_revision() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)
    assert resolver.resolve("editor", ("ctrl+x",)).status == "miss"

    registry.register_action(make_action("core.x"))
    registry.register_binding(make_binding("editor.x", chords=("ctrl+x",), action_id="core.x"))

    match = resolver.resolve("editor", ("ctrl+x",))
    assert match.status == "match"
