"""Built-in command table and the standard editor shortcuts."""

from __future__ import annotations

from functools import partial
from typing import Iterable, Mapping, Sequence

from mdpane.actions import core as core_actions
from mdpane.actions import edit as edit_actions
from mdpane.actions import files as file_actions
from mdpane.actions import formatting as format_actions
from mdpane.actions import paragraph as paragraph_actions
from mdpane.actions import view as view_actions
from mdpane.editing import MarkupKind
from mdpane.services import EXPORT_FORMATS, IMPORT_FORMATS

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

EDITOR_MODE = "editor"

_MARKUP_LABELS = {
    MarkupKind.BOLD: "Bold",
    MarkupKind.ITALIC: "Italic",
    MarkupKind.UNDERLINE: "Underline",
    MarkupKind.STRIKETHROUGH: "Strikethrough",
    MarkupKind.CODE: "Inline code",
    MarkupKind.COMMENT: "Comment",
}

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(id="core.noop", handler=core_actions.noop_action, description="Do nothing"),
    ActionRef(id="edit.undo", handler=edit_actions.undo, description="Undo"),
    ActionRef(id="edit.redo", handler=edit_actions.redo, description="Redo"),
    ActionRef(id="edit.cut", handler=edit_actions.cut, description="Cut"),
    ActionRef(id="edit.copy", handler=edit_actions.copy, description="Copy"),
    ActionRef(id="edit.paste", handler=edit_actions.paste, description="Paste"),
    ActionRef(id="file.open", handler=file_actions.open_document, description="Open..."),
    ActionRef(id="file.save", handler=file_actions.save_document, description="Save"),
    ActionRef(id="file.save_as", handler=file_actions.save_document_as, description="Save as..."),
    ActionRef(id="file.print", handler=file_actions.print_document, description="Print"),
    ActionRef(id="file.export_pdf", handler=file_actions.export_pdf, description="Export as PDF"),
    *(
        ActionRef(
            id=f"format.{kind.value}",
            handler=partial(format_actions.toggle_inline, kind=kind),
            description=label,
        )
        for kind, label in _MARKUP_LABELS.items()
    ),
    ActionRef(id="insert.link", handler=format_actions.link, description="Insert link"),
    ActionRef(id="insert.image", handler=format_actions.image, description="Insert image"),
    *(
        ActionRef(
            id=f"paragraph.heading{level}",
            handler=partial(paragraph_actions.set_heading, level=level),
            description=f"Heading {level}",
        )
        for level in range(1, 7)
    ),
    ActionRef(
        id="paragraph.raise_heading",
        handler=partial(paragraph_actions.shift_heading, delta=-1),
        description="Raise heading level",
    ),
    ActionRef(
        id="paragraph.lower_heading",
        handler=partial(paragraph_actions.shift_heading, delta=1),
        description="Lower heading level",
    ),
    *(
        ActionRef(
            id=f"file.import.{fmt.tag}",
            handler=partial(file_actions.import_document, format_tag=fmt.tag),
            description=f"Import {fmt.label}",
        )
        for fmt in IMPORT_FORMATS
    ),
    *(
        ActionRef(
            id=f"file.export.{fmt.tag}",
            handler=partial(file_actions.export_document, format_tag=fmt.tag),
            description=f"Export as {fmt.label}",
        )
        for fmt in EXPORT_FORMATS
    ),
    *(
        ActionRef(
            id=f"view.{mode}",
            handler=partial(view_actions.set_view_mode, mode=mode),
            description=f"{mode.capitalize()} view",
        )
        for mode in ("editor", "split", "preview")
    ),
    ActionRef(
        id="view.toggle_sidebar",
        handler=view_actions.toggle_sidebar,
        description="Toggle outline sidebar",
    ),
)


def _shortcut(binding_id: str, chord: str, action_id: str, description: str) -> Binding:
    return Binding(
        id=binding_id,
        mode=EDITOR_MODE,
        sequence=KeySequence.from_chords(chord),
        action_id=action_id,
        description=description,
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _shortcut("edit.undo", "ctrl+z", "edit.undo", "Undo"),
    _shortcut("edit.redo", "ctrl+shift+z", "edit.redo", "Redo"),
    _shortcut("edit.redo_alt", "ctrl+y", "edit.redo", "Redo"),
    _shortcut("file.open", "ctrl+o", "file.open", "Open"),
    _shortcut("file.save", "ctrl+s", "file.save", "Save"),
    _shortcut("file.save_as", "ctrl+shift+s", "file.save_as", "Save as"),
    _shortcut("format.bold", "ctrl+b", "format.bold", "Bold"),
    _shortcut("format.italic", "ctrl+i", "format.italic", "Italic"),
    _shortcut("format.underline", "ctrl+u", "format.underline", "Underline"),
    _shortcut("format.strikethrough", "ctrl+d", "format.strikethrough", "Strikethrough"),
    _shortcut("format.code", "ctrl+e", "format.code", "Inline code"),
    _shortcut("insert.link", "ctrl+k", "insert.link", "Insert link"),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    per_mode_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register the built-in commands and shortcuts.

    Bindings whose action was filtered out are skipped rather than failing.
    ``per_mode_overrides`` replace whatever already owns their chords.
    """

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    for action in DEFAULT_ACTIONS:
        if _selected(action.id, allowed_actions):
            registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed_bindings):
            continue
        if not registry.has_action(binding.action_id):
            continue
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)

    for mode, bindings in (per_mode_overrides or {}).items():
        for binding in bindings:
            if binding.mode != mode:
                raise ValueError(
                    f"Override binding '{binding.id}' must target mode '{mode}'"
                )
            registry.register_binding(binding, replace=True)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    return (set(include) if include else None), set(exclude or ())


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    return item_id not in exclude


__all__ = ["load_default_keymaps", "DEFAULT_ACTIONS", "DEFAULT_BINDINGS", "EDITOR_MODE"]
