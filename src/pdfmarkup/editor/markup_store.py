"""
PdfMarkup - Markup Store

Holds the current markup set, the selection and the edit history.
Every mutation swaps in a new tuple so readers never see a half-applied
change.
"""

from collections.abc import Callable
from dataclasses import replace
from typing import Any

from pdfmarkup.constants import PASTE_OFFSET
from pdfmarkup.editor.history import HistoryLog
from pdfmarkup.editor.markup_model import (
    STYLE_FIELDS,
    FreehandMarkup,
    MarkupObject,
    ShapeStyle,
    is_visible_stroked_shape,
    markup_field_names,
)
from pdfmarkup.utils.exceptions import InvalidInputError
from pdfmarkup.utils.logger import logger

Snapshot = tuple[MarkupObject, ...]


class MarkupStore:
    """Markup set with selection, clipboard and undo/redo.

    Committed mutations (add, update, delete, clear, paste) push one
    history snapshot each. ``move_live`` changes the set without one so a
    drag can be committed as a single step when it ends.
    """

    def __init__(self, history_limit: int = 0) -> None:
        self._objects: Snapshot = ()
        self._history: HistoryLog[Snapshot] = HistoryLog((), limit=history_limit)
        self._selected_id: str | None = None
        self._clipboard: MarkupObject | None = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def objects(self) -> Snapshot:
        return self._objects

    @property
    def history(self) -> HistoryLog[Snapshot]:
        return self._history

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def selected(self) -> MarkupObject | None:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def get(self, object_id: str) -> MarkupObject | None:
        for obj in self._objects:
            if obj.id == object_id:
                return obj
        return None

    def objects_on_page(self, page: int) -> Snapshot:
        """Objects on a visible page, in paint order."""
        return tuple(obj for obj in self._objects if obj.page == page)

    def visible_stroked_shapes(self, page: int) -> Snapshot:
        """Outlined shapes on a page, with redaction patches filtered out."""
        return tuple(obj for obj in self.objects_on_page(page) if is_visible_stroked_shape(obj))

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, object_id: object) -> bool:
        return any(obj.id == object_id for obj in self._objects)

    # ------------------------------------------------------------------
    # Committed mutations
    # ------------------------------------------------------------------

    def _commit(self, objects: Snapshot) -> None:
        self._objects = objects
        self._history.push(objects)

    def add(self, obj: MarkupObject) -> None:
        """Append an object and record a snapshot.

        Raises:
            InvalidInputError: If the id is empty or already used
        """
        if not obj.id:
            raise InvalidInputError("markup id cannot be empty", field_name="id")
        if obj.id in self:
            raise InvalidInputError(f"markup id {obj.id!r} already exists", field_name="id")

        self._commit(self._objects + (obj,))
        logger.debug(f"Added {obj.kind.value} {obj.id} on page {obj.page}")

    def add_and_select(self, obj: MarkupObject) -> None:
        self.add(obj)
        self._selected_id = obj.id

    def update(self, object_id: str, **changes: Any) -> bool:
        """Merge field changes into an object and record a snapshot.

        Style fields (stroke_color, fill_color, stroke_width, stroke_style)
        are applied to the object's ShapeStyle.

        Args:
            object_id: Id of the object to change
            **changes: Field names and new values

        Returns:
            False if no object has that id, True otherwise

        Raises:
            InvalidInputError: If a field does not exist on the object
        """
        obj = self.get(object_id)
        if obj is None:
            return False

        updated = self._apply_changes(obj, changes)
        self._commit(tuple(updated if o.id == object_id else o for o in self._objects))
        logger.debug(f"Updated {object_id}: {sorted(changes)}")
        return True

    @staticmethod
    def _apply_changes(obj: MarkupObject, changes: dict[str, Any]) -> MarkupObject:
        names = markup_field_names(obj)
        style_changes = {k: v for k, v in changes.items() if k in STYLE_FIELDS}
        direct = {k: v for k, v in changes.items() if k not in STYLE_FIELDS}
        anchor = None
        if isinstance(obj, FreehandMarkup) and "points" not in direct and direct.keys() & {"x", "y"}:
            # A path anchor moves with its points
            anchor = (direct.pop("x", obj.x), direct.pop("y", obj.y))

        if "id" in direct:
            raise InvalidInputError("markup id cannot be changed", field_name="id")
        for name in direct:
            if name not in names:
                raise InvalidInputError(f"{obj.kind.value} has no field {name!r}", field_name=name)
        if style_changes and "style" not in names:
            name = next(iter(style_changes))
            raise InvalidInputError(f"{obj.kind.value} has no style", field_name=name)

        if style_changes:
            base_style = direct.get("style", obj.style)
            if not isinstance(base_style, ShapeStyle):
                raise InvalidInputError("style must be a ShapeStyle", field_name="style")
            direct["style"] = replace(base_style, **style_changes)

        updated = replace(obj, **direct)
        if anchor is not None:
            updated = updated.moved_to(*anchor)
        return updated

    def delete(self, object_id: str) -> bool:
        """Remove one object. Clears the selection if it pointed at it."""
        if object_id not in self:
            return False

        self._commit(tuple(o for o in self._objects if o.id != object_id))
        if self._selected_id == object_id:
            self._selected_id = None
        logger.debug(f"Deleted {object_id}")
        return True

    def clear(self) -> bool:
        """Remove every object. No snapshot when already empty."""
        if not self._objects:
            return False

        self._commit(())
        self._selected_id = None
        logger.debug("Cleared all markup")
        return True

    # ------------------------------------------------------------------
    # Live mutation
    # ------------------------------------------------------------------

    def move_live(self, object_id: str, x: float, y: float) -> bool:
        """Move an object's anchor to (x, y) without recording history.

        Lines and arrows carry their end point along; freehand paths shift
        every point by the same delta.
        """
        obj = self.get(object_id)
        if obj is None:
            return False

        moved = obj.moved_to(x, y)
        self._objects = tuple(moved if o.id == object_id else o for o in self._objects)
        return True

    def restore_live(self, obj: MarkupObject) -> None:
        """Put back a copy of an object taken before a live change."""
        self._objects = tuple(obj if o.id == obj.id else o for o in self._objects)

    # ------------------------------------------------------------------
    # Selection, clipboard and history
    # ------------------------------------------------------------------

    def select(self, object_id: str | None) -> None:
        if object_id is not None and object_id not in self:
            object_id = None
        self._selected_id = object_id

    def undo(self) -> bool:
        snapshot = self._history.undo()
        if snapshot is None:
            return False
        self._objects = snapshot
        self._selected_id = None
        logger.debug(f"Undo to history step {self._history.cursor}")
        return True

    def redo(self) -> bool:
        snapshot = self._history.redo()
        if snapshot is None:
            return False
        self._objects = snapshot
        self._selected_id = None
        logger.debug(f"Redo to history step {self._history.cursor}")
        return True

    def copy_selected(self) -> bool:
        """Copy the selected object to the clipboard."""
        obj = self.selected
        if obj is None:
            return False
        self._clipboard = obj
        return True

    def paste(self, new_id: str) -> MarkupObject | None:
        """Add a copy of the clipboard object, offset down and to the right.

        Returns:
            The pasted object, or None when the clipboard is empty
        """
        if self._clipboard is None:
            return None

        pasted = replace(self._clipboard.translated(PASTE_OFFSET, PASTE_OFFSET), id=new_id)
        self.add_and_select(pasted)
        return pasted

    def remap_pages(self, mapping: Callable[[int], int | None]) -> None:
        """Rewrite page numbers everywhere, including history.

        Objects whose page maps to None are dropped.

        Args:
            mapping: Old visible page number to new one, or None
        """

        def _remap(snapshot: Snapshot) -> Snapshot:
            result = []
            for obj in snapshot:
                new_page = mapping(obj.page)
                if new_page is None:
                    continue
                result.append(obj if new_page == obj.page else replace(obj, page=new_page))
            return tuple(result)

        self._objects = _remap(self._objects)
        self._history.remap(_remap)

        if self._clipboard is not None:
            remapped = _remap((self._clipboard,))
            self._clipboard = remapped[0] if remapped else None
        if self._selected_id is not None and self._selected_id not in self:
            self._selected_id = None
