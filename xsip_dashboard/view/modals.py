"""Open/closed state of the dashboard dialogs."""

from __future__ import annotations

from collections.abc import Iterable

from xsip_dashboard.core.exceptions import UnknownModalError
from xsip_dashboard.view.dom import Document

OPEN_CLASS = "open"

ADD_SUBSCRIBER = "add-sub"
EDIT_BALANCE = "edit-bal"


def modal_element_id(name: str) -> str:
    return f"modal-{name}"


class ModalController:
    """Keyed open flags for named dialogs, mirrored onto their overlays.

    Nothing stops two dialogs being open together.
    """

    def __init__(self, document: Document, names: Iterable[str] | None = None) -> None:
        self._document = document
        if names is None:
            names = [
                element.attrs["data-modal"]
                for element in document.query_class("overlay")
                if "data-modal" in element.attrs
            ]
        self._state: dict[str, bool] = {name: False for name in names}

    @property
    def names(self) -> list[str]:
        return list(self._state)

    def _check(self, name: str) -> None:
        if name not in self._state:
            raise UnknownModalError(name, available=self.names)

    def is_open(self, name: str) -> bool:
        self._check(name)
        return self._state[name]

    def open_modals(self) -> list[str]:
        return [name for name, is_open in self._state.items() if is_open]

    def open(self, name: str) -> None:
        self._set(name, True)

    def close(self, name: str) -> None:
        self._set(name, False)

    def close_all(self) -> None:
        for name in self._state:
            self.close(name)

    def backdrop_click(self, name: str, target_id: str | None) -> bool:
        """Handle a click inside an overlay.

        Only a click whose target is the dimmed backdrop itself closes the
        dialog; clicks on the dialog content are ignored. Returns whether
        the dialog was closed.
        """
        self._check(name)
        if target_id != modal_element_id(name):
            return False
        self.close(name)
        return True

    def _set(self, name: str, is_open: bool) -> None:
        self._check(name)
        self._state[name] = is_open
        element = self._document.get(modal_element_id(name))
        if element is None:
            return
        if is_open:
            element.add_class(OPEN_CLASS)
        else:
            element.remove_class(OPEN_CLASS)
