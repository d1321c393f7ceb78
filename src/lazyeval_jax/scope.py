"""Immutable lookup chains of name -> value frames."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import FrameType, MappingProxyType
from typing import Final

from .errors import UnboundName
from .primitives import PRIMITIVES

_DEFAULT_PARENT: Final = object()


class Scope(Mapping[str, object]):
    """One frame of bindings plus the chain of frames it falls back to.

    Bindings are copied on construction and exposed read-only, so a scope
    never changes after it is built. Scopes compare and hash by identity:
    two chains with equal contents are still different places where an
    expression could have been written.

    Without an explicit ``parent`` a scope falls back to ``ROOT_SCOPE``;
    ``parent=None`` builds a detached chain.
    """

    __slots__ = ("_bindings", "_parent", "label")

    def __init__(
        self,
        data: Mapping[str, object] | None = None,
        parent: "Scope | None" = _DEFAULT_PARENT,  # type: ignore[assignment]
        *,
        label: str | None = None,
    ) -> None:
        bindings = {} if data is None else dict(data)
        for key in bindings:
            if not isinstance(key, str):
                raise TypeError(f"Scope key must be a str, not {type(key).__name__}")
        if parent is _DEFAULT_PARENT:
            parent = ROOT_SCOPE
        if parent is not None and not isinstance(parent, Scope):
            raise TypeError(f"Scope parent must be a Scope, not {type(parent).__name__}")
        self._bindings = MappingProxyType(bindings)
        self._parent = parent
        self.label = label

    @classmethod
    def from_frame(cls, frame: FrameType) -> "Scope":
        """Snapshot a Python frame as locals -> globals -> root."""
        module_scope = cls(frame.f_globals, label=f"<module {frame.f_globals.get('__name__', '?')}>")
        if frame.f_locals is frame.f_globals:
            return module_scope
        return cls(frame.f_locals, parent=module_scope, label=f"<frame {frame.f_code.co_name}>")

    @property
    def parent(self) -> "Scope | None":
        return self._parent

    @property
    def bindings(self) -> Mapping[str, object]:
        return self._bindings

    @property
    def frames(self) -> tuple[Mapping[str, object], ...]:
        """Binding frames ordered leaf to root."""
        out: list[Mapping[str, object]] = []
        current: Scope | None = self
        while current is not None:
            out.append(current._bindings)
            current = current._parent
        return tuple(out)

    def child(self, data: Mapping[str, object] | None = None, *, label: str | None = None) -> "Scope":
        return Scope(data, parent=self, label=label)

    def find_scope(self, key: str) -> "Scope | None":
        current: Scope | None = self
        while current is not None:
            if key in current._bindings:
                return current
            current = current._parent
        return None

    def lookup(self, key: str) -> object:
        owner = self.find_scope(key)
        if owner is None:
            raise UnboundName(key)
        return owner._bindings[key]

    def __getitem__(self, key: str) -> object:
        owner = self.find_scope(key) if isinstance(key, str) else None
        if owner is None:
            raise KeyError(key)
        return owner._bindings[key]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.find_scope(key) is not None

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for frame in self.frames:
            for key in frame:
                if key not in seen:
                    seen.add(key)
                    yield key

    def __len__(self) -> int:
        return sum(1 for _ in self.__iter__())

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        if self.label is not None:
            return f"<Scope {self.label}>"
        keys = ", ".join(self._bindings)
        parent = " -> root" if self._parent is ROOT_SCOPE else ""
        return f"<Scope bindings=[{keys}]{parent}>"


ROOT_SCOPE: Final[Scope] = Scope(PRIMITIVES, parent=None, label="root")
