"""Hierarchical symbol declarations and name lookup."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Sequence

from custasm.util.source import AsmError, Span


class SymbolKind(Enum):
    CONSTANT = auto()
    LABEL = auto()
    FUNCTION = auto()
    OTHER = auto()


@dataclass(frozen=True)
class SymbolContext:
    """The chain of enclosing symbol names at some point in the source."""

    hierarchy: tuple[str, ...] = ()

    @classmethod
    def new_global(cls) -> SymbolContext:
        return cls(())


@dataclass
class SymbolDecl:
    """A declared symbol; ``item_ref`` is its index in the manager."""

    span: Span
    name: str
    kind: SymbolKind
    depth: int
    ctx: SymbolContext
    item_ref: int
    children: dict[str, int] = field(default_factory=dict)


class SymbolManager:
    """Declares symbols in nested scopes and resolves names to item refs."""

    def __init__(self, report_as: str) -> None:
        self.report_as = report_as
        self.decls: list[SymbolDecl] = []
        self.globals: dict[str, int] = {}
        self.span_refs: dict[Span, int] = {}

    def _children(self, parent_ref: int | None) -> dict[str, int]:
        if parent_ref is None:
            return self.globals
        return self.decls[parent_ref].children

    def _traverse(self, parent_ref: int | None, hierarchy: Sequence[str]) -> int | None:
        if not hierarchy:
            return None
        current = parent_ref
        for name in hierarchy:
            current = self._children(current).get(name)
            if current is None:
                return None
        return current

    def _get_parent(self, parent_ref: int | None, hierarchy: Sequence[str]) -> int | None:
        current = parent_ref
        for name in hierarchy:
            current = self._children(current).get(name)
            if current is None:
                return None
        return current

    def get(self, item_ref: int) -> SymbolDecl:
        return self.decls[item_ref]

    def get_by_name_global(self, name: str, span: Span | None = None) -> int:
        return self.get_by_name(SymbolContext.new_global(), 0, [name], span)

    def try_get_by_name(
        self,
        ctx: SymbolContext,
        hierarchy_level: int,
        hierarchy: Sequence[str],
    ) -> int | None:
        """Resolve a name relative to ``hierarchy_level`` enclosing scopes."""
        if hierarchy_level > len(ctx.hierarchy):
            return None
        parent = self._get_parent(None, ctx.hierarchy[:hierarchy_level])
        return self._traverse(parent, hierarchy)

    def get_by_name(
        self,
        ctx: SymbolContext,
        hierarchy_level: int,
        hierarchy: Sequence[str],
        span: Span | None = None,
    ) -> int:
        """Resolve a name, raising :class:`AsmError` if it is unknown."""
        found = self.try_get_by_name(ctx, hierarchy_level, hierarchy)
        if found is None:
            raise AsmError(
                f"unknown {self.report_as} "
                f"`{self.get_displayable_name(hierarchy_level, hierarchy)}`",
                span,
            )
        return found

    def get_displayable_name(self, hierarchy_level: int, hierarchy: Sequence[str]) -> str:
        return "." * hierarchy_level + ".".join(hierarchy)

    def generate_anonymous_name(self) -> str:
        return f"#anonymous_{self.report_as}_{len(self.decls)}"

    def declare(
        self,
        ctx: SymbolContext,
        name: str,
        hierarchy_level: int,
        kind: SymbolKind,
        span: Span,
    ) -> int:
        """Declare a symbol under the scope ``hierarchy_level`` deep in ``ctx``."""
        if hierarchy_level > len(ctx.hierarchy):
            raise AsmError("symbol declaration skips a nesting level", span)

        parent_ref = self._get_parent(None, ctx.hierarchy[:hierarchy_level])
        children = self._children(parent_ref)

        duplicate_ref = children.get(name)
        if duplicate_ref is not None:
            raise AsmError(
                f"duplicate {self.report_as} `{name}`",
                span,
                [("first declared here", self.decls[duplicate_ref].span)],
            )

        item_ref = len(self.decls)
        children[name] = item_ref

        new_ctx = SymbolContext(tuple(ctx.hierarchy[:hierarchy_level]) + (name,))
        if parent_ref is None:
            full_name = name
        else:
            full_name = f"{self.decls[parent_ref].name}.{name}"

        self.decls.append(
            SymbolDecl(
                span=span,
                name=full_name,
                kind=kind,
                depth=hierarchy_level,
                ctx=new_ctx,
                item_ref=item_ref,
            )
        )
        self.span_refs[span] = item_ref
        return item_ref

    def add_span_ref(self, span: Span, item_ref: int) -> None:
        self.span_refs[span] = item_ref