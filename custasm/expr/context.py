"""Evaluation context, provider queries and the default provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Union

from custasm.expr.values import Value
from custasm.util.source import AsmError, Span

PARSE_RECURSION_DEPTH_MAX = 50
EVAL_RECURSION_DEPTH_MAX = 25

ASM_HYGIENIZE_PREFIX = "__"


class EvalContext:
    """Local variables and token substitutions of one evaluation."""

    def __init__(self, recursion_depth: int = 0) -> None:
        self.locals: dict[str, Value] = {}
        self.token_substs: dict[str, str] = {}
        self.recursion_depth = recursion_depth

    def new_deepened(self) -> EvalContext:
        """Return an empty context one recursion level deeper."""
        return EvalContext(self.recursion_depth + 1)

    def check_recursion_depth_limit(self, span: Span | None = None) -> None:
        if self.recursion_depth >= EVAL_RECURSION_DEPTH_MAX:
            raise AsmError("recursion depth limit reached", span)

    def set_local(self, name: str, value: Value) -> None:
        self.locals[name] = value

    def get_local(self, name: str) -> Value | None:
        return self.locals.get(name)

    def set_token_subst(self, name: str, excerpt: str) -> None:
        self.token_substs[name] = excerpt

    def get_token_subst(self, name: str) -> str | None:
        """Return the substitution text for a name, if any.

        Locals are substituted by their hygienized name.
        """
        subst = self.token_substs.get(name)
        if subst is not None:
            return subst
        if name in self.locals:
            return EvalContext.hygienize_name_for_asm_subst(name)
        return None

    def hygienize_locals_for_asm_subst(self) -> EvalContext:
        """Return a deeper context holding this one's names, prefixed."""
        new_ctx = self.new_deepened()
        new_ctx.locals = {
            EvalContext.hygienize_name_for_asm_subst(name): value
            for name, value in self.locals.items()
            if not name.startswith(ASM_HYGIENIZE_PREFIX)
        }
        new_ctx.token_substs = {
            EvalContext.hygienize_name_for_asm_subst(name): excerpt
            for name, excerpt in self.token_substs.items()
            if not name.startswith(ASM_HYGIENIZE_PREFIX)
        }
        return new_ctx

    @staticmethod
    def hygienize_name_for_asm_subst(name: str) -> str:
        return ASM_HYGIENIZE_PREFIX + name


@dataclass
class EvalVariableQuery:
    hierarchy_level: int
    hierarchy: list[str]
    span: Span


@dataclass
class EvalFunctionQueryArgument:
    value: Value
    span: Span


@dataclass
class EvalFunctionQuery:
    func: Value
    args: list[EvalFunctionQueryArgument]
    span: Span
    eval_ctx: EvalContext = field(default_factory=EvalContext)

    def ensure_arg_number(self, expected: int) -> None:
        if len(self.args) != expected:
            plural = "" if expected == 1 else "s"
            raise AsmError(
                f"function expected {expected} argument{plural} "
                f"(but got {len(self.args)})",
                self.span,
            )

    def ensure_min_max_arg_number(self, minimum: int, maximum: int) -> None:
        if not minimum <= len(self.args) <= maximum:
            raise AsmError(
                f"function expected {minimum} to {maximum} arguments "
                f"(but got {len(self.args)})",
                self.span,
            )


@dataclass
class EvalAsmBlockQuery:
    ast: Any
    span: Span
    eval_ctx: EvalContext = field(default_factory=EvalContext)


EvalQuery = Union[EvalVariableQuery, EvalFunctionQuery, EvalAsmBlockQuery]
EvalProvider = Callable[[EvalQuery], Value]


def dummy_eval_query(query: EvalQuery) -> Value:
    """A provider that rejects every variable, function and asm block."""
    if isinstance(query, EvalVariableQuery):
        raise AsmError("cannot reference variables in this context", query.span)
    if isinstance(query, EvalFunctionQuery):
        raise AsmError("cannot reference functions in this context", query.span)
    if isinstance(query, EvalAsmBlockQuery):
        raise AsmError("cannot use `asm` blocks in this context", query.span)
    raise TypeError(f"unsupported query {query!r}")