"""Structured error types for capture, coercion, evaluation and interpolation."""

from __future__ import annotations


class LazyEvalError(Exception):
    """Base class for structured lazyeval-jax errors."""


class CoercionError(LazyEvalError):
    """Input could not be normalized into a lazy value."""

    def __init__(self, description: str, message: str | None = None) -> None:
        detail = message if message is not None else f"Cannot coerce {description} to a lazy value"
        super().__init__(detail)
        self.description = description
        self.message = detail

    def __str__(self) -> str:
        return self.message


class SourceParseError(CoercionError):
    """Source text handed to coercion failed to parse."""

    def __init__(
        self,
        source: str,
        message: str,
        start: int,
        end: int,
        expected: tuple[str, ...] = (),
        found: str | None = None,
    ) -> None:
        # Positional args so pickling rebuilds the same error.
        LazyEvalError.__init__(self, source, message, start, end, expected, found)
        self.source = source
        self.message = message
        self.start = start
        self.end = end
        self.expected = tuple(expected)
        self.found = found

    @classmethod
    def from_syntax_error(cls, source: str, err: SyntaxError) -> "SourceParseError":
        start = getattr(err, "start", None)
        end = getattr(err, "end", None)
        if not isinstance(start, int):
            start = 0
            end = len(source)
        return cls(
            source=source,
            message=getattr(err, "message", None) or str(err),
            start=start,
            end=end if isinstance(end, int) else start,
            expected=tuple(getattr(err, "expected", ()) or ()),
            found=getattr(err, "found", None),
        )

    @property
    def description(self) -> str:
        return f"source text {self.source!r}"

    def __str__(self) -> str:
        expected = ""
        if self.expected:
            expected = f"; expected {', '.join(self.expected)}"
        found = ""
        if self.found is not None:
            found = f"; found {self.found}"
        return f"{self.message} at span [{self.start}, {self.end}) in {self.source!r}{expected}{found}"


class EvalError(LazyEvalError):
    """Generic evaluation failure after successful capture/coercion."""


class UnboundName(EvalError):
    """A free name resolved in neither the overrides nor the scope chain."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unbound name {name!r}")
        self.name = name


class ApplyError(EvalError):
    """The host evaluator rejected a call."""

    def __init__(self, operator: str, message: str, *, category: str = "value") -> None:
        super().__init__(f"Cannot apply {operator!r}: {message}")
        self.operator = operator
        self.category = category
        self.message = message


class InterpolationError(LazyEvalError):
    """A substitution value cannot be converted into an expression node."""

    def __init__(self, name: str, value: object, message: str | None = None) -> None:
        detail = message if message is not None else f"unsupported literal of type {type(value).__name__}"
        super().__init__(f"Cannot interpolate {name!r}: {detail}")
        self.name = name
        self.value = value


def classify_host_exception(operator: str, err: Exception) -> ApplyError:
    """Best-effort classification of an exception raised by a host callable."""
    message = str(err) or type(err).__name__
    lowered = message.lower()

    if isinstance(err, ArithmeticError):
        return ApplyError(operator, message, category="arithmetic")

    arity_markers = (
        "positional argument",
        "takes",
        "missing",
        "arguments",
        "argument count",
    )
    if isinstance(err, TypeError) and any(marker in lowered for marker in arity_markers):
        return ApplyError(operator, message, category="arity")

    type_markers = (
        "type",
        "unsupported operand",
        "not callable",
        "must be",
        "requires ndarray",
    )
    if isinstance(err, TypeError) or any(marker in lowered for marker in type_markers):
        return ApplyError(operator, message, category="type")

    return ApplyError(operator, message, category="value")
