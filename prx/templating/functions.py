"""Functions available inside branch and pull request templates.

Contains:
- go_text: Convert a template value to text the way Go templates print it
- build_template_functions: Build the function table for a set of token separators
- TEMPLATE_FUNCTION_NAMES: Names the template translator accepts as functions
"""

import json
import re
from typing import Any, Callable, Iterable

# One printf verb: flags, width, precision and the verb character
_PRINTF_VERB = re.compile(r"%(?P<spec>[-+# 0]*\d*(?:\.\d+)?)(?P<verb>[a-zA-Z%])")
_NUMERIC_VERBS = frozenset("dxXoeEfFgGc")


def go_text(value: Any) -> str:
    """Convert a template value to text.

    Lists print as ``[a b]`` and booleans as ``true``/``false``. Everything
    else goes through ``str``, so a strict undefined from the renderer raises
    its missing-key error and a lenient one becomes "".
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(go_text(item) for item in value) + "]"
    return str(value)


def _sprint(args: tuple) -> str:
    # Spaces go between operands when neither is a string
    parts = []
    for i, arg in enumerate(args):
        if i and not isinstance(arg, str) and not isinstance(args[i - 1], str):
            parts.append(" ")
        parts.append(go_text(arg))
    return "".join(parts)


def _sprintf(format_string: str, args: tuple) -> str:
    remaining = list(args)

    def format_verb(match: re.Match) -> str:
        spec, verb = match.group("spec"), match.group("verb")
        if verb == "%":
            return "%"
        if not remaining:
            return f"%!{verb}(MISSING)"

        value = remaining.pop(0)
        if verb in ("v", "s"):
            return f"%{spec}s" % go_text(value)
        if verb == "q":
            return f"%{spec}s" % json.dumps(go_text(value))
        if verb == "t":
            return f"%{spec}s" % go_text(bool(value))
        if verb in _NUMERIC_VERBS:
            return f"%{spec}{verb}" % (value,)
        raise ValueError(f"printf: unsupported verb '%{verb}'")

    result = _PRINTF_VERB.sub(format_verb, str(format_string))
    if remaining:
        result += "%!(EXTRA " + ", ".join(go_text(value) for value in remaining) + ")"
    return result


def _compile_token_matcher(token_separators: Iterable[str]) -> re.Pattern:
    separators = "".join(re.escape(sep) for sep in token_separators)
    if not separators:
        # Matches nothing
        return re.compile(r"(?!)")
    return re.compile(f"[{separators}]")


def build_template_functions(token_separators: Iterable[str]) -> dict[str, Callable]:
    """Build the template function table.

    Args:
        token_separators: Characters treated as word separators by ``humanize``.

    Returns:
        Mapping of function name -> callable.
    """
    token_matcher = _compile_token_matcher(token_separators)

    def humanize(text: Any) -> str:
        """Replace every token separator with a space ("add-foo" -> "add foo")."""
        return token_matcher.sub(" ", go_text(text))

    def title(text: Any) -> str:
        return go_text(text).title()

    def lower(text: Any) -> str:
        return go_text(text).lower()

    def upper(text: Any) -> str:
        return go_text(text).upper()

    def eq(arg: Any, *others: Any) -> bool:
        # Like Go templates, true if arg equals any of the others
        return any(arg == other for other in others)

    def ne(left: Any, right: Any) -> bool:
        return left != right

    def lt(left: Any, right: Any) -> bool:
        return left < right

    def le(left: Any, right: Any) -> bool:
        return left <= right

    def gt(left: Any, right: Any) -> bool:
        return left > right

    def ge(left: Any, right: Any) -> bool:
        return left >= right

    def length(value: Any) -> int:
        return len(value)

    def index(value: Any, *keys: Any) -> Any:
        for key in keys:
            value = value[key]
        return value

    def slice_(value: Any, *indices: int) -> Any:
        """``slice x 1 2`` is x[1:2], ``slice x 1`` is x[1:]."""
        if len(indices) > 2:
            raise ValueError("slice: at most two indices are supported")
        if not indices:
            return value
        start = indices[0]
        end = indices[1] if len(indices) == 2 else len(value)
        if not 0 <= start <= end <= len(value):
            raise IndexError(f"slice: index out of range [{start}:{end}] with length {len(value)}")
        return value[start:end]

    def print_(*args: Any) -> str:
        return _sprint(args)

    def printf(format_string: Any, *args: Any) -> str:
        return _sprintf(format_string, args)

    def println(*args: Any) -> str:
        return " ".join(go_text(arg) for arg in args) + "\n"

    return {
        "humanize": humanize,
        "title": title,
        "lower": lower,
        "upper": upper,
        "eq": eq,
        "ne": ne,
        "lt": lt,
        "le": le,
        "gt": gt,
        "ge": ge,
        "len": length,
        "index": index,
        "slice": slice_,
        "print": print_,
        "printf": printf,
        "println": println,
    }


# "not", "and" and "or" are translated to Jinja2 operators instead of calls
OPERATOR_FUNCTION_NAMES = frozenset({"not", "and", "or"})

TEMPLATE_FUNCTION_NAMES = frozenset(build_template_functions([]).keys()) | OPERATOR_FUNCTION_NAMES
