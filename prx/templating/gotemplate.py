"""Translator from the ``{{.Name}}`` action dialect to Jinja2 source.

Branch and pull request templates are written with Go-style actions, the
same placeholder syntax the branch pattern uses::

    {{.Type}}{{with .Issue}}({{.}}){{end}}: {{humanize .Description}}

This module compiles that dialect to an equivalent Jinja2 template, which
``prx.templating.renderer`` then renders. Supported actions:

- ``{{.Field}}``, ``{{.}}``, ``{{$.Field}}``, ``{{$var}}``, literals
- function calls ``{{humanize .Description}}`` and pipelines ``{{.X | lower}}``
- ``if`` / ``else if`` / ``else`` / ``end``, ``with``, ``range`` (with optional
  ``$v :=`` or ``$i, $v :=`` declarations), ``$x := ...`` assignments
- trim markers ``{{- `` / `` -}}`` and ``{{/* comments */}}``
"""

import re
from dataclasses import dataclass
from typing import Optional

from prx.exceptions import TemplateError
from prx.templating.functions import OPERATOR_FUNCTION_NAMES, TEMPLATE_FUNCTION_NAMES

# Name of the Jinja2 global used by two-variable range loops
RANGE_PAIRS_FUNCTION = "_range_pairs"

# Top-level fields are rendered under prefixed names so they never collide
# with template functions or names Jinja2 reserves (loop, self, if)
FIELD_PREFIX = "f_"

_ACTION = re.compile(r"\{\{(?P<ltrim>-\s)?(?P<body>.*?)(?P<rtrim>\s-)?\}\}", re.DOTALL)

_TOKEN = re.compile(
    r"""
    (?P<space>\s+)
  | (?P<string>"(?:\\.|[^"\\])*")
  | (?P<raw>`[^`]*`)
  | (?P<number>-?\d+(?:\.\d+)?)
  | (?P<declare>:=)
  | (?P<assign>=)
  | (?P<comma>,)
  | (?P<pipe>\|)
  | (?P<lparen>\()
  | (?P<rparen>\))
  | (?P<field>(?:\.[A-Za-z_]\w*)+)
  | (?P<dot>\.)
  | (?P<variable>\$(?:[A-Za-z_]\w*)?(?:\.[A-Za-z_]\w*)*)
  | (?P<ident>[A-Za-z_]\w*)
    """,
    re.VERBOSE,
)

_LITERAL_IDENTS = {"true": "true", "false": "false", "nil": "none"}
_UNSUPPORTED_ACTIONS = {"define", "template", "block", "break", "continue"}
_JINJA_DELIMITERS = ("{{", "{%", "{#", "}}", "%}", "#}")
_WHITESPACE = " \t\r\n"


@dataclass
class _Token:
    kind: str
    text: str


@dataclass
class _Action:
    body: str
    ltrim: bool
    rtrim: bool


@dataclass
class _Block:
    kind: str
    outer_dot: Optional[str]


def _split(source: str) -> list:
    """Split a template into literal strings and actions, applying trim markers."""
    segments: list = []
    position = 0

    for match in _ACTION.finditer(source):
        segments.append(source[position:match.start()])
        segments.append(_Action(
            body=match.group("body").strip(),
            ltrim=match.group("ltrim") is not None,
            rtrim=match.group("rtrim") is not None,
        ))
        position = match.end()
    segments.append(source[position:])

    # Trim markers eat all whitespace on their side of the action
    for i, segment in enumerate(segments):
        if not isinstance(segment, _Action):
            continue
        if segment.ltrim:
            segments[i - 1] = segments[i - 1].rstrip(_WHITESPACE)
        if segment.rtrim:
            segments[i + 1] = segments[i + 1].lstrip(_WHITESPACE)

    return segments


def _tokenize(body: str, source: str) -> list[_Token]:
    tokens = []
    position = 0
    while position < len(body):
        match = _TOKEN.match(body, position)
        if match is None:
            raise TemplateError(
                f"Unexpected character {body[position]!r} in action '{{{{{body}}}}}'",
                template=source,
            )
        if match.lastgroup != "space":
            tokens.append(_Token(match.lastgroup, match.group()))
        position = match.end()
    return tokens


def _variable_name(name: str) -> str:
    """Map a template variable ($commit) to a Jinja2 name."""
    return f"v_{name}"


def field_name(name: str) -> str:
    """Map a top-level field (.Issue) to the Jinja2 name it is rendered under."""
    return FIELD_PREFIX + name


class _Translator:
    """Single-use translator for one template source."""

    def __init__(self, source: str):
        self.source = source
        self.blocks: list[_Block] = []
        self.dot: Optional[str] = None
        self.counter = 0

    def error(self, message: str) -> TemplateError:
        return TemplateError(f"Invalid template: {message}", template=self.source)

    def translate(self) -> str:
        parts = []
        for segment in _split(self.source):
            if isinstance(segment, _Action):
                parts.append(self.action(segment.body))
            elif segment:
                parts.append(self.literal(segment))

        if self.blocks:
            raise self.error(f"unexpected end of template, unclosed '{self.blocks[-1].kind}'")
        return "".join(parts)

    @staticmethod
    def literal(text: str) -> str:
        if any(delimiter in text for delimiter in _JINJA_DELIMITERS):
            return "{% raw %}" + text + "{% endraw %}"
        return text

    def action(self, body: str) -> str:
        if body.startswith("/*"):
            if not body.endswith("*/"):
                raise self.error(f"unclosed comment '{{{{{body}}}}}'")
            return ""

        tokens = _tokenize(body, self.source)
        if not tokens:
            raise self.error("missing value for command")

        head = tokens[0]
        if head.kind == "ident":
            if head.text == "if":
                return self.open_if(tokens[1:])
            if head.text == "else":
                return self.else_branch(tokens[1:])
            if head.text == "with":
                return self.open_with(tokens[1:])
            if head.text == "range":
                return self.open_range(tokens[1:])
            if head.text == "end":
                return self.close_block(tokens[1:])
            if head.text in _UNSUPPORTED_ACTIONS:
                raise self.error(f"'{head.text}' actions are not supported")

        if head.kind == "variable" and len(tokens) > 1 and tokens[1].kind in ("declare", "assign"):
            name = self.declared_name(head)
            return "{% set " + name + " = " + self.pipeline(tokens[2:]) + " %}"

        return "{{ " + self.pipeline(tokens) + " }}"

    # Blocks

    def open_if(self, tokens: list[_Token]) -> str:
        condition = self.pipeline(tokens)
        self.blocks.append(_Block("if", self.dot))
        return "{% if " + condition + " %}"

    def else_branch(self, tokens: list[_Token]) -> str:
        if not self.blocks:
            raise self.error("unexpected 'else' outside of a block")
        block = self.blocks[-1]

        if tokens:
            if tokens[0].kind != "ident" or tokens[0].text != "if" or block.kind != "if":
                raise self.error("'else' may only be followed by 'if' inside an 'if' block")
            return "{% elif " + self.pipeline(tokens[1:]) + " %}"

        # Dot is restored to the enclosing value in with/range else branches
        self.dot = block.outer_dot
        return "{% else %}"

    def open_with(self, tokens: list[_Token]) -> str:
        declared = self.split_declaration(tokens)
        if declared is not None:
            names, tokens = declared
            if len(names) != 1:
                raise self.error("'with' declares exactly one variable")
            name = names[0]
        else:
            self.counter += 1
            name = f"_dot{self.counter}"

        value = self.pipeline(tokens)
        self.blocks.append(_Block("with", self.dot))
        self.dot = name
        return "{% with " + name + " = " + value + " %}{% if " + name + " %}"

    def open_range(self, tokens: list[_Token]) -> str:
        declared = self.split_declaration(tokens)
        if declared is not None:
            names, tokens = declared
        else:
            self.counter += 1
            names = [f"_dot{self.counter}"]

        iterable = self.pipeline(tokens)
        if len(names) == 1:
            loop = "{% for " + names[0] + " in " + iterable + " %}"
        elif len(names) == 2:
            loop = (
                "{% for " + names[0] + ", " + names[1] + " in "
                + RANGE_PAIRS_FUNCTION + "(" + iterable + ") %}"
            )
        else:
            raise self.error("'range' declares at most two variables")

        self.blocks.append(_Block("range", self.dot))
        self.dot = names[-1]
        return loop

    def close_block(self, tokens: list[_Token]) -> str:
        if tokens:
            raise self.error("unexpected arguments to 'end'")
        if not self.blocks:
            raise self.error("unexpected 'end'")

        block = self.blocks.pop()
        self.dot = block.outer_dot
        if block.kind == "if":
            return "{% endif %}"
        if block.kind == "with":
            return "{% endif %}{% endwith %}"
        return "{% endfor %}"

    def split_declaration(self, tokens: list[_Token]) -> Optional[tuple[list[str], list[_Token]]]:
        """Split "$i, $v := pipeline" into variable names and the pipeline tokens."""
        for i, token in enumerate(tokens):
            if token.kind == "declare":
                break
        else:
            return None

        names = []
        for token in tokens[:i]:
            if token.kind == "comma":
                continue
            if token.kind != "variable":
                raise self.error(f"unexpected {token.text!r} in declaration")
            names.append(self.declared_name(token))
        return names, tokens[i + 1:]

    def declared_name(self, token: _Token) -> str:
        name = token.text[1:]
        if not name or "." in name:
            raise self.error(f"invalid variable name {token.text!r}")
        return _variable_name(name)

    # Expressions

    def pipeline(self, tokens: list[_Token]) -> str:
        if not tokens:
            raise self.error("missing value for command")

        commands: list[list[_Token]] = [[]]
        depth = 0
        for token in tokens:
            if token.kind == "lparen":
                depth += 1
            elif token.kind == "rparen":
                depth -= 1
            if token.kind == "pipe" and depth == 0:
                commands.append([])
            else:
                commands[-1].append(token)

        expression = self.command(commands[0], piped=None)
        for command in commands[1:]:
            expression = self.command(command, piped=expression)
        return expression

    def command(self, tokens: list[_Token], piped: Optional[str]) -> str:
        if not tokens:
            raise self.error("missing command in pipeline")

        head = tokens[0]
        if head.kind == "ident" and head.text not in _LITERAL_IDENTS:
            args = self.operands(tokens[1:])
            if piped is not None:
                args.append(piped)
            return self.call(head.text, args)

        if piped is not None:
            raise self.error(f"non-function {head.text!r} in pipeline")

        operands = self.operands(tokens)
        if len(operands) != 1:
            raise self.error(f"can't give argument to non-function {head.text!r}")
        return operands[0]

    def call(self, name: str, args: list[str]) -> str:
        if name not in TEMPLATE_FUNCTION_NAMES:
            raise self.error(f"function {name!r} not defined")

        if name in OPERATOR_FUNCTION_NAMES:
            if name == "not":
                if len(args) != 1:
                    raise self.error("'not' takes exactly one argument")
                return f"(not {args[0]})"
            if not args:
                raise self.error(f"{name!r} needs at least one argument")
            return "(" + f" {name} ".join(args) + ")"

        return f"{name}({', '.join(args)})"

    def operands(self, tokens: list[_Token]) -> list[str]:
        operands = []
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token.kind == "lparen":
                depth = 1
                j = i + 1
                while j < len(tokens) and depth:
                    if tokens[j].kind == "lparen":
                        depth += 1
                    elif tokens[j].kind == "rparen":
                        depth -= 1
                    j += 1
                if depth:
                    raise self.error("unclosed '('")
                operands.append("(" + self.pipeline(tokens[i + 1:j - 1]) + ")")
                i = j
                continue
            operands.append(self.operand(token))
            i += 1
        return operands

    def operand(self, token: _Token) -> str:
        if token.kind == "field":
            path = token.text[1:]
            if self.dot is None:
                return field_name(path)
            return f"{self.dot}.{path}"

        if token.kind == "dot":
            if self.dot is None:
                raise self.error("'.' can only be used inside 'with' or 'range'")
            return self.dot

        if token.kind == "variable":
            name, _, path = token.text[1:].partition(".")
            if not name:
                # "$" is the root: "$.Issue" is the top-level Issue field
                if not path:
                    raise self.error("'$' must be followed by a field")
                return field_name(path)
            return _variable_name(name) + (f".{path}" if path else "")

        if token.kind in ("string", "number"):
            return token.text

        if token.kind == "raw":
            return repr(token.text[1:-1])

        if token.kind == "ident":
            if token.text in _LITERAL_IDENTS:
                return _LITERAL_IDENTS[token.text]
            return self.call(token.text, [])

        raise self.error(f"unexpected {token.text!r}")


def translate(source: str) -> str:
    """Translate a ``{{.Name}}`` dialect template to Jinja2 source.

    Args:
        source: The template source.

    Returns:
        Jinja2 template source.

    Raises:
        TemplateError: If the template is malformed or uses unsupported actions.
    """
    return _Translator(source).translate()
