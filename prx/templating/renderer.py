"""Template rendering on top of Jinja2.

Contains:
- TemplateRenderer: Renders ``{{.Name}}`` dialect templates with the function library
- missing_key_from_error: Extract the missing key from a strict-mode error
"""

import logging
import re
from typing import Any, Iterable, Mapping, Optional

import jinja2

from prx.exceptions import MissingFieldError, TemplateError
from prx.templating.functions import build_template_functions, go_text
from prx.templating.gotemplate import FIELD_PREFIX, RANGE_PAIRS_FUNCTION, field_name, translate

logger = logging.getLogger(__name__)

# Message of jinja2.StrictUndefined for a missing top-level name
_UNDEFINED_NAME = re.compile(r"^'(?P<key>[^']+)' is undefined$")


def missing_key_from_error(error: jinja2.UndefinedError) -> Optional[str]:
    """Return the missing field named by an undefined error, or None if unrecognized."""
    match = _UNDEFINED_NAME.match(str(error))
    if match is None or not match.group("key").startswith(FIELD_PREFIX):
        return None
    return match.group("key")[len(FIELD_PREFIX):]


def _finalize(value: Any) -> Any:
    """Print lists and booleans the way Go templates do."""
    if isinstance(value, (bool, list, tuple)):
        return go_text(value)
    return value


def _range_pairs(value: Any) -> list:
    """Pairs for "range $i, $v := ..." loops: (key, value) for mappings, (index, item) otherwise."""
    if isinstance(value, Mapping):
        return list(value.items())
    return list(enumerate(value))


class TemplateRenderer:
    """Renders templates against a field map.

    Strict rendering fails with MissingFieldError on the first field the
    template needs but the data lacks. Lenient rendering renders missing
    fields as empty values.
    """

    def __init__(self, token_separators: Iterable[str]):
        functions = build_template_functions(token_separators)
        functions[RANGE_PAIRS_FUNCTION] = _range_pairs

        self._environments = {}
        for strict, undefined in ((True, jinja2.StrictUndefined), (False, jinja2.ChainableUndefined)):
            env = jinja2.Environment(
                undefined=undefined,
                keep_trailing_newline=True,
                autoescape=False,
                finalize=_finalize,
            )
            # Templates only see the function table and their own fields
            env.globals.clear()
            env.globals.update(functions)
            self._environments[strict] = env

    def compile(self, source: str, strict: bool = False, name: str = "template") -> jinja2.Template:
        """Compile a template source.

        Raises:
            TemplateError: If the template is malformed.
        """
        jinja_source = translate(source)
        try:
            return self._environments[strict].from_string(jinja_source)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(f"Failed to parse {name}: {e.message}", template=source) from e

    def render(
        self,
        source: str,
        data: Mapping[str, Any],
        strict: bool = False,
        name: str = "template",
    ) -> str:
        """Render a template.

        Args:
            source: Template source in the ``{{.Name}}`` dialect.
            data: Field map the template is rendered against.
            strict: Fail on missing fields instead of rendering them empty.
            name: Human-readable template name for error messages.

        Returns:
            The rendered text.

        Raises:
            MissingFieldError: In strict mode, if a referenced field is absent.
            TemplateError: If the template is malformed or fails while rendering.
        """
        template = self.compile(source, strict=strict, name=name)

        try:
            rendered = template.render({field_name(key): value for key, value in data.items()})
        except jinja2.UndefinedError as e:
            key = missing_key_from_error(e) if strict else None
            if key is None:
                raise TemplateError(f"Failed to render {name}: {e}", template=source) from e
            raise MissingFieldError(key, template=source) from e
        except jinja2.TemplateError as e:
            raise TemplateError(f"Failed to render {name}: {e}", template=source) from e
        except (TypeError, ValueError, KeyError, IndexError) as e:
            # Raised by template functions called with unusable arguments
            raise TemplateError(f"Failed to render {name}: {e}", template=source) from e

        logger.debug("Rendered %s:\n%s", name, rendered)
        return rendered
