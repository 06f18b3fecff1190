"""Pull request body templates.

A template marks replaceable regions with HTML comments::

    <!-- summary_START -->
    placeholder text
    <!-- summary_END -->

``build_body_from_template`` replaces each region whose name is a key of
the template variables; the markers are kept around the new value so the
same body can be merged again on a later run.
"""

import logging
from pathlib import Path
from typing import Iterable, Mapping, Tuple, Union

LOG = logging.getLogger("upsert_pr.template")

TemplateVars = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


class TemplateFileError(Exception):
    """Raised when an explicitly configured template file cannot be read."""

    pass


def region_markers(name: str) -> tuple[str, str]:
    """Return the (start, end) markers of the region called name."""
    return f"<!-- {name}_START -->", f"<!-- {name}_END -->"


def _items(template_vars: TemplateVars) -> Iterable[Tuple[str, str]]:
    if isinstance(template_vars, Mapping):
        return template_vars.items()
    return template_vars


def build_body_from_template(
    template: str,
    template_vars: TemplateVars,
    log: logging.Logger | None = None,
) -> str:
    """Replace marked regions in template with the given values.

    Variables are applied in iteration order, each against the result of
    the previous one. A variable whose start or end marker is missing (or
    whose end marker only occurs before the start marker) is skipped with a
    warning.

    Args:
        template: Body text containing marked regions.
        template_vars: Mapping or ordered (name, value) pairs.
        log: Logger for skipped variables.

    Returns:
        Merged body.
    """
    logger = log or LOG
    body = template

    for name, value in _items(template_vars):
        start_tag, end_tag = region_markers(name)

        start = body.find(start_tag)
        if start == -1:
            logger.warning("Template did not include %s, no spot for the value given in template vars", start_tag)
            continue
        end = body.find(end_tag, start + len(start_tag))
        if end == -1:
            if end_tag in body:
                logger.warning("Template has %s before %s, skipping %s", end_tag, start_tag, name)
            else:
                logger.warning("Template did not include %s, no spot for the value given in template vars", end_tag)
            continue

        if not value.startswith(start_tag):
            value = f"{start_tag}\n{value}"
        if not value.endswith(end_tag):
            value = f"{value}\n{end_tag}"

        body = body[:start] + value + body[end + len(end_tag) :]

    return body


def read_template_file(path: str, required: bool = False, log: logging.Logger | None = None) -> str:
    """Read a body template from the working tree.

    When the path is the conventional default, a missing or unreadable
    file means the repository has no PR template and yields an empty body.
    A path configured on purpose is required: failing to read it raises
    TemplateFileError.
    """
    logger = log or LOG
    try:
        return Path(path).read_text()
    except OSError as e:
        if not required:
            logger.debug("No PR template at %s: %s", path, e)
            return ""
        raise TemplateFileError(f"Error reading the given create_pr_template_file {path}") from e
