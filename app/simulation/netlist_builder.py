"""
simulation/netlist_builder.py

Fills a netlist template with encoded component values.

Placeholders are written as {NAME} and matched case-insensitively as whole
tokens, so {r1} takes the value for 'R1' and {R1} never matches inside
{R10}. Any placeholder left without a value is an error: submitting it
would hand the engine invalid syntax.
"""

import logging
import re
import textwrap
from typing import Mapping

from .errors import UnresolvedPlaceholder

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}")

# Default circuit: source V1, inductor L1, probe nodes 2 and 4.
# AC 1 makes the AC response read directly as a transfer function.
DEFAULT_TEMPLATE = """
    * DroidSpice RLC network
    V1 1 0 DC {VS} AC 1 PULSE(0 {VS} 0 1n 1n 1 1)
    R1 1 2 {R1}
    C1 2 0 {C1}
    L1 2 3 {L1}
    R2 3 4 {R2}
    R3 4 0 {R3}
    .end
"""


def normalize_template(template: str) -> str:
    """Dedent, strip trailing whitespace per line and drop outer blank lines."""
    lines = [line.rstrip() for line in textwrap.dedent(template).splitlines()]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def placeholders(template: str) -> list[str]:
    """Return the placeholder names used by a template, upper-cased, in order."""
    seen = []
    for match in PLACEHOLDER_PATTERN.finditer(template):
        name = match.group(1).upper()
        if name not in seen:
            seen.append(name)
    return seen


class NetlistBuilder:
    """Builds submittable netlists from one template."""

    def __init__(self, template: str = DEFAULT_TEMPLATE):
        self.template = normalize_template(template)

    @property
    def placeholders(self) -> list[str]:
        return placeholders(self.template)

    def build(self, values: Mapping[str, str]) -> str:
        """
        Substitute every placeholder with its literal.

        Args:
            values: placeholder name -> encoded literal. Names are matched
                case-insensitively; extra names are ignored.

        Returns:
            The netlist text.

        Raises:
            UnresolvedPlaceholder: if any placeholder has no value.
        """
        lookup = {name.strip().upper(): str(literal) for name, literal in values.items()}

        missing = [name for name in self.placeholders if name not in lookup]
        if missing:
            raise UnresolvedPlaceholder(missing)

        unused = sorted(set(lookup) - set(self.placeholders))
        if unused:
            logger.debug("Values with no matching placeholder: %s", ", ".join(unused))

        # Single pass: a substituted literal is never scanned again
        return PLACEHOLDER_PATTERN.sub(lambda m: lookup[m.group(1).upper()], self.template)


def build(template: str, values: Mapping[str, str]) -> str:
    """Build a netlist from a template and a mapping of literals."""
    return NetlistBuilder(template).build(values)
