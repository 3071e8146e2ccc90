r"""
Statement templates and parameterized statements.

A template declares its placeholders up front, so the row-to-set rewrite
used by batched strategies is a structural substitution over those names
rather than a textual find-and-replace.

    from write_bench.statements import StatementTemplate, ParameterizedStatement

    template = StatementTemplate.parse("CREATE (n:User{`~id`: $_id}) SET n.name = $name", ["_id", "name"])
    template.row_text      # "CREATE (n:User{`~id`: $_id}) SET n.name = $name"
    template.batched_text  # "UNWIND $params AS param CREATE (n:User{`~id`: param._id}) SET n.name = param.name"
"""

import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from write_bench.types import ExistenceCheck

__all__ = [
    "KEY_PARAMETER",
    "ROWS_PARAMETER",
    "ROW_VARIABLE",
    "KEYS_PARAMETER",
    "EXISTING_KEYS_FIELD",
    "StatementTemplate",
    "ParameterizedStatement",
    "existence_query",
]

KEY_PARAMETER = "_id"
ROWS_PARAMETER = "params"
ROW_VARIABLE = "param"
KEYS_PARAMETER = "_ids"
EXISTING_KEYS_FIELD = "entityIds"

_TOKEN = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True, slots=True)
class StatementTemplate:
    """Statement text split around its declared placeholders.

    Attributes:
        literals: Literal text segments; one more than ``references``.
        references: Placeholder names in order of appearance.
        placeholders: Declared placeholder names.
    """

    literals: tuple[str, ...]
    references: tuple[str, ...]
    placeholders: tuple[str, ...]

    @classmethod
    def parse(cls, text: str, placeholders: Iterable[str]) -> "StatementTemplate":
        """Split ``text`` on ``$name`` tokens whose name is declared.

        Args:
            text: Row-form statement text.
            placeholders: Declared placeholder names.

        Returns:
            Parsed template.

        Raises:
            ValueError: If a declared placeholder does not occur in the text.
        """
        declared = tuple(dict.fromkeys(placeholders))
        literals: list[str] = []
        references: list[str] = []
        cursor = 0
        for match in _TOKEN.finditer(text):
            name = match.group(1)
            if name not in declared:
                continue
            literals.append(text[cursor : match.start()])
            references.append(name)
            cursor = match.end()
        literals.append(text[cursor:])

        missing = [name for name in declared if name not in references]
        if missing:
            msg = f"Placeholders {missing} not found in statement: {text}"
            raise ValueError(msg)

        return cls(literals=tuple(literals), references=tuple(references), placeholders=declared)

    def render(self, reference: Callable[[str], str]) -> str:
        """Render the template, replacing each placeholder with ``reference(name)``."""
        pieces = [self.literals[0]]
        for name, literal in zip(self.references, self.literals[1:]):
            pieces.append(reference(name))
            pieces.append(literal)
        return "".join(pieces)

    @property
    def row_text(self) -> str:
        """Statement operating on one parameter map."""
        return self.render(lambda name: f"${name}")

    @property
    def batched_text(self) -> str:
        """Statement unwinding an array of parameter maps."""
        body = self.render(lambda name: f"{ROW_VARIABLE}.{name}")
        return f"UNWIND ${ROWS_PARAMETER} AS {ROW_VARIABLE} {body}"


@dataclass(frozen=True, slots=True)
class ParameterizedStatement:
    """A template bound to one parameter map.

    Attributes:
        template: Statement template.
        label: Label (or relationship type) of the target entity.
        parameters: Read-only parameter map; ``_id`` is the logical key.
    """

    template: StatementTemplate
    label: str
    parameters: Mapping[str, Any]

    def __post_init__(self) -> None:
        missing = [name for name in self.template.placeholders if name not in self.parameters]
        if missing:
            msg = f"Missing parameters {missing} for {self.label} statement"
            raise ValueError(msg)
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def text(self) -> str:
        """Row-form statement text."""
        return self.template.row_text

    @property
    def key(self) -> Any:
        """Logical primary key of the target object."""
        return self.parameters[KEY_PARAMETER]

    def as_dict(self) -> dict[str, Any]:
        """Plain parameter dict suitable for a driver call."""
        return dict(self.parameters)


def existence_query(label: str, check: ExistenceCheck) -> str:
    """Build the existence-check statement for ``label``.

    Membership and set-join both take ``$_ids`` and return the found keys as
    one collected list; the point lookup takes ``$_id`` and returns at most
    one row.

    Raises:
        ValueError: For ``ExistenceCheck.NONE``.
    """
    if check == ExistenceCheck.MEMBERSHIP:
        return (
            f"MATCH (n:{label}) WHERE n.`~id` IN ${KEYS_PARAMETER} "
            f"RETURN COLLECT(n.`~id`) AS {EXISTING_KEYS_FIELD}"
        )
    if check == ExistenceCheck.SET_JOIN:
        return (
            f"UNWIND ${KEYS_PARAMETER} AS _id MATCH (n:{label}) WHERE n.`~id` = _id "
            f"RETURN COLLECT(n.`~id`) AS {EXISTING_KEYS_FIELD}"
        )
    if check == ExistenceCheck.POINT_LOOKUP:
        return f"MATCH (n:{label}{{`~id`: ${KEY_PARAMETER}}}) RETURN n.`~id` AS id LIMIT 1"
    msg = f"No existence query for {check.name}"
    raise ValueError(msg)
