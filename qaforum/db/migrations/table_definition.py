"""
Static table declarations.

A TableDefinition describes the shape one entity's table should have. It is
built once at import time and shared read-only by the synchronizer. Nothing
here validates the SQL fragments; a bad type string or constraint only fails
when the synchronizer executes it.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


@dataclass(frozen=True)
class TableDefinition:
    """
    Declared shape of one table.

    Attributes:
        name: Table name, compared case-insensitively against the catalog
        columns: Ordered column name -> column definition
            (e.g. ``"userName": "VARCHAR(255) NOT NULL UNIQUE"``)
        constraints: Inline clauses appended after the columns on CREATE,
            e.g. ``"FOREIGN KEY (userID) REFERENCES Users (userID)"``
        sequences: Sequences that column defaults draw identity values from
    """

    name: str
    columns: Mapping[str, str]
    constraints: Tuple[str, ...] = ()
    sequences: Tuple[str, ...] = ()

    def __post_init__(self):
        # Freeze the caller's mapping so the definition cannot change after startup
        object.__setattr__(self, 'columns', MappingProxyType(dict(self.columns)))
        object.__setattr__(self, 'constraints', tuple(self.constraints))
        object.__setattr__(self, 'sequences', tuple(self.sequences))

    def column_names_upper(self) -> Tuple[str, ...]:
        """Declared column names in declared order, upper-cased for catalog comparison."""
        return tuple(name.upper() for name in self.columns)

    def __str__(self) -> str:
        return f"TableDefinition({self.name}, {len(self.columns)} columns)"
