"""Scoped symbol table used by semantic analysis."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from itertools import takewhile

MAX_LEVELS = 100

OFFSET_HEAD = -1
OFFSET_TYPE = -2
OFFSET_PROC = -4

_SEPARATOR = "=" * 51


class SymKind(Enum):
    """The category of a declared identifier."""

    TYPE = "TYPE"
    VAR = "VAR"
    PROC = "PROC"
    PARAM = "PARAM"

    def __str__(self) -> str:
        return self.value


@dataclass(eq=False)
class SymbolEntry:
    """One identifier recorded in a scope.

    Procedure, program-head, type and array entries keep the layout the
    listing relies on: for arrays ``name`` holds the element type and
    ``type_name`` the array's name.
    """

    name: str
    type_name: str
    level: int
    offset: int
    proc_name: str = ""
    lower: int = 0
    upper: int = 0


@dataclass
class FieldEntry:
    """A member of a record type."""

    name: str
    type_name: str
    kind: SymKind | None = None


def _access(type_name: str) -> str:
    return "indir" if type_name.endswith("^") else "dir"


def _is_array(entry: SymbolEntry) -> bool:
    return entry.lower != 0 and entry.upper != 0


def _matches(entry: SymbolEntry, ident: str) -> bool:
    return ident in (entry.name, entry.proc_name, entry.type_name)


class SymbolTable:
    """Identifiers grouped by nesting level, plus a flat name-to-type map."""

    def __init__(self, parent: SymbolTable | None = None) -> None:
        self.parent = parent
        self.table: dict[str, str] = {}
        self.current_level = 0
        self.max_level = 0
        self.offset = 0
        self._scopes: list[list[SymbolEntry]] = [[] for _ in range(MAX_LEVELS)]
        self._field_tables: dict[str, list[FieldEntry]] = {}

    # -- levels -------------------------------------------------------

    def _scope(self, level: int) -> list[SymbolEntry]:
        if not 0 <= level < MAX_LEVELS:
            raise IndexError(f"scope level {level} is outside 0..{MAX_LEVELS - 1}")
        return self._scopes[level]

    def _entries(self, level: int) -> Iterator[SymbolEntry]:
        """Entries of a level, most recently added first; none if out of range."""
        if 0 <= level < MAX_LEVELS:
            return reversed(self._scopes[level])
        return iter(())

    def _open_level(self) -> None:
        level = self.current_level + 1
        self._scope(level).clear()
        self.current_level = level
        self.max_level = max(self.max_level, level)
        self.offset = 0

    def enter_scope(self) -> None:
        """Open a new, empty scope one level deeper."""
        self._open_level()

    def exit_scope(self) -> None:
        """Leave the current scope, keeping its entries for the listing."""
        self.current_level -= 1

    def create_table(self) -> None:
        """Open a new, empty scope one level deeper."""
        self._open_level()

    def destroy_table(self) -> None:
        """Discard the current scope's entries and leave it."""
        if 0 <= self.current_level < MAX_LEVELS:
            self._scopes[self.current_level].clear()
        self.current_level -= 1

    def set_level(self, level: int) -> None:
        self.current_level = level

    # -- adding -------------------------------------------------------

    def _push(self, entry: SymbolEntry) -> SymbolEntry:
        self._scope(self.current_level).append(entry)
        return entry

    def _next_offset(self) -> int:
        offset = self.offset
        self.offset += 1
        return offset

    def add_symbol(self, type_name: str, kind: SymKind, name: str) -> SymbolEntry:
        """Record a variable at the next offset."""
        return self._push(
            SymbolEntry(name, type_name, self.current_level, self._next_offset())
        )

    def add_symbol_head(self, type_name: str, kind: SymKind, name: str) -> SymbolEntry:
        """Record the program head."""
        return self._push(SymbolEntry(name, type_name, self.current_level, OFFSET_HEAD))

    def add_symbol_type(self, type_name: str, kind: SymKind, name: str) -> SymbolEntry:
        """Record a type definition."""
        return self._push(SymbolEntry(name, type_name, self.current_level, OFFSET_TYPE))

    def add_symbol_param(
        self, proc_name: str, type_name: str, kind: SymKind, name: str
    ) -> SymbolEntry:
        """Record a formal parameter of ``proc_name`` at the next offset."""
        return self._push(
            SymbolEntry(
                name, type_name, self.current_level, self._next_offset(), proc_name
            )
        )

    def add_symbol_proc(self, type_name: str, kind: SymKind, name: str) -> SymbolEntry:
        """Record a procedure; ``type_name`` is its name and ``name`` its kind."""
        return self._push(SymbolEntry(type_name, name, self.current_level, OFFSET_PROC))

    def add_symbol_array(
        self, type_name: str, kind: SymKind, name: str, low: int, up: int
    ) -> SymbolEntry:
        """Record an array with its bounds at the next offset."""
        return self._push(
            SymbolEntry(
                type_name, name, self.current_level, self._next_offset(), "", low, up
            )
        )

    def enter(self, ident: str, type_name: str) -> SymbolEntry:
        """Record an identifier, refusing one already present in this scope."""
        if self.find_entry(ident, "one") is not None:
            raise ValueError(
                f"Duplicate declaration of '{ident}' in scope level {self.current_level}"
            )
        return self.add_symbol(type_name, SymKind.VAR, ident)

    # -- lookup -------------------------------------------------------

    def lookup_current_scope(self, name: str) -> SymbolEntry | None:
        """Find an entry by name in the current scope only."""
        return next((e for e in self._entries(self.current_level) if e.name == name), None)

    def lookup_entry(self, name: str) -> SymbolEntry | None:
        """Find an entry by name, innermost scope first."""
        for level in range(min(self.current_level, MAX_LEVELS - 1), -1, -1):
            for entry in self._entries(level):
                if entry.name == name:
                    return entry
        return None

    def find_entry(self, ident: str, flag: str) -> SymbolEntry | None:
        """Find an entry whose name, procedure or type equals ``ident``.

        ``flag`` is "one" for the current scope, "up" for it and the enclosing
        scopes, "down" for it and the deeper non-empty scopes.
        """
        if flag == "one":
            levels: Iterable[int] = (self.current_level,)
        elif flag == "up":
            levels = range(min(self.current_level, MAX_LEVELS - 1), -1, -1)
        elif flag == "down":
            levels = takewhile(
                lambda lv: any(True for _ in self._entries(lv)),
                range(self.current_level, MAX_LEVELS),
            )
        else:
            raise ValueError(f"unknown search direction {flag!r}")
        for level in levels:
            for entry in self._entries(level):
                if _matches(entry, ident):
                    return entry
        return None

    def type_of(self, name: str) -> str:
        """The type recorded for ``name``, searching here, outward, then inward."""
        for flag in ("one", "up", "down"):
            entry = self.find_entry(name, flag)
            if entry is not None:
                return entry.type_name
        raise KeyError(f"Undeclared variable '{name}'")

    def insert(self, name: str, type_name: str) -> None:
        """Add a name to the flat map of this table."""
        if name in self.table:
            raise ValueError(f"Variable '{name}' redeclared in the same scope.")
        self.table[name] = type_name

    def lookup(self, name: str) -> str:
        """The type of ``name`` in this table or its parents."""
        table: SymbolTable | None = self
        while table is not None:
            if name in table.table:
                return table.table[name]
            table = table.parent
        raise KeyError(f"Undeclared variable '{name}'")

    # -- record fields ------------------------------------------------

    def add_field_table(self, type_name: str, fields: Iterable[FieldEntry]) -> None:
        self._field_tables[type_name] = list(fields)

    def get_field_table(self, type_name: str) -> list[FieldEntry] | None:
        return self._field_tables.get(type_name)

    def find_field(
        self, ident: str, fields: Iterable[FieldEntry] | None
    ) -> FieldEntry | None:
        if not fields:
            return None
        return next((f for f in fields if f.name == ident), None)

    def find_field_in_table(self, type_name: str, field_name: str) -> FieldEntry | None:
        return self.find_field(field_name, self.get_field_table(type_name))

    # -- listing ------------------------------------------------------

    def _listing_entries(self) -> Iterator[tuple[int, SymbolEntry]]:
        for level in range(self.max_level, -1, -1):
            for entry in self._entries(level):
                yield level, entry

    def procedure_params(self) -> list[list[str]]:
        """Parameter types gathered per procedure, as the listing walks them.

        Each list holds the parameter types met before a procedure entry,
        followed by that procedure's name; the last list collects whatever
        follows the final procedure.
        """
        groups: list[list[str]] = [[]]
        for _, entry in self._listing_entries():
            if entry.offset == OFFSET_PROC:
                groups[-1].append(entry.name)
                groups.append([])
            elif entry.offset in (OFFSET_HEAD, OFFSET_TYPE):
                continue
            elif entry.proc_name:
                groups[-1].append(entry.type_name)
        return groups

    @staticmethod
    def _format_entry(entry: SymbolEntry) -> str:
        if entry.offset == OFFSET_HEAD:
            return f"Type: {entry.name} | Name: {entry.type_name}"
        if entry.offset == OFFSET_TYPE:
            return f"DEFINE     Name: {entry.name} | Type: {entry.type_name}"
        if entry.offset == OFFSET_PROC:
            return f"NULL | procKind | Type: {entry.type_name} | Name: {entry.name}"
        if entry.proc_name:
            return (
                f"Parameter\tType: {entry.type_name} | varKind | "
                f"{_access(entry.type_name)} | Name: {entry.name} | Offset: {entry.offset}"
            )
        if _is_array(entry):
            return (
                f"Array\tType: {entry.name} | varKind | dir | "
                f"Name: {entry.type_name} | Offset: {entry.offset}"
            )
        return (
            f"Type: {entry.type_name} | varKind | {_access(entry.type_name)} | "
            f"Name: {entry.name} | Offset: {entry.offset}"
        )

    def format(self) -> str:
        """Render every level, deepest first, in the symbol-table file layout."""
        lines = [f"===== Symbol Table (Max Level: {self.max_level}) ====="]
        shown_level = None
        for level in range(self.max_level, -1, -1):
            lines.append(f"--- Level {level} ---")
            lines.extend(self._format_entry(e) for e in self._entries(level))
            shown_level = level
        del shown_level
        return "\n".join(lines) + "\n" + _SEPARATOR + "\n\n\n"