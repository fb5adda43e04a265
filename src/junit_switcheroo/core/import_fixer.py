"""
Import Maintenance.

Adds and prunes import declarations of a ``SourceUnit`` while keeping the
surrounding layout intact.

Placement rules:
- A new import goes into its group (static or non-static) at its
  lexicographic position.
- A missing static group is started after the last import, a missing
  non-static group before the first one; groups are separated by a blank line.
- Without any import, the new one follows the package declaration, or opens
  the file.

Wildcard imports satisfy ``ensure_import`` for every name in their package.
``remove_import_if_unused`` never touches them; ``remove_wildcard_if_unused``
drops one only when none of the package types the caller lists is referenced.
"""

import logging
from typing import Iterable, List, Optional

from junit_switcheroo.core.scanners import unit_references
from junit_switcheroo.core.tracer import TraceLogger
from junit_switcheroo.core.tree import ImportNode, Node, RawNode, SourceUnit, remove_member, replace_prefix

logger = logging.getLogger(__name__)


class ImportFixer:
  """
  Applies import additions and removals to whole units.

  Attributes:
      tracer (Optional[TraceLogger]): Receives one event per import action.
  """

  def __init__(self, tracer: Optional[TraceLogger] = None):
    self.tracer = tracer

  def ensure_import(self, unit: SourceUnit, name: str, static: bool = False) -> SourceUnit:
    """
    Adds ``import [static] name;`` unless already covered.

    Args:
        unit: The compilation unit.
        name: Qualified type name, or qualified member name for static imports.
        static: Whether to add a static import.

    Returns:
        SourceUnit: The unit, unchanged when the import is already present.
    """
    package = name.rpartition(".")[0]
    for imp in unit.imports:
      if imp.static != static:
        continue
      if (not imp.wildcard and imp.name == name) or (imp.wildcard and imp.name == package):
        return unit

    text = f"import static {name};" if static else f"import {name};"
    new_import = ImportNode(text=text, name=name, static=static)
    members = list(unit.members)
    self._insert(members, new_import)
    self._trace("add", name, static)
    return unit.with_changes(members=tuple(members))

  def remove_import_if_unused(self, unit: SourceUnit, name: str, static: bool = False) -> SourceUnit:
    """
    Removes ``import [static] name;`` if its simple name is no longer referenced.

    Args:
        unit: The compilation unit.
        name: Qualified name of the single-type (or single static) import.
        static: Whether the import is static.

    Returns:
        SourceUnit: The unit, unchanged when the import is absent or still used.
    """
    index = next(
      (
        i
        for i, m in enumerate(unit.members)
        if isinstance(m, ImportNode) and not m.wildcard and m.static == static and m.name == name
      ),
      None,
    )
    if index is None:
      return unit

    simple_name = name.rsplit(".", 1)[-1]
    if simple_name in unit_references(unit):
      logger.debug(f"Keeping import {name}: still referenced")
      if self.tracer:
        self.tracer.log_inspection(name, "kept", "still referenced")
      return unit

    members = list(unit.members)
    remove_member(members, index)
    self._trace("remove", name, static)
    return unit.with_changes(members=tuple(members))

  def remove_wildcard_if_unused(self, unit: SourceUnit, package: str, types: Iterable[str]) -> SourceUnit:
    """
    Removes ``import package.*;`` if none of ``types`` is referenced.

    Args:
        unit: The compilation unit.
        package: Package of the on-demand import.
        types: Simple names of every public type the package declares.

    Returns:
        SourceUnit: The unit, unchanged when the import is absent or still used.
    """
    index = next(
      (
        i
        for i, m in enumerate(unit.members)
        if isinstance(m, ImportNode) and m.wildcard and not m.static and m.name == package
      ),
      None,
    )
    if index is None:
      return unit

    used = unit_references(unit) & frozenset(types)
    if used:
      logger.debug(f"Keeping import {package}.*: {', '.join(sorted(used))} still referenced")
      if self.tracer:
        self.tracer.log_inspection(f"{package}.*", "kept", "still referenced")
      return unit

    members = list(unit.members)
    remove_member(members, index)
    self._trace("remove", f"{package}.*", False)
    return unit.with_changes(members=tuple(members))

  def _insert(self, members: List[Node], new_import: ImportNode) -> None:
    import_indexes = [i for i, m in enumerate(members) if isinstance(m, ImportNode)]
    same_kind = [i for i in import_indexes if members[i].static == new_import.static]

    if same_kind:
      for i in same_kind:
        if members[i].name > new_import.name:
          members.insert(i, replace_prefix(new_import, members[i].prefix))
          members[i + 1] = replace_prefix(members[i + 1], "\n")
          return
      members.insert(same_kind[-1] + 1, replace_prefix(new_import, "\n"))
      return

    if import_indexes:
      if new_import.static:
        members.insert(import_indexes[-1] + 1, replace_prefix(new_import, "\n\n"))
      else:
        first = import_indexes[0]
        members.insert(first, replace_prefix(new_import, members[first].prefix))
        members[first + 1] = replace_prefix(members[first + 1], "\n\n")
      return

    package_index = next(
      (i for i, m in enumerate(members) if isinstance(m, RawNode) and m.text.startswith("package")),
      None,
    )
    if package_index is not None:
      members.insert(package_index + 1, replace_prefix(new_import, "\n\n"))
    elif members:
      members.insert(0, replace_prefix(new_import, members[0].prefix))
      members[1] = replace_prefix(members[1], "\n\n")
    else:
      members.append(new_import)

  def _trace(self, action: str, name: str, static: bool) -> None:
    logger.debug(f"Import {action}: {'static ' if static else ''}{name}")
    if self.tracer:
      self.tracer.log_import(action, name, static)
