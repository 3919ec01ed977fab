from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass, field

# Placeholder module for names declared in the types artifact. Artifact
# assembly turns it into a relative import, or drops it in single-file mode.
TYPES_MODULE = "<types>"

_MAX_LINE = 100


@dataclass
class ImportSet:
    """Imports collected while emitting one section of generated code.

    Note:
        Emitters mutate the set as they go; artifact assembly merges the sets
        of every section that ends up in the same file.
    """

    from_imports: dict[str, set[str]] = field(default_factory=dict)
    module_imports: set[str] = field(default_factory=set)

    def add(self, module: str, *names: str) -> None:
        self.from_imports.setdefault(module, set()).update(names)

    def add_module(self, module: str) -> None:
        self.module_imports.add(module)

    def update(self, other: ImportSet) -> None:
        for module, names in other.from_imports.items():
            self.add(module, *names)
        self.module_imports.update(other.module_imports)

    def names_from(self, module: str) -> set[str]:
        return set(self.from_imports.get(module, set()))

    def render(self, local_modules: Mapping[str, str | None]) -> list[str]:
        """Render grouped import statements.

        Args:
            local_modules: Replacement for placeholder modules; ``None`` drops
                the import (the names are defined in the same file)

        Returns:
            Lines in ``__future__``, standard library, third-party and local
            groups, separated by blank lines
        """
        future: list[str] = []
        stdlib: list[str] = []
        third_party: list[str] = []
        local: list[str] = []

        for module in sorted(self.module_imports):
            _group(module, stdlib, third_party).append(f"import {module}")

        for module in sorted(self.from_imports):
            names = self.from_imports[module]
            if not names:
                continue
            target: str | None = module
            if module in local_modules:
                target = local_modules[module]
                if target is None:
                    continue
            statement = _from_import(target, sorted(names))
            if target == "__future__":
                future.extend(statement)
            elif target.startswith("."):
                local.extend(statement)
            else:
                _group(target, stdlib, third_party).extend(statement)

        lines: list[str] = []
        for group in (future, stdlib, third_party, local):
            if not group:
                continue
            if lines:
                lines.append("")
            lines.extend(group)
        return lines


def _group(module: str, stdlib: list[str], third_party: list[str]) -> list[str]:
    top_level = module.split(".")[0]
    return stdlib if top_level in sys.stdlib_module_names else third_party


def _from_import(module: str, names: list[str]) -> list[str]:
    single = f"from {module} import {', '.join(names)}"
    if len(single) <= _MAX_LINE:
        return [single]
    return [f"from {module} import (", *[f"    {name}," for name in names], ")"]
