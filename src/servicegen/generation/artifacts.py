"""Artifact assembly: turns emitted sections into named source files."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..model import HttpServiceBinding
from .client import emit_client
from .context import EmitContext, Section
from .imports import TYPES_MODULE, ImportSet
from .interfaces import emit_interfaces
from .names import ArtifactNames
from .profile import GenerationProfile
from .server import emit_server

logger = logging.getLogger(__name__)

GENERATED_HEADER = "# DO NOT EDIT: generated by servicegen"


@dataclass(frozen=True)
class CodeGenFile:
    """One generated source file.

    Attributes:
        name: File name relative to the output package
        text: Complete file contents
    """

    name: str
    text: str


def generate_service(binding: HttpServiceBinding, profile: GenerationProfile) -> list[CodeGenFile]:
    """Generate every artifact of a service.

    Args:
        binding: The service and its resolved HTTP binding
        profile: Dialect, toggles and Python-target flags

    Returns:
        ``<module>_types.py`` (typed dialect), ``<module>_client.py`` and
        ``<module>_server.py`` (server toggle), or a single ``<module>.py``
        in single-output mode
    """
    names = ArtifactNames.from_module(profile.module_name or binding.service.name)

    type_names: list[str] = []
    types_section: Section | None = None
    if profile.typed:
        types_section = emit_interfaces(EmitContext(profile, binding, names))
        type_names = list(types_section.exports)

    client_section = emit_client(EmitContext(profile, binding, names, type_names=list(type_names)))
    server_section = None
    if profile.server:
        server_section = emit_server(EmitContext(profile, binding, names, type_names=list(type_names)))

    if profile.single_output:
        sections = [s for s in (types_section, client_section, server_section) if s is not None]
        return [assemble(ArtifactNames.file_name(names.module), sections, profile, type_names=[])]

    files: list[CodeGenFile] = []
    if types_section is not None:
        files.append(assemble(ArtifactNames.file_name(names.types_module), [types_section], profile, type_names=[]))
    files.append(
        assemble(
            ArtifactNames.file_name(names.client_module),
            [client_section],
            profile,
            type_names=type_names,
            types_module=names.types_module,
        )
    )
    if server_section is not None:
        files.append(
            assemble(
                ArtifactNames.file_name(names.server_module),
                [server_section],
                profile,
                type_names=type_names,
                types_module=names.types_module,
            )
        )
    return files


def assemble(
    name: str,
    sections: list[Section],
    profile: GenerationProfile,
    type_names: list[str],
    types_module: str | None = None,
) -> CodeGenFile:
    """Join sections into one file with header, imports and ``__all__``.

    Type names are imported from the types artifact and re-exported, so a
    client or server module is usable on its own.
    """
    imports = ImportSet()
    for section in sections:
        imports.update(section.imports)
    if type_names:
        imports.add(TYPES_MODULE, *type_names)

    exports: list[str] = []
    for section in sections:
        exports.extend(section.exports)
    exports.extend(n for n in type_names if n not in exports)

    lines = [GENERATED_HEADER]
    if profile.disable_linter:
        lines.append("# ruff: noqa")
    if profile.typed and profile.use_future_annotations:
        imports.add("__future__", "annotations")

    local_modules = {TYPES_MODULE: f".{types_module}" if types_module else None}
    import_lines = imports.render(local_modules)
    if import_lines:
        lines.append("")
        lines.extend(import_lines)

    lines.extend(["", ""])
    lines.extend(render_all(exports))

    for section in sections:
        body = section.code.lines()
        if body:
            lines.extend(["", ""])
            lines.extend(body)

    logger.debug("Assembled %s: %d lines, %d exports", name, len(lines), len(exports))
    return CodeGenFile(name=name, text=profile.newline.join(lines) + profile.newline)


def render_all(exports: list[str]) -> list[str]:
    if not exports:
        return ["__all__ = []"]
    return ["__all__ = [", *[f"    {name!r}," for name in exports], "]"]
