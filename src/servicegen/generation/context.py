from __future__ import annotations

from dataclasses import dataclass, field

from ..model import HttpServiceBinding
from .codecs import ValueCodec
from .imports import ImportSet
from .names import ArtifactNames, capitalize, pascal_case
from .profile import GenerationProfile
from .type_renderer import RUNTIME_MODULE, TypeRenderer
from .writer import CodeWriter


@dataclass
class Section:
    """Emitted code of one artifact before assembly.

    Attributes:
        code: The body of the artifact
        imports: Imports the body needs
        exports: Public names the body defines, in definition order
    """

    code: CodeWriter
    imports: ImportSet
    exports: list[str]


@dataclass
class EmitContext:
    """State shared while emitting one section.

    Note:
        ``imports`` is mutated during emission; renderers and codecs created
        through this context report their imports back into it.
    """

    profile: GenerationProfile
    binding: HttpServiceBinding
    names: ArtifactNames
    type_names: list[str] = field(default_factory=list)
    imports: ImportSet = field(default_factory=ImportSet)
    code: CodeWriter = field(default_factory=CodeWriter)

    @property
    def typed(self) -> bool:
        return self.profile.typed

    @property
    def service_name(self) -> str:
        return pascal_case(self.names.module)

    @property
    def interface_name(self) -> str:
        return f"{self.service_name}Service"

    def request_type(self, method_name: str) -> str:
        return f"{capitalize(method_name)}Request"

    def response_type(self, method_name: str) -> str:
        return f"{capitalize(method_name)}Response"

    def annotate(self, annotation: str) -> str:
        """``: annotation`` in the typed dialect, nothing otherwise."""
        return f": {annotation}" if self.typed else ""

    def renderer(self, quote_refs: bool = False, evaluated: bool = False) -> TypeRenderer:
        return TypeRenderer(self.profile, quote_refs=quote_refs, evaluated=evaluated)

    def codec(self) -> ValueCodec:
        return ValueCodec(typed=self.typed)

    def collect(self, source: TypeRenderer | ValueCodec) -> None:
        """Record the imports a renderer or codec accumulated."""
        if source.typing_imports:
            self.imports.add("typing", *source.typing_imports)
        if source.runtime_imports:
            self.imports.add(RUNTIME_MODULE, *source.runtime_imports)

    def section(self, exports: list[str]) -> Section:
        return Section(code=self.code, imports=self.imports, exports=exports)
