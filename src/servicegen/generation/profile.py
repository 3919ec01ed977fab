from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GenerationProfile:
    """Emission flags for one generation run.

    Attributes:
        typed: Emit the typed dialect (annotations and a types artifact)
        server: Emit the FastAPI server scaffold artifact
        module_name: Override for the module name (defaults to the service name)
        newline: Line ending of the generated text
        disable_linter: Emit a file-level linter suppression directive
        single_output: Merge all artifacts into one module
        use_future_annotations: Emit ``from __future__ import annotations``
        use_pep604: Render nullable types as ``T | None`` in annotations
        use_typing_extensions: Import ``TypedDict`` from typing_extensions
    """

    typed: bool = True
    server: bool = False
    module_name: str | None = None
    newline: str = "\n"
    disable_linter: bool = False
    single_output: bool = False
    use_future_annotations: bool = True
    use_pep604: bool = True
    use_typing_extensions: bool = False

    @classmethod
    def from_version(
        cls,
        target_version: str | tuple[int, int],
        *,
        typed: bool = True,
        server: bool = False,
        module_name: str | None = None,
        newline: str = "\n",
        disable_linter: bool = False,
        single_output: bool = False,
    ) -> "GenerationProfile":
        if isinstance(target_version, str):
            parts = target_version.split(".")
            major = int(parts[0])
            minor = int(parts[1]) if len(parts) > 1 else 0
        else:
            major, minor = target_version
        return cls(
            typed=typed,
            server=server,
            module_name=module_name,
            newline=newline,
            disable_linter=disable_linter,
            single_output=single_output,
            use_future_annotations=True,
            use_pep604=(major, minor) >= (3, 10),
            use_typing_extensions=(major, minor) < (3, 11),
        )
