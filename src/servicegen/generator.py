from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .generation import CodeGenFile, GenerationProfile, generate_service
from .generation.artifacts import GENERATED_HEADER
from .model import HttpServiceBinding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageSpec:
    package_name: str
    output_dir: Path


def generate_package(
    spec: PackageSpec,
    binding: HttpServiceBinding,
    profile: GenerationProfile,
) -> Path:
    """Write every generated artifact into ``output_dir/package_name``.

    Returns:
        The package directory
    """
    package_dir = spec.output_dir / spec.package_name
    package_dir.mkdir(parents=True, exist_ok=True)

    files = generate_service(binding, profile)
    for file in files:
        target = package_dir / file.name
        with target.open("w", encoding="utf-8", newline="") as stream:
            stream.write(file.text)
        logger.info("Wrote %s", target)

    init_path = package_dir / "__init__.py"
    with init_path.open("w", encoding="utf-8", newline="") as stream:
        stream.write(_init_content(files, profile))
    logger.info("Wrote %s", init_path)
    return package_dir


def _init_content(files: list[CodeGenFile], profile: GenerationProfile) -> str:
    modules = [
        file.name.removesuffix(".py")
        for file in files
        if not file.name.endswith("_types.py")
    ]
    lines = [GENERATED_HEADER]
    for module in modules:
        lines.append(f"from .{module} import *  # noqa: F403")
    lines.append("")
    return profile.newline.join(lines)
