from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .errors import ServicegenError
from .generation import GenerationProfile
from .generator import PackageSpec, generate_package
from .loader import load_service


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="servicegen",
        description="Generate a Python HTTP client and server scaffold from a service definition.",
    )
    parser.add_argument("definition", type=Path, help="Path to the service definition (JSON/YAML)")
    parser.add_argument("-n", "--package-name", required=True, help="Generated package name")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Output directory")
    parser.add_argument("--untyped", action="store_true", help="Emit plain Python without annotations")
    parser.add_argument("--server", action="store_true", help="Also emit the FastAPI server scaffold")
    parser.add_argument("--module-name", help="Module name of the artifacts (defaults to the service name)")
    parser.add_argument("--single-file", action="store_true", help="Merge all artifacts into one module")
    parser.add_argument("--crlf", action="store_true", help="Use CRLF line endings")
    parser.add_argument("--disable-linter", action="store_true", help="Add a ruff suppression directive")
    parser.add_argument("--python-version", default="3.10", help="Target Python version (e.g. 3.10)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    try:
        binding = load_service(args.definition)
        profile = GenerationProfile.from_version(
            args.python_version,
            typed=not args.untyped,
            server=args.server,
            module_name=args.module_name,
            newline="\r\n" if args.crlf else "\n",
            disable_linter=args.disable_linter,
            single_output=args.single_file,
        )
        package = PackageSpec(package_name=args.package_name, output_dir=args.output_dir)
        generate_package(package, binding, profile)
    except ServicegenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"error: invalid --python-version: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
