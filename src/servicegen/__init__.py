from .backends import AiohttpBackend, HttpxAsyncBackend
from .errors import GenerationError, ServiceBindingError, ServicegenError, SpecError
from .generation import (
    CodeGenFile,
    GenerationProfile,
    TypeRenderer,
    ValueCodec,
    generate_service,
)
from .generator import PackageSpec, generate_package
from .loader import load_service
from .model import HttpServiceBinding, ServiceDefinition, TypeKind, TypeRef

__all__ = [
    "ServicegenError",
    "SpecError",
    "GenerationError",
    "ServiceBindingError",
    "CodeGenFile",
    "GenerationProfile",
    "TypeRenderer",
    "ValueCodec",
    "generate_service",
    "AiohttpBackend",
    "HttpxAsyncBackend",
    "PackageSpec",
    "generate_package",
    "load_service",
    "HttpServiceBinding",
    "ServiceDefinition",
    "TypeKind",
    "TypeRef",
]
