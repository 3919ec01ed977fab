from .artifacts import CodeGenFile, generate_service
from .codecs import ValueCodec
from .profile import GenerationProfile
from .type_renderer import TypeRenderer

__all__ = [
    "CodeGenFile",
    "GenerationProfile",
    "TypeRenderer",
    "ValueCodec",
    "generate_service",
]
