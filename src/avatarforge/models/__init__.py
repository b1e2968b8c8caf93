"""Data models for avatarforge."""

from .media import EncodedAsset, MediaPart, encode_file, parse_data_uri
from .operation import (
    CompletedOperation,
    MediaRef,
    OperationError,
    OperationHandle,
    OperationPart,
    VideoConfig,
)
from .outputs import (
    ActionOutput,
    AvatarAnalysis,
    DialogueOutput,
    ProductAnalysis,
    SceneAnalysis,
    ScriptOutput,
    SeoOutput,
    TextAnalysis,
    TitleOutput,
)
from .persona import PersonaProfile
from .product import ProductSpec
from .scene import (
    AspectRatio,
    CameraAngle,
    GeneratedSceneResult,
    SceneNarrative,
    SceneRequest,
    SceneSpec,
)
from .script import (
    ProductIntegration,
    ScriptCharacter,
    ScriptDocument,
    ScriptScene,
    ScriptVideoResult,
)

__all__ = [
    "ActionOutput",
    "AspectRatio",
    "AvatarAnalysis",
    "CameraAngle",
    "CompletedOperation",
    "DialogueOutput",
    "EncodedAsset",
    "GeneratedSceneResult",
    "MediaPart",
    "MediaRef",
    "OperationError",
    "OperationHandle",
    "OperationPart",
    "PersonaProfile",
    "ProductAnalysis",
    "ProductIntegration",
    "ProductSpec",
    "SceneAnalysis",
    "SceneNarrative",
    "SceneRequest",
    "SceneSpec",
    "ScriptCharacter",
    "ScriptDocument",
    "ScriptOutput",
    "ScriptScene",
    "ScriptVideoResult",
    "SeoOutput",
    "TextAnalysis",
    "TitleOutput",
    "VideoConfig",
    "encode_file",
    "parse_data_uri",
]
