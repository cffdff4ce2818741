import enum
import os
from dataclasses import dataclass
from typing import Optional


class AssetKind(str, enum.Enum):
    """Resource type of a stored object, as the asset store understands it"""
    IMAGE = "image"
    RAW = "raw"
    VIDEO = "video"


@dataclass(frozen=True)
class AssetReference:
    """Pointer stored on a document for a populated asset slot"""
    remote_key: str
    url: str


@dataclass(frozen=True)
class UploadedAsset:
    """A file received with a create or update request"""
    content: bytes
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename or "")[1].lower().lstrip(".")


@dataclass(frozen=True)
class AssetSlotConfig:
    """Declarative description of one asset slot on a content type"""
    name: str
    folder: str
    kind: AssetKind
    label: str
    required_on_create: bool = True
    max_bytes: Optional[int] = None

    @property
    def form_field(self) -> str:
        return f"{self.name}_file"

    @property
    def clear_field(self) -> str:
        return f"clear_{self.name}"

    @property
    def key_attribute(self) -> str:
        return f"{self.name}_key"

    @property
    def url_attribute(self) -> str:
        return f"{self.name}_url"

    def read(self, document) -> Optional[AssetReference]:
        """Read this slot's reference off a persisted document"""
        key = getattr(document, self.key_attribute, None)
        url = getattr(document, self.url_attribute, None)
        if not key and not url:
            return None
        return AssetReference(remote_key=key or "", url=url or "")

    def write(self, document, reference: Optional[AssetReference]) -> None:
        setattr(document, self.key_attribute, reference.remote_key if reference else None)
        setattr(document, self.url_attribute, reference.url if reference else None)
