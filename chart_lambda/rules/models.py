from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

FileFormat = Literal["png", "jpg"]

# Longest validity S3 SigV4 accepts for a pre-signed URL (7 days)
MAX_PRESIGN_SECONDS = 604800


class DefaultsRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    storage_prefix: str = ""
    width: int = Field(default=480, gt=0)
    height: int = Field(default=320, gt=0)
    expire_seconds: int = Field(default=300, gt=0)
    file_format: FileFormat = "png"


class LimitsRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_expire_seconds: int = Field(default=MAX_PRESIGN_SECONDS, gt=0, le=MAX_PRESIGN_SECONDS)
    max_width: int = Field(default=4096, gt=0)
    max_height: int = Field(default=4096, gt=0)


class RenderRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    background_color: str = "white"
    dpi: int = Field(default=100, gt=0)
    stage_timeout_seconds: float = Field(default=30.0, gt=0)


class StorageRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    acl: str = "private"
    id_length: int = Field(default=12, ge=8)


class ChartRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    defaults: DefaultsRules = Field(default_factory=DefaultsRules)
    limits: LimitsRules = Field(default_factory=LimitsRules)
    render: RenderRules = Field(default_factory=RenderRules)
    storage: StorageRules = Field(default_factory=StorageRules)
