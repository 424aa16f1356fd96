from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .schemas import TriangleLimitPolicy, ZSpacingPolicy


class Settings(BaseSettings):
    APP_NAME: str = "printcalc"
    LOG_LEVEL: str = "INFO"

    # Slicing / packing
    LAYER_HEIGHT_MM: float = 0.1
    OBJECT_SPACING_MM: float = 15.0
    Z_SPACING_POLICY: str = "include"  # "include" | "omit" (legacy floor(availH / height))

    # Mesh decoding
    DECODE_BATCH_SIZE: int = 50000
    LARGE_MESH_TRIANGLES: int = 5_000_000
    TRIANGLE_LIMIT_POLICY: str = "advisory"  # "advisory" | "enforce"
    DECODE_EXECUTOR: str = "thread"  # "thread" | "process"
    DECODE_WORKERS: int = 2

    # Pricing / uploads
    DEFAULT_CURRENCY: str = "USD"
    MAX_UPLOAD_MB: int = 200
    MAX_PACKED_OBJECTS: int = 100_000  # ceiling for /estimates/capacity position lists

    class Config:
        env_file = ".env"
        env_prefix = "PRINTCALC_"


settings = Settings()


class EngineConfig(BaseModel):
    """
    Validated once, handed to each engine service at construction.

    Engine modules never read the global `settings`; the app builds one
    of these with EngineConfig.from_settings() and passes it down.
    """
    layer_height_mm: float = Field(0.1, gt=0)
    object_spacing_mm: float = Field(15.0, ge=0)
    z_spacing_policy: ZSpacingPolicy = ZSpacingPolicy.INCLUDE
    decode_batch_size: int = Field(50000, ge=1)
    large_mesh_triangles: int = Field(5_000_000, ge=1)
    triangle_limit_policy: TriangleLimitPolicy = TriangleLimitPolicy.ADVISORY

    class Config:
        frozen = True

    @classmethod
    def from_settings(cls, s: Settings = None) -> "EngineConfig":
        s = s or settings
        return cls(
            layer_height_mm=s.LAYER_HEIGHT_MM,
            object_spacing_mm=s.OBJECT_SPACING_MM,
            z_spacing_policy=ZSpacingPolicy(s.Z_SPACING_POLICY),
            decode_batch_size=s.DECODE_BATCH_SIZE,
            large_mesh_triangles=s.LARGE_MESH_TRIANGLES,
            triangle_limit_policy=TriangleLimitPolicy(s.TRIANGLE_LIMIT_POLICY),
        )
