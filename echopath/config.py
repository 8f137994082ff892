"""
Configuration Management
========================

Centralized configuration using Pydantic Settings.
Loads from environment variables and .env file.

All timing constants are expressed in milliseconds, matching the
units the mobile client uses for speech and vibration.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Shared config that all settings classes use to load .env
_shared_config = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    env_prefix="",
    extra="ignore",
)


class SpeechSettings(BaseSettings):
    """Text-to-speech delivery settings."""

    model_config = _shared_config

    voice_feedback_enabled: bool = Field(
        default=True,
        description="Speak announcements at all",
    )
    speech_language: str = Field(default="en-US", description="Speech language code")
    speech_pitch: float = Field(default=1.0, ge=0.5, le=2.0, description="Speech pitch")
    speech_rate: float = Field(default=0.8, ge=0.1, le=2.0, description="Speech rate")


class HapticSettings(BaseSettings):
    """Vibration delivery settings."""

    model_config = _shared_config

    haptic_feedback_enabled: bool = Field(
        default=True,
        description="Send vibration patterns at all",
    )


class DetectionSettings(BaseSettings):
    """Simulated object detection settings."""

    model_config = _shared_config

    detection_interval_ms: int = Field(
        default=2000,
        gt=0,
        description="Period of the detection sampling loop",
    )
    detection_probability: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Chance that a tick produces a detection",
    )
    detection_min_confidence: float = Field(
        default=0.7,
        ge=0.0,
        lt=1.0,
        description="Lower bound of simulated confidence scores",
    )
    detection_frame_width: float = Field(default=390.0, gt=0, description="Frame width in points")
    detection_frame_height: float = Field(default=844.0, gt=0, description="Frame height in points")


class NavigationSettings(BaseSettings):
    """Indoor navigation timing settings."""

    model_config = _shared_config

    navigation_first_landmark_delay_ms: int = Field(
        default=2000,
        ge=0,
        description="Delay before the first step's landmark is spoken",
    )
    navigation_warning_delay_ms: int = Field(
        default=1500,
        ge=0,
        description="Delay before a step warning is spoken",
    )
    navigation_landmark_delay_ms: int = Field(
        default=3000,
        ge=0,
        description="Delay before a step landmark is spoken",
    )
    navigation_stride_factor: float = Field(
        default=1.3,
        gt=0,
        description="Estimated footsteps per meter",
    )


class VoiceSettings(BaseSettings):
    """Voice command settings."""

    model_config = _shared_config

    voice_recognition_delay_ms: int = Field(
        default=3000,
        ge=0,
        description="Simulated time to recognize one utterance",
    )


class ServerSettings(BaseSettings):
    """Server configuration settings."""

    model_config = _shared_config

    server_host: str = Field(default="0.0.0.0", description="Server host")
    server_port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=True, description="Debug mode")
    environment: str = Field(default="development", description="Environment name")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
    )
    cors_origins: str = Field(default="*", description="CORS origins")

    @field_validator("cors_origins")
    @classmethod
    def strip_cors_origins(cls, v: str) -> str:
        """Normalize surrounding whitespace."""
        return v.strip()

    def get_cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


class Settings(BaseSettings):
    """
    Main settings class combining all configuration sections.

    Usage:
        from echopath.config import get_settings
        settings = get_settings()
        print(settings.detection.detection_interval_ms)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    speech: SpeechSettings = Field(default_factory=SpeechSettings)
    haptics: HapticSettings = Field(default_factory=HapticSettings)
    detection: DetectionSettings = Field(default_factory=DetectionSettings)
    navigation: NavigationSettings = Field(default_factory=NavigationSettings)
    voice: VoiceSettings = Field(default_factory=VoiceSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)


@dataclass(frozen=True)
class FeedbackTimings:
    """
    Timing constants used by the feedback components.

    Built from Settings in production; tests construct it directly.

    Attributes:
        detection_interval_ms: Period of the detection loop.
        first_landmark_delay_ms: Delay of the landmark after navigation starts.
        warning_delay_ms: Delay of a step warning after its instruction.
        landmark_delay_ms: Delay of a step landmark after its instruction.
        recognition_delay_ms: Simulated recognition latency.
    """

    detection_interval_ms: int = 2000
    first_landmark_delay_ms: int = 2000
    warning_delay_ms: int = 1500
    landmark_delay_ms: int = 3000
    recognition_delay_ms: int = 3000

    @classmethod
    def from_settings(cls, settings: Settings) -> "FeedbackTimings":
        """Create timings from application settings."""
        return cls(
            detection_interval_ms=settings.detection.detection_interval_ms,
            first_landmark_delay_ms=settings.navigation.navigation_first_landmark_delay_ms,
            warning_delay_ms=settings.navigation.navigation_warning_delay_ms,
            landmark_delay_ms=settings.navigation.navigation_landmark_delay_ms,
            recognition_delay_ms=settings.voice.voice_recognition_delay_ms,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings loaded from environment.
    """
    return Settings()
