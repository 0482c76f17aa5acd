"""Application configuration loaded from environment variables."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Working area (one sub-directory per job)
    work_dir: str = "./uploads"

    # Transcoder executables
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"

    # Encoding policy shared by synthesis and re-encode assembly
    video_codec: str = "libx264"
    audio_codec: str = "aac"
    audio_bitrate: str = "192k"
    pixel_format: str = "yuv420p"

    # Per-job fan-out limits
    fetch_concurrency: int = 4
    synth_concurrency: int = 2

    # Outbound HTTP
    fetch_timeout_sec: float = 120.0
    max_connections: int = 20

    # None = wait for the transcoder indefinitely
    command_timeout_sec: Optional[float] = None

    # Request shapes
    required_pair_count: Optional[int] = None  # e.g. 6 to demand imageURL1..6/audioURL1..6
    merge_video_count: int = 6
    single_trim_tail_sec: float = 2.3

    # Google Drive service account (inline JSON wins over file path)
    google_credentials_file: str = ""
    google_credentials_json: str = ""

    # CORS, comma separated
    allowed_origins: str = ""

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080


settings = Settings()
