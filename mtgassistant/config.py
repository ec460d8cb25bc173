from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment (MTGA_ prefix)."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MTGA_")

    app_name: str = "MTG Assistant"
    debug: bool = False

    # Arena writes this log when detailed logs are enabled in its options
    log_file: Path = (
        Path.home() / "AppData" / "LocalLow" / "Wizards Of The Coast" / "MTGA" / "output_log.txt"
    )

    # Downloads/Data folder inside the Arena install directory
    data_dir: Path = Path(
        "C:/Program Files (x86)/Wizards of the Coast/MTGA/MTGA_Data/Downloads/Data"
    )

    # Set whose primary cards are used for wildcard picking
    wildcard_set: str = "M21"

    # Upload ceiling for the web service; the scanner buffers whole payloads
    max_log_size_bytes: int = 100 << 20


settings = Settings()
