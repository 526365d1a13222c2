import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _get_env_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip() in {"1", "true", "True", "yes", "YES", "y"}


def _get_env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    try:
        return int(val)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be an integer") from exc


@dataclass
class Config:
    check_interval_ms: int
    snooze_minutes: int
    max_snoozes: int
    bell_enabled: bool
    speak_enabled: bool
    log_level: str
    log_dir: Path
    log_to_console: bool


def load_config(env_path: Optional[Path] = None) -> Config:
    if env_path is None:
        env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    check_interval_ms = _get_env_int("ALARM_CHECK_INTERVAL_MS", 1000)
    snooze_minutes = _get_env_int("ALARM_SNOOZE_MINUTES", 5)
    max_snoozes = _get_env_int("ALARM_MAX_SNOOZES", 3)
    bell_enabled = _get_env_bool("ALARM_BELL", True)
    speak_enabled = _get_env_bool("ALARM_SPEAK", False)
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_to_console = _get_env_bool("LOG_TO_CONSOLE", False)

    if check_interval_ms < 200:
        logging.warning("ALARM_CHECK_INTERVAL_MS=%s is too small, using 200", check_interval_ms)
        check_interval_ms = 200

    return Config(
        check_interval_ms=check_interval_ms,
        snooze_minutes=snooze_minutes,
        max_snoozes=max_snoozes,
        bell_enabled=bell_enabled,
        speak_enabled=speak_enabled,
        log_level=log_level,
        log_dir=log_dir,
        log_to_console=log_to_console,
    )


def setup_logging(log_level: str = "INFO", log_dir: Path = Path("logs"), console: bool = False) -> None:
    log_dir.mkdir(parents=True, exist_ok=True)

    log_path = log_dir / "alarm_clock.log"
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    file_handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    handlers = [file_handler]

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        handlers=handlers,
    )
