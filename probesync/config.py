import os
import logging
from pathlib import Path
from typing import Optional

try:
	from dotenv import load_dotenv
except ImportError:
	logging.warning("python-dotenv not available; using environment variables only")
else:
	loaded = load_dotenv()
	if not loaded and Path(".env").exists():
		raise RuntimeError(".env file present but failed to load")


def get_str_env(name: str, default: str) -> str:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return raw


def get_optional_str_env(name: str) -> Optional[str]:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return None
	return raw


def get_int_env(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return int(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_optional_int_env(name: str) -> Optional[int]:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return None
	try:
		return int(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return None


def get_float_env(name: str, default: float) -> float:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return float(raw)
	except Exception:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_list_env(name: str, default: list[str]) -> list[str]:
	"""Split a comma separated variable, dropping blank items."""
	raw = os.getenv(name)
	if raw is None or raw.strip() == "":
		return list(default)
	return [item.strip() for item in raw.split(",") if item.strip()]


def config_locations() -> list[str]:
	return get_list_env("PROBESYNC_CONFIG", ["monika.json"])


def config_interval_seconds() -> int:
	return get_int_env("PROBESYNC_CONFIG_INTERVAL", 900)


def file_debounce_seconds() -> float:
	return get_float_env("PROBESYNC_FILE_DEBOUNCE_SECONDS", 0.0)
