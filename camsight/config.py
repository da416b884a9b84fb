import os
import sys
from typing import List


VERSION = "v0.4.0"


def _env_int(name: str, default: int) -> int:
    """Read integer env var and fall back to default for invalid values."""
    raw = os.environ.get(name, None)
    if raw is None:
        return int(default)
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return int(default)


def _env_float(name: str, default: float) -> float:
    """Read float env var and fall back to default for invalid values."""
    raw = os.environ.get(name, None)
    if raw is None:
        return float(default)
    try:
        return float(str(raw).strip())
    except (TypeError, ValueError):
        return float(default)


def _env_bool(name: str, default: bool) -> bool:
    """Read bool env var with broad truthy/falsy value support."""
    raw = os.environ.get(name, None)
    if raw is None:
        return bool(default)
    value = str(raw).strip().lower()
    if value in {"1", "true", "yes", "on", "y", "t"}:
        return True
    if value in {"0", "false", "no", "off", "n", "f"}:
        return False
    return bool(default)


def _csv_list(raw: str) -> List[str]:
    """Parse a comma-separated string into normalized non-empty values."""
    out: List[str] = []
    for x in str(raw or "").split(","):
        s = str(x or "").strip()
        if s and s not in out:
            out.append(s)
    return out


_REGISTRY_BACKENDS = ("auto", "gi", "inspect", "static")


def _registry_backend(raw: str) -> str:
    """Normalize the element registry backend name, defaulting to auto."""
    value = str(raw or "").strip().lower()
    return value if value in _REGISTRY_BACKENDS else "auto"


HOST = str(os.environ.get("CAMSIGHT_HOST", "127.0.0.1") or "127.0.0.1").strip()
PORT = _env_int("CAMSIGHT_PORT", 8765)

DEBUG = _env_bool("CAMSIGHT_DEBUG", False)
# Per-element probe tracing without turning on debug logging everywhere.
DECODER_DEBUG = _env_bool("CAMSIGHT_DECODER_DEBUG", False)
CONSOLE_LOG = _env_bool("CAMSIGHT_CONSOLE", False)
LOG_ENABLED = _env_bool("CAMSIGHT_LOG", False) or CONSOLE_LOG
VERBOSE_HTTP_LOG = _env_bool("CAMSIGHT_VERBOSE_HTTP_LOG", True)
CORS_ORIGINS = _csv_list(os.environ.get("CAMSIGHT_CORS_ORIGINS", "*")) or ["*"]

# Element registry used to answer "is this GStreamer element installed?"
REGISTRY_BACKEND = _registry_backend(os.environ.get("CAMSIGHT_REGISTRY_BACKEND", "auto"))
GST_INSPECT_BIN = str(os.environ.get("CAMSIGHT_GST_INSPECT_BIN", "") or "").strip()
GST_INSPECT_TIMEOUT_S = max(0.5, _env_float("CAMSIGHT_GST_INSPECT_TIMEOUT_S", 3.0))
DECODER_DENYLIST = _csv_list(os.environ.get("CAMSIGHT_DECODER_DENYLIST", ""))
STATIC_ELEMENTS = _csv_list(os.environ.get("CAMSIGHT_GST_ELEMENTS", ""))
WARM_DECODERS = _env_bool("CAMSIGHT_WARM_DECODERS", False)

if bool(getattr(sys, "frozen", False)):
    BASE_DIR = os.path.dirname(sys.executable)
else:
    BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DATA_DIR = os.path.abspath(str(os.environ.get("CAMSIGHT_DATA_DIR", BASE_DIR) or BASE_DIR))
LOG_FILE = os.path.join(DATA_DIR, "camsight.log")


def reload_from_env() -> None:
    """Reload runtime configuration from environment variables."""
    global HOST, PORT, DEBUG, DECODER_DEBUG, CONSOLE_LOG, LOG_ENABLED
    global VERBOSE_HTTP_LOG, CORS_ORIGINS
    global REGISTRY_BACKEND, GST_INSPECT_BIN, GST_INSPECT_TIMEOUT_S
    global DECODER_DENYLIST, STATIC_ELEMENTS, WARM_DECODERS
    global DATA_DIR, LOG_FILE

    HOST = str(os.environ.get("CAMSIGHT_HOST", HOST) or HOST).strip()
    PORT = _env_int("CAMSIGHT_PORT", PORT)

    DEBUG = _env_bool("CAMSIGHT_DEBUG", False)
    DECODER_DEBUG = _env_bool("CAMSIGHT_DECODER_DEBUG", False)
    CONSOLE_LOG = _env_bool("CAMSIGHT_CONSOLE", False)
    LOG_ENABLED = _env_bool("CAMSIGHT_LOG", False) or CONSOLE_LOG
    VERBOSE_HTTP_LOG = _env_bool("CAMSIGHT_VERBOSE_HTTP_LOG", True)
    CORS_ORIGINS = _csv_list(os.environ.get("CAMSIGHT_CORS_ORIGINS", ",".join(CORS_ORIGINS))) or ["*"]

    REGISTRY_BACKEND = _registry_backend(os.environ.get("CAMSIGHT_REGISTRY_BACKEND", REGISTRY_BACKEND))
    GST_INSPECT_BIN = str(os.environ.get("CAMSIGHT_GST_INSPECT_BIN", GST_INSPECT_BIN) or "").strip()
    GST_INSPECT_TIMEOUT_S = max(0.5, _env_float("CAMSIGHT_GST_INSPECT_TIMEOUT_S", GST_INSPECT_TIMEOUT_S))
    DECODER_DENYLIST = _csv_list(os.environ.get("CAMSIGHT_DECODER_DENYLIST", ",".join(DECODER_DENYLIST)))
    STATIC_ELEMENTS = _csv_list(os.environ.get("CAMSIGHT_GST_ELEMENTS", ",".join(STATIC_ELEMENTS)))
    WARM_DECODERS = _env_bool("CAMSIGHT_WARM_DECODERS", WARM_DECODERS)

    DATA_DIR = os.path.abspath(str(os.environ.get("CAMSIGHT_DATA_DIR", DATA_DIR) or DATA_DIR))
    LOG_FILE = os.path.join(DATA_DIR, "camsight.log")
