"""Centralized constants and configuration loader.

This module provides access to configuration values and sensible defaults
for the store, scan flow, registration flow, detection and API. Values are
loaded from config/config.yaml when available, otherwise defaults are used.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

# Path to the default configuration file
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"

# Key under which the member list is stored in the namespace
MEMBERS_KEY = "faceID_members"

# Status messages shown while scanning
SCAN_STEP_MESSAGES: Tuple[str, ...] = (
    "Analyzing Facial Structure...",
    "Generating Hash...",
    "Querying Database...",
    "Verifying...",
)


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. Uses default if None.

    Returns:
        Configuration dictionary.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    try:
        if path.exists():
            with open(path, "r") as f:
                return yaml.safe_load(f) or {}
    except Exception as e:
        logger.warning(f"Failed to load config from {path}: {e}")

    return {}


def _get_nested(config: Dict, *keys: str, default: Any = None) -> Any:
    """Get nested config value with default fallback."""
    value = config
    for key in keys:
        if isinstance(value, dict):
            value = value.get(key)
        else:
            return default
        if value is None:
            return default
    return value


# ============================================================
# Storage Constants
# ============================================================

@dataclass
class StorageConfig:
    """Member store persistence settings."""
    # JSON file holding the key-value namespace
    path: str = "data/faceid_storage.json"
    # Key holding the serialized member list
    members_key: str = MEMBERS_KEY

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "StorageConfig":
        """Create from config dictionary."""
        st = _get_nested(config, "storage") or {}
        return cls(
            path=st.get("path", "data/faceid_storage.json"),
            members_key=st.get("members_key", MEMBERS_KEY),
        )


# ============================================================
# Scan Constants
# ============================================================

@dataclass
class ScanConfig:
    """Simulated scan timings (seconds)."""
    # Polling loop iterations
    iterations: int = 20
    # Delay between polling iterations
    poll_interval: float = 0.1
    # Minimum total scan duration
    min_duration: float = 2.5
    # Status text changes every N iterations
    status_every: int = 5

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ScanConfig":
        """Create from config dictionary."""
        sc = _get_nested(config, "scan") or {}
        return cls(
            iterations=sc.get("iterations", 20),
            poll_interval=sc.get("poll_interval_ms", 100) / 1000.0,
            min_duration=sc.get("min_duration_ms", 2500) / 1000.0,
            status_every=sc.get("status_every", 5),
        )


@dataclass
class AuthConfig:
    """Grant handling and detection policy."""
    # Redirect target on grant; None disables navigation
    redirect_url: Optional[str] = None
    # Delay showing the confirmation before leaving the login view
    confirm_delay: float = 1.5
    # Delay between hiding the login view and navigating
    transition_delay: float = 0.5
    # What an unavailable detector counts as: "fail_closed" or "fail_open"
    unavailable_policy: str = "fail_closed"
    # Identity matcher name
    matcher: str = "last_registered"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "AuthConfig":
        """Create from config dictionary."""
        au = _get_nested(config, "auth") or {}
        return cls(
            redirect_url=au.get("redirect_url"),
            confirm_delay=au.get("confirm_delay_ms", 1500) / 1000.0,
            transition_delay=au.get("transition_delay_ms", 500) / 1000.0,
            unavailable_policy=au.get("unavailable_policy", "fail_closed"),
            matcher=au.get("matcher", "last_registered"),
        )


@dataclass
class RegistrationConfig:
    """Simulated enrolment timings (seconds)."""
    capture_delay: float = 1.5
    saved_delay: float = 0.8

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RegistrationConfig":
        """Create from config dictionary."""
        rg = _get_nested(config, "registration") or {}
        return cls(
            capture_delay=rg.get("capture_delay_ms", 1500) / 1000.0,
            saved_delay=rg.get("saved_delay_ms", 800) / 1000.0,
        )


# ============================================================
# Detection / Camera Constants
# ============================================================

@dataclass
class DetectionConfig:
    """Face-signal detection settings."""
    backend: str = "haar_cascade"
    scale_factor: float = 1.1
    min_neighbors: int = 5
    min_size: Tuple[int, int] = (30, 30)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DetectionConfig":
        """Create from config dictionary."""
        dt = _get_nested(config, "detection") or {}
        min_size = dt.get("min_size", [30, 30])
        return cls(
            backend=dt.get("backend", "haar_cascade"),
            scale_factor=dt.get("scale_factor", 1.1),
            min_neighbors=dt.get("min_neighbors", 5),
            min_size=tuple(min_size),
        )

    def backend_kwargs(self) -> Dict[str, Any]:
        """Constructor arguments for the configured backend."""
        if self.backend == "haar_cascade":
            return {
                "scale_factor": self.scale_factor,
                "min_neighbors": self.min_neighbors,
                "min_size": self.min_size,
            }
        return {}


@dataclass
class CameraSettings:
    """Camera device settings for the main and registration views."""
    main_device: int = 0
    registration_device: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CameraSettings":
        """Create from config dictionary."""
        cam = _get_nested(config, "camera") or {}
        resolution = cam.get("resolution", [640, 480])
        return cls(
            main_device=cam.get("main_device", 0),
            registration_device=cam.get("registration_device", 0),
            width=resolution[0],
            height=resolution[1],
            fps=cam.get("fps", 30),
        )


@dataclass
class ApiConfig:
    """HTTP API settings."""
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ApiConfig":
        """Create from config dictionary."""
        api = _get_nested(config, "api") or {}
        return cls(
            host=api.get("host", "127.0.0.1"),
            port=api.get("port", 8000),
        )


# ============================================================
# Global Config Instance (lazy loaded)
# ============================================================

class Config:
    """Global configuration singleton."""

    _instance: Optional["Config"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load()
        return cls._instance

    def _load(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file."""
        self._config = load_config(config_path)
        self._cache: Dict[str, Any] = {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Standalone config built from a dictionary, not the global one."""
        instance = object.__new__(cls)
        instance._config = data or {}
        instance._cache = {}
        return instance

    def reload(self, config_path: Optional[Path] = None) -> None:
        """Reload configuration from file."""
        self._load(config_path)

    def _section(self, name: str, factory) -> Any:
        if name not in self._cache:
            self._cache[name] = factory.from_config(self._config)
        return self._cache[name]

    @property
    def storage(self) -> StorageConfig:
        """Get storage config."""
        return self._section("storage", StorageConfig)

    @property
    def scan(self) -> ScanConfig:
        """Get scan config."""
        return self._section("scan", ScanConfig)

    @property
    def auth(self) -> AuthConfig:
        """Get auth config."""
        return self._section("auth", AuthConfig)

    @property
    def registration(self) -> RegistrationConfig:
        """Get registration config."""
        return self._section("registration", RegistrationConfig)

    @property
    def detection(self) -> DetectionConfig:
        """Get detection config."""
        return self._section("detection", DetectionConfig)

    @property
    def camera(self) -> CameraSettings:
        """Get camera config."""
        return self._section("camera", CameraSettings)

    @property
    def api(self) -> ApiConfig:
        """Get API config."""
        return self._section("api", ApiConfig)

    def get(self, *keys: str, default: Any = None) -> Any:
        """Get a config value by key path."""
        return _get_nested(self._config, *keys, default=default)


def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
