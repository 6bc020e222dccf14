from __future__ import annotations
import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

DEFAULT_PIXEL_TOLERANCE = 10.0
DELETE_CONDITIONS = ("single_click", "alt_click", "never")


@dataclass
class Config:
    # hit-test tolerance in screen pixels
    pixel_tolerance: float = DEFAULT_PIXEL_TOLERANCE
    # named delete gesture, see viewmodel.pointer.condition_from_name
    delete_condition: str = "single_click"
    # use Catmull-Rom tangents when turning lines into chains
    smooth_new_chains: bool = False
    marker_size: int = 10
    handle_size: int = 7
    # samples per curve when drawing chains
    curve_samples: int = 32
    last_scene_file: Optional[str] = None
    config_folder: str = ""
    config_filename: str = "settings.json"

    def __post_init__(self):
        self.config_folder = str(self.config_folder or "")

    @property
    def config_path(self) -> Path:
        return Path(self.config_folder) / self.config_filename

    def validate(self) -> "Config":
        """Replace out-of-range values with defaults; returns self."""
        try:
            tol = float(self.pixel_tolerance)
        except (TypeError, ValueError):
            tol = DEFAULT_PIXEL_TOLERANCE
        self.pixel_tolerance = tol if tol > 0 else DEFAULT_PIXEL_TOLERANCE
        if self.delete_condition not in DELETE_CONDITIONS:
            self.delete_condition = "single_click"
        self.smooth_new_chains = bool(self.smooth_new_chains)
        self.marker_size = max(int(self.marker_size), 1)
        self.handle_size = max(int(self.handle_size), 1)
        self.curve_samples = max(int(self.curve_samples), 2)
        return self

    def to_dict(self) -> dict:
        data = asdict(self)
        # location is implied by where the file lives
        data.pop("config_folder", None)
        data.pop("config_filename", None)
        return data

    def save(self) -> None:
        cfg_path = self.config_path
        cfg_path.parent.mkdir(parents=True, exist_ok=True)
        tmp = cfg_path.with_suffix(cfg_path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        tmp.replace(cfg_path)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        if path is None:
            raise ValueError("path must be provided for load()")
        path = Path(path)
        if not path.exists():
            # return default config with folder set
            return cls(config_folder=str(path.parent), config_filename=path.name)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            cfg = cls(
                pixel_tolerance=data.get("pixel_tolerance", DEFAULT_PIXEL_TOLERANCE),
                delete_condition=data.get("delete_condition", "single_click"),
                smooth_new_chains=data.get("smooth_new_chains", False),
                marker_size=data.get("marker_size", 10),
                handle_size=data.get("handle_size", 7),
                curve_samples=data.get("curve_samples", 32),
                last_scene_file=data.get("last_scene_file"),
                config_folder=str(path.parent),
                config_filename=path.name,
            )
            return cfg.validate()
        except (OSError, ValueError, TypeError, AttributeError):
            # on parse error return defaults and keep config folder
            return cls(config_folder=str(path.parent), config_filename=path.name)

# Module-level singleton accessor
_config_singleton: Optional[Config] = None

def _default_repo_config_folder() -> Path:
    # repo root is one level up from this file: .../dataio/configuration.py
    repo_root = Path(__file__).resolve().parent.parent
    return repo_root / "config"

def get_config(recreate: bool = False) -> Config:
    """
    Return a singleton Config instance.
    On first call the JSON file in the repo config folder is loaded (or created).
    Set recreate=True to reload from disk.
    """
    global _config_singleton
    if _config_singleton is not None and not recreate:
        return _config_singleton

    cfg_folder = _default_repo_config_folder()
    cfg_file = cfg_folder / "settings.json"
    if cfg_file.exists():
        cfg = Config.load(cfg_file)
    else:
        cfg = Config(config_folder=str(cfg_folder), config_filename="settings.json")
        cfg.save()
    _config_singleton = cfg
    return _config_singleton
