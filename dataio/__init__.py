# Lazy wrapper to avoid importing configuration at package import time (prevents circular imports)
def get_config(*args, **kwargs):
    from .configuration import get_config as _get_config
    return _get_config(*args, **kwargs)

# Lazy wrappers for scene loading so `import dataio` stays free of PyYAML
def load_scene(*args, **kwargs):
    from .scene_loader import load_scene as _load_scene
    return _load_scene(*args, **kwargs)

def get_default_scene_path(*args, **kwargs):
    from .scene_loader import get_default_scene_path as _get_default_scene_path
    return _get_default_scene_path(*args, **kwargs)

__all__ = [
    "get_config",
    "load_scene",
    "get_default_scene_path",
]
