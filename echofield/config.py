from __future__ import annotations

import copy
import json
import logging
from pathlib import Path

from .radial import RadialParams

logger = logging.getLogger(__name__)

DEFAULTS = {
    "port": 8000,
    "host": "0.0.0.0",
    "store": "notes.json",
    "allow_posting": True,
    "poll_interval": 15,
    "feed_limit": 50,
    "max_sessions": 1000,
    "virtual_root_label": "Hello Nostr World",
    "layout": {
        "ring_ratio": 0.25,
        "fan_radius": 60.0,
        "fan_step": 0.2,
        "node_radii": [40.0, 10.0, 6.0],
        "max_depth": 2,
        "min_viewport": 50.0,
        "label_length": 20,
    },
    "viewport": {
        "width": 800,
        "height": 500,
        "min_scale": 0.1,
        "max_scale": 5.0,
    },
}


def load_config(path: Path) -> dict:
    cfg = copy.deepcopy(DEFAULTS)
    if path.is_file():
        try:
            with open(path) as f:
                user = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("could not load %s: %s", path.name, e)
            return cfg
        for key, value in user.items():
            if isinstance(value, dict) and isinstance(cfg.get(key), dict):
                cfg[key].update(value)
            else:
                cfg[key] = value
    return cfg


def layout_params(cfg: dict) -> RadialParams:
    lay = cfg["layout"]
    return RadialParams(
        ring_ratio=float(lay["ring_ratio"]),
        fan_radius=float(lay["fan_radius"]),
        fan_step=float(lay["fan_step"]),
        node_radii=tuple(float(r) for r in lay["node_radii"]),
        max_depth=None if lay["max_depth"] is None else int(lay["max_depth"]),
        min_viewport=float(lay["min_viewport"]),
        label_length=int(lay["label_length"]),
    )
