from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from pdfchat_client.credentials import default_config_dir


def config_path(config_dir: Optional[Path] = None) -> Path:
    base = Path(config_dir) if config_dir else default_config_dir()
    return base / "config.json"


def load_config(config_dir: Optional[Path] = None) -> Dict[str, Any]:
    p = config_path(config_dir)
    if not p.exists():
        return {"url": None}
    cfg = json.loads(p.read_text(encoding="utf-8"))
    return cfg if isinstance(cfg, dict) else {"url": None}


def save_config(cfg: Dict[str, Any], config_dir: Optional[Path] = None) -> None:
    p = config_path(config_dir)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(cfg, indent=2, sort_keys=True), encoding="utf-8")
