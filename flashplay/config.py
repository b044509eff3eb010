"""Configuration helpers: data directory discovery, settings, frontmatter parsing."""

import os
import pathlib

DEFAULT_SETTINGS = {
    # scheduler
    "min_ease_factor": 1.3,
    "default_ease_factor": 2.5,
    "lapse_ease_penalty": 0.2,
    "fast_answer_seconds": 5,
    "slow_answer_seconds": 30,
    "fast_answer_scale": 0.8,
    "slow_answer_scale": 1.2,
    "mastered_interval_days": 21,
    "struggling_ease_factor": 2.0,
    "schedule_window_days": 30,
    # validator
    "max_text_length": 200,
    "min_options": 2,
    "max_options": 6,
}


def get_data_dir() -> pathlib.Path:
    env = os.environ.get("FLASHPLAY_DIR")
    if env:
        return pathlib.Path(env)
    config_path = pathlib.Path.home() / ".config" / "flashplay" / "config"
    if config_path.exists():
        for line in config_path.read_text().splitlines():
            line = line.strip()
            if line.startswith("DIR="):
                return pathlib.Path(line[4:].strip())
    return pathlib.Path.home() / ".local" / "share" / "flashplay"


def load_settings(data_dir: pathlib.Path | str | None = None) -> dict:
    """Defaults overlaid with data_dir/settings.toml, if present."""
    if data_dir is None:
        data_dir = get_data_dir()
    settings = dict(DEFAULT_SETTINGS)
    settings_path = pathlib.Path(data_dir) / "settings.toml"
    if settings_path.exists():
        settings.update(_parse_toml_simple(settings_path.read_text()))
    return settings


def _parse_toml_simple(text: str) -> dict:
    """Minimal TOML parser for flat key=value files."""
    result = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" in line:
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip()
            if v.startswith('"') and v.endswith('"'):
                v = v[1:-1]
            elif v.isdigit():
                v = int(v)
            elif v == "true":
                v = True
            elif v == "false":
                v = False
            else:
                try:
                    v = float(v)
                except ValueError:
                    pass
            result[k] = v
    return result


def parse_frontmatter(text: str) -> tuple[dict, str]:
    """Parse YAML frontmatter from markdown. Returns (metadata, body)."""
    if not text.startswith("---"):
        return {}, text
    end = text.find("\n---", 3)
    if end == -1:
        return {}, text
    yaml_block = text[3:end].strip()
    body = text[end + 4:].strip()
    meta = {}
    for line in yaml_block.splitlines():
        line = line.strip()
        if ":" in line:
            k, v = line.split(":", 1)
            k = k.strip()
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                v = [x.strip().strip('"').strip("'") for x in v[1:-1].split(",") if x.strip()]
            elif v.startswith('"') and v.endswith('"'):
                v = v[1:-1]
            elif v.startswith("'") and v.endswith("'"):
                v = v[1:-1]
            elif v.lower() == "true":
                v = True
            elif v.lower() == "false":
                v = False
            elif v.isdigit():
                v = int(v)
            meta[k] = v
    return meta, body
