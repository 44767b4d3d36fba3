import yaml
import os
import platform
from dataclasses import dataclass, field

VALID_FORMATTING_MODES = {"pretty", "compact"}


@dataclass(frozen=True)
class Formatting:
    """Layout options for generated JSON bodies (list/object whitespace)."""
    mode: str = "pretty"
    indent: int = 2

    @property
    def pretty(self) -> bool:
        return self.mode == "pretty"


@dataclass(frozen=True)
class Settings:
    formatting: Formatting = field(default_factory=Formatting)
    include_deprecated: bool = False


def load_config():
    # Assuming this file is at 'repo/utils/config.py', we go up one level.
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

    # Platform-specific config mapping
    config_map = {
        'Darwin': 'config.mac.yaml',
        'Windows': 'config.windows.yaml'
    }

    system = platform.system()
    platform_config = config_map.get(system)

    # Use platform-specific config if it exists, otherwise fall back to config.yaml
    candidate_files = [platform_config, 'config.yaml'] if platform_config else ['config.yaml']

    for filename in candidate_files:
        config_path = os.path.join(repo_root, filename)
        if os.path.exists(config_path):
            with open(config_path, 'r') as file:
                try:
                    return yaml.safe_load(file)
                except yaml.YAMLError as e:
                    raise ValueError(f"Error parsing '{filename}': {e}")

    raise FileNotFoundError("No valid configuration file found (checked platform-specific and default).")


def load_settings(config=None) -> Settings:
    """
    Build the body rendering Settings from the 'hurl' block of config.yaml.

    Missing keys fall back to the Formatting defaults.

    Raises:
        ValueError: If the formatting mode or indent is invalid.
    """
    if config is None:
        config = load_config()

    hurl_cfg = (config or {}).get("hurl") or {}
    if not isinstance(hurl_cfg, dict):
        raise ValueError("'hurl' must be a mapping (dict) in config.yaml.")

    fmt_cfg = hurl_cfg.get("formatting") or {}
    if not isinstance(fmt_cfg, dict):
        raise ValueError("'hurl.formatting' must be a mapping (dict).")

    mode = str(fmt_cfg.get("mode", "pretty")).lower().strip()
    if mode not in VALID_FORMATTING_MODES:
        raise ValueError(
            f"Unknown formatting mode '{mode}'. "
            f"Valid options: {', '.join(sorted(VALID_FORMATTING_MODES))}"
        )

    indent = fmt_cfg.get("indent", 2)
    if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
        raise ValueError(
            f"'hurl.formatting.indent' must be a non-negative integer, got: {indent!r}"
        )

    return Settings(
        formatting=Formatting(mode=mode, indent=indent),
        include_deprecated=bool(hurl_cfg.get("include_deprecated", False)),
    )


if __name__ == '__main__':
    # For testing purposes, print the configuration and derived settings.
    config = load_config()
    print("Loaded general configuration:")
    print(config)
    print(load_settings(config))
