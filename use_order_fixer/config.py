import logging
from pathlib import Path
import tomllib
from typing import Optional

from use_order_fixer.diagnostics import ORDER_OF_USE

LOG = logging.getLogger(__name__)

LEVELS = ("allow", "warn", "deny")
DEFAULT_LEVEL = ORDER_OF_USE.default_level
METADATA_KEY = "use-order"


def _load_toml(path: Path) -> Optional[dict]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        LOG.warning("Ignoring unreadable %s: %s", path, e)
        return None


def _validate_level(level, source: Path) -> Optional[str]:
    if level is None:
        return None
    if level not in LEVELS:
        LOG.warning("Unknown lint level %r in %s, expected one of %s", level, source, ", ".join(LEVELS))
        return None
    return level


def read_lint_level(root: str) -> str:
    """Detect the lint level from Cargo.toml metadata or use-order.toml, or use the default."""
    root = Path(root)

    cargo_path = root / "Cargo.toml"
    if cargo_path.exists():
        data = _load_toml(cargo_path) or {}
        for table in ("package", "workspace"):
            section = data.get(table, {}).get("metadata", {}).get(METADATA_KEY, {})
            level = _validate_level(section.get("level"), cargo_path)
            if level:
                return level

    own_path = root / "use-order.toml"
    if own_path.exists():
        data = _load_toml(own_path) or {}
        level = _validate_level(data.get("level"), own_path)
        if level:
            return level

    return DEFAULT_LEVEL
