"""Configuration file handling for quickpick."""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .ranking import RankingOptions

logger = logging.getLogger(__name__)


@dataclass
class ListConfig:
    """Dropdown list settings."""

    max_items_to_show: int = 5  # 0 = no limit
    open_on_focus: bool = True
    select_first_match: bool = True
    highlight_matches: bool = True
    show_other_matches: bool = True


@dataclass
class InputConfig:
    """Input box behaviour."""

    clear_on_escape: bool = True
    clear_after_selection: bool = False
    allow_custom_values: bool = True
    emit_null_on_input_clear: bool = True


@dataclass
class RankingConfig:
    """Result ordering settings."""

    prioritize_shorter_values: bool = False
    prioritize_primary_match: bool = False
    other_match_fields: list[str] = field(default_factory=list)


@dataclass
class Config:
    """Main configuration container."""

    list: ListConfig = field(default_factory=ListConfig)
    input: InputConfig = field(default_factory=InputConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)

    def ranking_options(self) -> RankingOptions:
        return RankingOptions(
            prioritize_shorter_values=self.ranking.prioritize_shorter_values,
            prioritize_primary_match=self.ranking.prioritize_primary_match,
        )


def find_config_file(base_dir: Path | None = None) -> Path | None:
    """Find config file in base dir (defaults to cwd) or user config dir."""
    candidates = []

    base_dir = base_dir or Path.cwd()
    candidates.append(base_dir / ".quickpickrc")
    candidates.append(base_dir / ".quickpickrc.toml")

    config_home = Path.home() / ".config" / "quickpick"
    candidates.append(config_home / "config.toml")

    for path in candidates:
        if path.exists():
            return path

    return None


def load_config(base_dir: Path | None = None, path: Path | None = None) -> Config:
    """Load configuration from file or return defaults."""
    config_path = path or find_config_file(base_dir)

    if config_path is None:
        return Config()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except Exception as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return Config()

    config = Config()

    if "list" in data:
        ls = data["list"]
        config.list = ListConfig(
            max_items_to_show=ls.get("max_items_to_show", config.list.max_items_to_show),
            open_on_focus=ls.get("open_on_focus", config.list.open_on_focus),
            select_first_match=ls.get("select_first_match", config.list.select_first_match),
            highlight_matches=ls.get("highlight_matches", config.list.highlight_matches),
            show_other_matches=ls.get("show_other_matches", config.list.show_other_matches),
        )

    if "input" in data:
        inp = data["input"]
        config.input = InputConfig(
            clear_on_escape=inp.get("clear_on_escape", config.input.clear_on_escape),
            clear_after_selection=inp.get("clear_after_selection", config.input.clear_after_selection),
            allow_custom_values=inp.get("allow_custom_values", config.input.allow_custom_values),
            emit_null_on_input_clear=inp.get(
                "emit_null_on_input_clear", config.input.emit_null_on_input_clear
            ),
        )

    if "ranking" in data:
        rk = data["ranking"]
        config.ranking = RankingConfig(
            prioritize_shorter_values=rk.get(
                "prioritize_shorter_values", config.ranking.prioritize_shorter_values
            ),
            prioritize_primary_match=rk.get(
                "prioritize_primary_match", config.ranking.prioritize_primary_match
            ),
            other_match_fields=list(rk.get("other_match_fields", config.ranking.other_match_fields)),
        )

    if config.list.max_items_to_show < 0:
        raise ValueError(f"list.max_items_to_show must be >= 0 in {config_path}")

    logger.debug("Loaded config from %s", config_path)
    return config
