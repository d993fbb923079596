# topmark:header:start
#
#   project      : ReqPipe
#   file         : io.py
#   file_relpath : src/reqpipe/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load ReqPipe configuration from TOML files.

Two sources are supported:
- ``reqpipe.toml``: options live at the top level of the document;
- ``pyproject.toml``: options live under ``[tool.reqpipe]``.

Parsing is done with `tomlkit` and returned as plain `dict` structures, ready
for [`PipelineOptions.from_config`][reqpipe.config.options.PipelineOptions.from_config].

Example ``reqpipe.toml``:

```toml
max_redirects = 5

[headers]
accept = "application/json"

[retry]
delay = 500
max_attempts = 3
```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from reqpipe.config.logging import get_logger
from reqpipe.constants import CONFIG_FILE_NAME, PYPROJECT_FILE_NAME, PYPROJECT_TOOL_SECTION
from reqpipe.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from reqpipe.config.logging import ReqpipeLogger

logger: ReqpipeLogger = get_logger(__name__)

TomlTable = dict[str, Any]


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path (Path): Path to a TOML document.

    Returns:
        TomlTable: The parsed TOML content as plain Python values.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        raise ConfigError(f"cannot read {path}: {e}") from e
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        raise ConfigError(f"invalid TOML in {path}: {e}") from e
    data: Any = doc.unwrap()
    return data if isinstance(data, dict) else {}


def load_config_file(path: Path) -> TomlTable:
    """Return the ReqPipe options table from ``path``.

    For a file named ``pyproject.toml`` the ``[tool.reqpipe]`` table is
    returned (empty if absent); any other file is used as a whole.

    Raises:
        ConfigError: If the file is unreadable, invalid, or the options are
            not a table.
    """
    data: TomlTable = load_toml_dict(path)
    if path.name == PYPROJECT_FILE_NAME:
        tool: Any = data.get("tool", {})
        data = tool.get(PYPROJECT_TOOL_SECTION, {}) if isinstance(tool, dict) else {}
        if not isinstance(data, dict):
            raise ConfigError(f"[tool.{PYPROJECT_TOOL_SECTION}] in {path} must be a table")
    logger.debug("Loaded config from %s: keys=%s", path, sorted(data))
    return data


def discover_config(directory: Path) -> Path | None:
    """Return the first config file found in ``directory``.

    ``reqpipe.toml`` wins over ``pyproject.toml``; a ``pyproject.toml`` only
    counts when it has a ``[tool.reqpipe]`` table.
    """
    candidate: Path = directory / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    pyproject: Path = directory / PYPROJECT_FILE_NAME
    if pyproject.is_file():
        try:
            if load_config_file(pyproject):
                return pyproject
        except ConfigError:
            logger.warning("Ignoring unreadable %s during discovery", pyproject)
    return None
