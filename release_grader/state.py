"""
Key/value state handed from the setup phase to the run phase.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from release_grader.errors import ConfigError
from release_grader.utils.logging import logger


class StateStore:
    """JSON file of named values that survives between invocations."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def restore(self) -> Dict[str, Any]:
        """Return every saved value, or an empty dict if nothing was saved yet."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse state file {self.path}: {e}") from None

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a JSON object in state file {self.path}, got {type(data).__name__}")
        return data

    def save(self, **values: Any) -> None:
        """Merge ``values`` into the saved state."""
        data = self.restore()
        data.update(values)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))
        logger.debug(f"Saved state {', '.join(sorted(values))} to {self.path}")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
