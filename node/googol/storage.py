# load / save the counter state as a JSON file
import logging
import os
import tempfile
from pathlib import Path
from typing import Union
from pydantic import ValidationError

from .models import CounterState

logger = logging.getLogger(__name__)


class StateFile:
    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> CounterState:
        """
        Load the saved state. A missing or unreadable file is replaced by a
        fresh zero state, which is written back immediately.
        """
        if not self.path.exists():
            state = CounterState()
            self.save(state)
            logger.info("Created counter state at %s", self.path)
            return state

        try:
            state = CounterState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning("Invalid counter state in %s, starting from zero: %s", self.path, e)
            state = CounterState()
            try:
                self.save(state)
            except OSError:
                logger.exception("Could not write fresh counter state to %s", self.path)
            return state

        logger.info("Loaded counter state from %s (count=%s)", self.path, state.count.value)
        return state

    def save(self, state: CounterState) -> None:
        """
        Write through a temp file + rename so a crash never leaves half a file.
        """
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(state.model_dump_json(indent=2))
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise
