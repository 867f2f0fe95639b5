"""Event sink writing JSON lines to a text stream."""

from __future__ import annotations

import json
import logging
import sys
from typing import TextIO

from devcaps.core.model import EventEnvelope

LOGGER = logging.getLogger(__name__)


class StreamSink:
    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def send(self, envelope: EventEnvelope) -> bool:
        try:
            line = json.dumps(envelope.to_dict(), sort_keys=True, allow_nan=False)
        except ValueError as exc:
            LOGGER.warning("Dropping '%s' event with non-JSON value: %s", envelope.action, exc)
            return False
        try:
            self.stream.write(line + "\n")
            self.stream.flush()
        except OSError as exc:
            LOGGER.warning("Dropping '%s' event: %s", envelope.action, exc)
            return False
        return True
