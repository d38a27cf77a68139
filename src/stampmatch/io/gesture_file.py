"""
Recorded gesture files.

A gesture file is JSON describing the capture mode and the ordered input
events of one stamp:

    {
      "mode": "auto",
      "width": 400,
      "height": 400,
      "events": [
        {"kind": "start", "samples": [{"x": 10, "y": 12, "pressure": 0.7, "timestamp": 0}]},
        {"kind": "move", "samples": [...]},
        {"kind": "end"}
      ]
    }

width and height are optional and default to the configured surface size.
"""

import json
import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from stampmatch.capture.surface import StampSurface
from stampmatch.models import CaptureMode, ContactSample, GestureKind
from stampmatch.tracer import get_tracer, trace


class GestureEvent(BaseModel):
    """One recorded input event."""
    kind: GestureKind
    samples: List[ContactSample] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class GestureRecording(BaseModel):
    """A complete recorded gesture."""
    mode: CaptureMode = CaptureMode.AUTO
    width: Optional[int] = Field(default=None, ge=0)
    height: Optional[int] = Field(default=None, ge=0)
    events: List[GestureEvent] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


def load_gesture(path):
    """
    Load and validate a gesture file.

    Raises FileNotFoundError if path does not exist and
    pydantic.ValidationError if the content is malformed.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Gesture file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return GestureRecording.model_validate(data)


@trace(label="replay_gesture")
def replay_gesture(recording, config=None):
    """
    Drive a fresh surface through a recorded gesture.

    A recording without an end or cancel event is finished implicitly.

    Returns:
        RasterBuffer of the finished stamp
    """
    tracer = get_tracer()
    surface = StampSurface(recording.mode, config, width=recording.width, height=recording.height)

    buffer = None
    for event in recording.events:
        result = surface.handle(event.kind, event.samples)
        if result is not None:
            buffer = result

    if buffer is None or surface.is_capturing:
        buffer = surface.end_gesture()

    tracer.event(f"Replayed {len(recording.events)} events", mode=recording.mode)
    return buffer
