"""Custom alert sounds attached by the operator.

The core only keeps references; playing them is up to the dashboard. When
no custom sound is set the dashboard falls back to a synthesized tone
(880 Hz for critical, 440 Hz for warning).
"""

from __future__ import annotations

import base64
import io
import math
import struct
import wave
from dataclasses import dataclass
from typing import Any

from src.contracts.enums import Severity
from src.contracts.errors import AudioAssetError

MAX_AUDIO_BYTES = 5 * 1024 * 1024

DEFAULT_TONES: dict[Severity, tuple[float, float]] = {
    Severity.CRITICAL: (880.0, 0.5),  # Hz, seconds
    Severity.WARNING: (440.0, 0.3),
}


@dataclass(frozen=True, slots=True)
class AudioAsset:
    name: str
    mime: str
    data_b64: str

    @property
    def data(self) -> bytes:
        return base64.b64decode(self.data_b64)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "mime": self.mime, "data_b64": self.data_b64}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AudioAsset:
        return cls(name=str(data["name"]), mime=str(data["mime"]), data_b64=str(data["data_b64"]))


def make_audio_asset(name: str, mime: str | None, data: bytes) -> AudioAsset:
    """Validate an uploaded sound and wrap it as an AudioAsset.

    Raises:
        AudioAssetError: If the MIME type is not audio/* or the file exceeds 5 MB.
    """
    if not mime or not mime.startswith("audio/"):
        raise AudioAssetError("Please upload a valid audio file (MP3, WAV, OGG).")
    if len(data) > MAX_AUDIO_BYTES:
        raise AudioAssetError("File size exceeds 5MB limit.")
    return AudioAsset(name=name, mime=mime, data_b64=base64.b64encode(data).decode("ascii"))


def default_tone_wav(severity: Severity, sample_rate: int = 22050) -> bytes:
    """Render the fallback sine tone for *severity* as WAV bytes."""
    freq, duration = DEFAULT_TONES[severity]
    n = int(sample_rate * duration)
    frames = b"".join(
        struct.pack("<h", int(0.4 * 32767 * math.sin(2 * math.pi * freq * i / sample_rate)))
        for i in range(n)
    )
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(frames)
    return buf.getvalue()
