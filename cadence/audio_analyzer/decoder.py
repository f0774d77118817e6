"""Decoding of uploaded audio bytes into a sample buffer."""

import io
import logging

import librosa
import numpy as np

logger = logging.getLogger(__name__)


class AudioDecodeError(ValueError):
    """Raised when an audio buffer cannot be decoded."""


def decode_audio(data: bytes) -> tuple[np.ndarray, int]:
    """Decode an audio byte buffer at its native sample rate.

    Only the first (left) channel is kept for multichannel input.

    Args:
        data: Encoded audio (wav, flac, ogg, ...).

    Returns:
        Tuple of (mono float32 samples, sample rate).

    Raises:
        AudioDecodeError: If the buffer is empty or not decodable.
    """
    if not data:
        msg = "Audio buffer is empty"
        raise AudioDecodeError(msg)

    try:
        y, sr = librosa.load(io.BytesIO(data), sr=None, mono=False)
    except Exception as e:
        logger.warning("Audio decode failed: %s: %s", type(e).__name__, e)
        msg = f"Unable to decode audio: {e}"
        raise AudioDecodeError(msg) from e

    samples = np.asarray(y, dtype=np.float32)
    if samples.ndim > 1:
        samples = samples[0]

    if samples.size == 0:
        msg = "Decoded audio contains no samples"
        raise AudioDecodeError(msg)

    return samples, int(sr)
