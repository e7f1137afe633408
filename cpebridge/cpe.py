"""CPE v2 radio frame codec: 12-byte frames, AES-128-CTR encrypted."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .aes import AES128
from .ctr import ctr_crypt

PLAINTEXT_LEN = 11
PAYLOAD_LEN = 12
KEY_LEN = 16


class CpeError(ValueError):
    """Raised when a frame cannot be decoded."""


class FrameType(enum.IntEnum):
    MEASURE = 0x01
    CONTROL = 0x02


class Sensor(enum.IntEnum):
    T = 0
    L = 1
    H = 2
    P = 3


def ctrl_pack(l0: Sensor, l1: Sensor, l2: Sensor, l3: Sensor) -> int:
    """Pack four display-line sensors into one control byte, two bits each."""
    return (
        (int(l0) & 3)
        | ((int(l1) & 3) << 2)
        | ((int(l2) & 3) << 4)
        | ((int(l3) & 3) << 6)
    )


def ctrl_unpack(c: int) -> tuple[Sensor, Sensor, Sensor, Sensor]:
    """Split a control byte into its four display-line sensors."""
    _check_byte("ctrl", c)
    return tuple(Sensor((c >> shift) & 3) for shift in (0, 2, 4, 6))  # type: ignore[return-value]


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must fit in one byte: {value!r}")


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} out of range [{low}, {high}]: {value!r}")


@dataclass(frozen=True)
class Measure:
    """Raw sensor readings as carried on the wire."""

    temperature_centi: int
    humidity_centi: int
    pressure_decihPa: int
    lux: int

    def __post_init__(self) -> None:
        _check_range("temperature_centi", self.temperature_centi, -0x8000, 0x7FFF)
        _check_range("humidity_centi", self.humidity_centi, 0, 0xFFFF)
        _check_range("pressure_decihPa", self.pressure_decihPa, 0, 0xFFFF)
        _check_range("lux", self.lux, -0x8000, 0x7FFF)


@dataclass(frozen=True)
class Frame:
    """A decoded frame; ``measure`` or ``ctrl`` is set according to ``type``."""

    type: FrameType
    dev: int
    measure: Measure | None = None
    ctrl: int | None = None


class CpeCodec:
    """Builds and parses CPE frames under one shared key."""

    def __init__(self, key: bytes) -> None:
        key = bytes(key)
        if len(key) != KEY_LEN:
            raise ValueError(f"key must be {KEY_LEN} bytes, got {len(key)}")
        self._cipher = AES128(key)

    def _crypt(self, data: bytes, seq: int) -> bytes:
        iv = bytes(15) + bytes([seq])
        out, _ = ctr_crypt(self._cipher, data, iv)
        return out

    def _build(self, plain: bytes, seq: int) -> bytes:
        _check_byte("seq", seq)
        return bytes([seq]) + self._crypt(plain, seq)

    def build_measure_frame(self, measure: Measure, dev: int, seq: int) -> bytes:
        """Return the 12-byte encrypted frame carrying ``measure``."""
        _check_byte("dev", dev)
        plain = (
            bytes([FrameType.MEASURE, dev])
            + (measure.temperature_centi & 0xFFFF).to_bytes(2, "big")
            + measure.humidity_centi.to_bytes(2, "big")
            + measure.pressure_decihPa.to_bytes(2, "big")
            + (measure.lux & 0xFFFF).to_bytes(2, "big")
            + b"\x00"
        )
        return self._build(plain, seq)

    def build_control_frame(self, ctrl: int, dev: int, seq: int) -> bytes:
        """Return the 12-byte encrypted frame carrying a control byte."""
        _check_byte("dev", dev)
        _check_byte("ctrl", ctrl)
        plain = bytes([FrameType.CONTROL, dev, ctrl]).ljust(PLAINTEXT_LEN, b"\x00")
        return self._build(plain, seq)

    def parse_frame(self, frame: bytes) -> Frame:
        """Decrypt and decode a 12-byte frame."""
        frame = bytes(frame)
        if len(frame) != PAYLOAD_LEN:
            raise CpeError(f"frame must be {PAYLOAD_LEN} bytes, got {len(frame)}")
        buf = self._crypt(frame[1:], frame[0])
        try:
            frame_type = FrameType(buf[0])
        except ValueError:
            raise CpeError(f"unknown frame type: {buf[0]:#04x}") from None
        dev = buf[1]
        if frame_type is FrameType.MEASURE:
            measure = Measure(
                temperature_centi=int.from_bytes(buf[2:4], "big", signed=True),
                humidity_centi=int.from_bytes(buf[4:6], "big"),
                pressure_decihPa=int.from_bytes(buf[6:8], "big"),
                lux=int.from_bytes(buf[8:10], "big", signed=True),
            )
            return Frame(frame_type, dev, measure=measure)
        return Frame(frame_type, dev, ctrl=buf[2])