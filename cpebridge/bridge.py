"""Gateway between a serial line and CPE radio frames.

Serial lines of the form ``SETORDER,<id>,<TLHP>`` become encrypted CONTROL
frames. Received radio frames become JSON lines for the serial side.
"""

from __future__ import annotations

import argparse
import re
import sys
from collections.abc import Iterable

from .cpe import PAYLOAD_LEN, CpeCodec, CpeError, FrameType, Measure, Sensor, ctrl_pack

DEFAULT_KEY = bytes(range(16))

_LINE_LIMIT = 31
_DELIMITERS = re.compile(r"[,:\r\n]+")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_COMMANDS = ("SETORDER", "setorder")
_SENSOR_LETTERS = {"T": Sensor.T, "L": Sensor.L, "H": Sensor.H, "P": Sensor.P}


def order_string_to_ctrl(s: str) -> int:
    """Turn a four-letter order such as ``"TLHP"`` into a control byte.

    Letters are T, L, H and P in either case. Raises ValueError otherwise.
    """
    if len(s) != 4:
        raise ValueError(f"order must be exactly 4 letters: {s!r}")
    try:
        sensors = [_SENSOR_LETTERS[c.upper()] for c in s]
    except KeyError:
        raise ValueError(f"order may only use T, L, H and P: {s!r}") from None
    return ctrl_pack(*sensors)


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_serial_command(line: str) -> tuple[int, int]:
    """Parse a ``SETORDER,<id>,<order>`` line into ``(device_id, ctrl)``.

    Only the first 31 characters are considered. Commas, colons and line
    breaks all separate fields, and empty fields are skipped. The id is read
    like a leading decimal integer and reduced to one byte. Raises ValueError
    for anything that is not a valid command.
    """
    tokens = [t for t in _DELIMITERS.split(line[:_LINE_LIMIT]) if t]
    if not tokens or tokens[0] not in _COMMANDS:
        raise ValueError(f"not a SETORDER command: {line!r}")
    if len(tokens) < 3:
        raise ValueError(f"incomplete SETORDER command: {line!r}")
    dev = _atoi(tokens[1]) & 0xFF
    return dev, order_string_to_ctrl(tokens[2])


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // b
    return q if a >= 0 else -q


def format_measure_json(dev: int, measure: Measure) -> str:
    """Render a measurement as the JSON line sent on the serial side."""
    t = measure.temperature_centi
    h = measure.humidity_centi
    p = measure.pressure_decihPa
    return (
        f'{{"id":{dev},'
        f'"t":{_trunc_div(t, 100)}.{abs(t) % 100:02d},'
        f'"h":{h // 100}.{h % 100:02d},'
        f'"p":{p // 10}.{p % 10:01d},'
        f'"lux":{measure.lux}}}\r\n'
    )


def format_control_json(ctrl: int, dev: int) -> str:
    """Render a received control frame as a JSON line."""
    return f'{{"ctrl":{ctrl:02X},"id":{dev}}}\r\n'


class Bridge:
    """Translates serial commands to radio frames and radio frames to JSON."""

    def __init__(self, key: bytes = DEFAULT_KEY) -> None:
        self._codec = CpeCodec(key)
        self._seq = 0
        self._buffer: list[str] = []

    def handle_serial_line(self, line: str) -> bytes | None:
        """Return the CONTROL frame for a command line, or None if it is ignored."""
        try:
            dev, ctrl = parse_serial_command(line)
        except ValueError:
            return None
        frame = self._codec.build_control_frame(ctrl, dev, self._seq)
        self._seq = (self._seq + 1) & 0xFF
        return frame

    def handle_radio_packet(self, packet: bytes) -> str | None:
        """Return the JSON line for a received packet, or None if it is dropped."""
        packet = bytes(packet)
        if len(packet) != PAYLOAD_LEN:
            return None
        try:
            frame = self._codec.parse_frame(packet)
        except CpeError:
            return None
        if frame.type is FrameType.MEASURE and frame.measure is not None:
            return format_measure_json(frame.dev, frame.measure)
        if frame.ctrl is None:
            return None
        return format_control_json(frame.ctrl, frame.dev)

    def feed_serial(self, chars: Iterable[str]) -> list[bytes]:
        """Consume serial characters and return the frames completed lines produced.

        A line ends at CR or LF; empty lines are skipped. Characters after the
        last line break are kept for the next call.
        """
        frames: list[bytes] = []
        for c in chars:
            if c in "\r\n":
                if self._buffer:
                    frame = self.handle_serial_line("".join(self._buffer))
                    if frame is not None:
                        frames.append(frame)
                self._buffer = []
            else:
                self._buffer.append(c)
        return frames


def _parse_key(text: str) -> bytes:
    try:
        key = bytes.fromhex(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"key is not hexadecimal: {text!r}") from None
    if len(key) != 16:
        raise argparse.ArgumentTypeError("key must be 16 bytes (32 hex digits)")
    return key


def main(argv: list[str] | None = None) -> int:
    """Run the bridge over standard input and output.

    By default input is serial text and each resulting radio frame is printed
    as hex. With ``--decode`` each input line is a hex radio packet and the
    JSON line it yields is printed.
    """
    parser = argparse.ArgumentParser(prog="cpebridge", description="CPE radio bridge")
    parser.add_argument("--key", type=_parse_key, default=DEFAULT_KEY,
                        help="AES-128 key as 32 hex digits")
    parser.add_argument("--decode", action="store_true",
                        help="read hex radio packets and print JSON")
    args = parser.parse_args(argv)

    bridge = Bridge(args.key)
    if args.decode:
        for line in sys.stdin:
            try:
                packet = bytes.fromhex(line.strip())
            except ValueError:
                continue
            out = bridge.handle_radio_packet(packet)
            if out is not None:
                sys.stdout.write(out)
    else:
        for chunk in sys.stdin:
            for frame in bridge.feed_serial(chunk):
                sys.stdout.write(frame.hex() + "\n")
        for frame in bridge.feed_serial("\n"):
            sys.stdout.write(frame.hex() + "\n")
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())