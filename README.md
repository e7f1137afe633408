# cpebridge

Codec and gateway logic for the CPE v2 sensor radio protocol.

A CPE v2 frame is 12 bytes long: one sequence byte followed by 11 bytes
encrypted with AES-128 in CTR mode. The counter block is fifteen zero
bytes followed by the sequence byte. A frame carries either a measurement
from a sensor node (temperature, humidity, pressure, light) or a control
order telling a node in which order to show its four readings.

## Modules

- `cpebridge.utils` – `double_byte` (multiply by x in GF(2^8)) and
  `compare` (compare two equal-length byte strings without early exit;
  returns 0 when equal).
- `cpebridge.aes` – AES-128 block encryption: `AES128(key).encrypt_block(block)`
  and `expand_key(key)`, which returns the 44 words of the key schedule.
- `cpebridge.ctr` – `ctr_crypt(cipher, data, counter)`, returning the
  processed data and the next counter value. Only the last four counter
  bytes are incremented, wrapping at 2**32.
- `cpebridge.cmac` – AES-128-CMAC: the incremental `Cmac` class
  (`update`, `digest`, `reset`), the one-shot `cmac(key, data)` and
  `gf_double(block)`.
- `cpebridge.cpe` – the frame codec: `CpeCodec`, `Measure`, `Frame`,
  `FrameType`, `Sensor`, `ctrl_pack`, `ctrl_unpack` and `CpeError`.
- `cpebridge.bridge` – the gateway: `Bridge`, `order_string_to_ctrl`,
  `parse_serial_command`, `format_measure_json`, `format_control_json`
  and the `main` entry point.

## Installation

```
pip install .
```

The package needs nothing beyond the standard library. For the tests:

```
pip install ".[test]"
pytest
```

## Control orders

A control order is four letters, one per display line, taken from `T`
(temperature), `L` (light), `H` (humidity) and `P` (pressure), in either
case. Each letter is packed into two bits of a control byte, first line
in the lowest bits:

```python
from cpebridge.bridge import order_string_to_ctrl, format_control_json

ctrl = order_string_to_ctrl("TLHP")   # 0xE4
print(format_control_json(ctrl, 3), end="")
# {"ctrl":E4,"id":3}
```

`order_string_to_ctrl` raises `ValueError` for anything else.
`ctrl_unpack` turns a control byte back into four `Sensor` values.

Serial command lines have the form

```
SETORDER,<id>,<TLHP>
```

`setorder` in lower case is accepted too, `:` may stand for `,`, and only
the first 31 characters of a line are read. `parse_serial_command` returns
`(device_id, ctrl)` or raises `ValueError`.

## Using the codec

Both ends must share the same 16-byte key:

```python
from cpebridge.cpe import CpeCodec, Measure

key = bytes(16)          # a made-up all-zero key
codec = CpeCodec(key)

frame = codec.build_control_frame(0xE4, 3, 0)
decoded = codec.parse_frame(frame)      # Frame(type=CONTROL, dev=3, ctrl=0xE4)

m = Measure(temperature_centi=2150, humidity_centi=4520,
            pressure_decihPa=10132, lux=120)
frame = codec.build_measure_frame(m, 3, 1)
```

`parse_frame` raises `CpeError` when a frame is not 12 bytes long or its
type byte is unknown. `Measure` raises `ValueError` for values that do not
fit their 16-bit fields.

## The Bridge class

`Bridge(key)` holds a codec and a sequence counter:

- `handle_serial_line(line)` returns the CONTROL frame for a command line
  (using and then advancing the sequence byte), or `None` if the line is
  ignored.
- `feed_serial(chars)` consumes serial characters, splits them into lines
  at CR or LF and returns the frames produced; an unfinished line is kept
  for the next call.
- `handle_radio_packet(packet)` returns the JSON line for a received
  packet, or `None` if it is dropped. Measurements come out as

```
{"id":3,"t":21.50,"h":45.20,"p":1013.2,"lux":120}
```

  and control frames as `{"ctrl":E4,"id":3}`, each ending in `\r\n`.

## The command

```
cpebridge
```

reads serial command text from standard input and prints each resulting
control frame as a line of hex.

```
cpebridge --decode
```

instead reads one hex radio packet per line and prints the JSON line each
valid packet yields; invalid lines are skipped. `--key` takes the AES-128
key as 32 hex digits; without it the key is the bytes 0x00 to 0x0f.

## What it does not do

The package does not talk to a radio or a serial port. The command works
on standard input and output only; wiring it to real devices is left to
the caller.