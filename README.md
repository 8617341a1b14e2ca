# qlemukit

Pieces of a Sinclair QL emulator, written in plain Python with no
third-party dependencies. Each module covers one job:

| Module | What it does |
| --- | --- |
| `qlemukit.options` | Emulator options from the command line and `sqlux.ini` files, including `device=` entries for directory devices (`EmulatorOptions`, `DeviceTable`, `parse_options`) |
| `qlemukit.roms` | Locating and loading ROM images, working out the RAM top and the screen memory layout (`load_rom`, `rom_path`, `ram_top`, `screen_layout`, `ScreenLayout`, `RomError`) |
| `qlemukit.display` | Window sizing, aspect ratio and window-to-QL mouse coordinates (`window_size`, `aspect_ratio`, `sdl_mouse_to_ql`, `Rect`) |
| `qlemukit.viewport` | Letterboxing, CRT curvature maths, shader source assembly and mouse mapping for a curved display (`fit_viewport`, `distort`, `read_curve`, `shader_header`, `build_shader_source`, `gpu_mouse_to_ql`, `ShaderKind`) |
| `qlemukit.bdi` | The block device interface backed by a disk image file (`BlockDeviceInterface`) |
| `qlemukit.clock` | Conversion between Unix time and the QL epoch (`QLClock`, `ux_to_ql_time`, `ql_to_ux_time`, `local_tz_offset`) |
| `qlemukit.trace` | A ring buffer of control-flow events and 68000 exception names (`Backtrace`, `BacktraceEvent`, `exception_name`) |
| `qlemukit.hexdump` | Classic 16-bytes-per-line hex dumps (`hexdump`, `hexdump_lines`) |

## Installing

Install the project with your usual Python packaging tool. The `test`
extra pulls in pytest for running the test suite.

## Examples

Reading options. `parse_options` parses the arguments, then applies the ini
file named by `-f`/`--config` (default `sqlux.ini`; a missing file only logs
a warning). Values given on the command line take precedence:

```python
from qlemukit.options import parse_options

options = parse_options(["--ramsize", "896", "--kbd", "GB"])
print(options.get_int("ramsize"))    # 896
print(options.get_string("kbd"))     # GB
print(options.help_text())
```

Working out memory and screen layout:

```python
from qlemukit.roms import ram_top, screen_layout

top = ram_top(896, 256)                   # ramsize wins: (128 + 896) KB
layout = screen_layout(512, 256, top, True)
print(hex(layout.qm_lo), layout.qm_len)
```

`ram_top` raises `ValueError` below 256 KB; `load_rom` raises `RomError` when
an image is missing or larger than the size asked for.

Sizing a window and mapping the mouse:

```python
from qlemukit.display import Rect, aspect_ratio, window_size, sdl_mouse_to_ql
from qlemukit.viewport import fit_viewport

width, height, maximized, fullscreen = window_size(512, 256, aspect_ratio(2), "2x")
x, y, w, h = fit_viewport(1024, 768, 2.0, 1.0)
print(sdl_mouse_to_ql(300, 200, Rect(x, y, w, h), 512, 256))
```

Using a disk image through the block device interface:

```python
from qlemukit.bdi import BlockDeviceInterface

with BlockDeviceInterface("disk.img") as bdi:
    bdi.select(1)
    bdi.set_address_low(0)
    bdi.command(2)                         # read
    first_block = bytes(bdi.read_data() for _ in range(512))
```

Keeping the QL clock in step with the host:

```python
from qlemukit.clock import QLClock, local_tz_offset, ux_to_ql_time

ql_seconds = ux_to_ql_time(0, local_tz_offset())
print(QLClock().now())
```

Recording a backtrace and dumping bytes:

```python
from qlemukit.trace import Backtrace, JSR
from qlemukit.hexdump import hexdump

trace = Backtrace()
trace.add(0x4000, 0x4100, JSR)
print("\n".join(trace.report(10)))

hexdump(b"QDOS boot sector")
```

## What this package does not do

It is a set of helpers, not a runnable emulator. There is no 68000 CPU core,
no QDOS trap handling, no window or screen drawing, no decoding of screen
memory into pixels, no keyboard or joystick input handling, no sound, and no
network device support. It installs no command.