# Window frontend. We're subclassing pyglet (that'll handle graphics, sound output,
# and keyboard handling) and overriding whatever def we need from there. All the
# machine logic lives in Chip8, this file only feeds it keys and shows what it made.
import os

import numpy as np
import pyglet
from pyglet.media import synthesis
from pyglet.window import key

from . import config
from .constants import HEIGHT, KEY_COUNT, WIDTH
from .cpu import Chip8
from .errors import Chip8Error
from .log import error, log, toggle_verbose

# map binding keys
keymap = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}


def load_rom(path):
    log("Loading ROM:", path)
    with open(path, "rb") as f:
        return f.read()


def generate_tone(duration=0.5, frequency=config.tone_hz, sample_rate=44100):
    wave = synthesis.Sine(duration=duration, frequency=frequency, sample_rate=sample_rate)
    return pyglet.media.StaticSource(wave)


class Chip8Window(pyglet.window.Window):

    def __init__(self, roms, scale=config.scale, cpu_hz=config.cpu_hz, sound=True, **engine_options):
        self.scale = scale
        self.window_width, self.window_height = WIDTH * scale, HEIGHT * scale
        super().__init__(self.window_width, self.window_height, caption="CHIP-8 Emulator",
                         resizable=False, vsync=False)

        self.chip8 = Chip8(**engine_options)
        self.roms = list(roms)
        self.rom_index = -1
        self.running = False

        # keys held right now, and keys pressed at any point since the last tick
        self.held = np.zeros(KEY_COUNT, dtype=np.bool_)
        self.tapped = np.zeros(KEY_COUNT, dtype=np.bool_)

        # ---- Sound ----
        self.sound_enabled = sound
        self.tone = pyglet.media.Player()
        self.tone.queue(generate_tone())
        self.tone.loop = True

        # 64x32 RGBA, upscaled with numpy.repeat before upload
        self._small_framebuf = np.zeros((HEIGHT, WIDTH, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255
        self.image = pyglet.image.ImageData(
            self.window_width,
            self.window_height,
            'RGBA',
            self._scaled().tobytes()
        )

        # ---- Performance Counters ----
        self._fps_counter = 0
        self._cps_counter = 0
        self.fps_label = self._hud_label("FPS: 0", 15)
        self.cps_label = self._hud_label("Cycles/s: 0", 30)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

        self.cpu_hz = cpu_hz
        self.lock_60hz = False
        self.next_rom()
        pyglet.clock.schedule_interval(self._cpu_tick, 1.0 / self.cpu_hz)

    def _hud_label(self, text, offset):
        return pyglet.text.Label(
            text,
            font_size=12,
            x=5,
            y=self.window_height - offset,
            anchor_x='left',
            anchor_y='center',
            color=(255, 255, 255, 255)
        )

    # ---- ROMs ----
    def next_rom(self):
        """Reset the machine and load the next ROM in the list, wrapping around."""
        self.rom_index = (self.rom_index + 1) % len(self.roms)
        path = self.roms[self.rom_index]
        self.chip8.initialize()
        try:
            self.chip8.load(load_rom(path))
        except (OSError, Chip8Error) as e:
            error("Can't load ROM %s: %s" % (path, e))
            self.running = False
            return
        self.set_caption("CHIP-8 Emulator - %s" % os.path.basename(path))
        self.running = True

    # ---- Pacing ----
    def set_lock_60hz(self, value):
        self.lock_60hz = value
        pyglet.clock.unschedule(self._cpu_tick)
        rate = config.timer_HZ if value else self.cpu_hz
        pyglet.clock.schedule_interval(self._cpu_tick, 1.0 / rate)
        log("CPU rate:", rate, "Hz")

    # ---- CPU cycle ----
    def _cpu_tick(self, dt):
        self.chip8.set_keys(self.held | self.tapped)
        self.tapped[:] = False
        if not self.running:
            return

        try:
            self.chip8.step()
        except Chip8Error as e:
            error("Emulation error:", e)
            self.running = False
            self.close()
            return
        self._cps_counter += 1

        if self.chip8.take_redraw():
            self._upload_frame()
        self._update_sound()

    def _upload_frame(self):
        frame = self.chip8.framebuffer().reshape(HEIGHT, WIDTH)
        # pyglet's origin is bottom-left
        self._small_framebuf[..., :3] = np.where(frame[::-1, :, None], 255, 0)
        self.image.set_data('RGBA', self.window_width * 4, self._scaled().tobytes())

    def _scaled(self):
        if self.scale == 1:
            return self._small_framebuf
        return np.repeat(np.repeat(self._small_framebuf, self.scale, axis=0), self.scale, axis=1)

    # ---- Sound ----
    def _update_sound(self):
        if self.sound_enabled and self.chip8.sound_level() > 0:
            if not self.tone.playing:
                self.tone.play()
        elif self.tone.playing:
            self.tone.pause()

    def toggle_sound(self):
        self.sound_enabled = not self.sound_enabled
        if not self.sound_enabled:
            self.tone.pause()

    # ---- FPS / CPS ----
    def _update_bench(self, dt):
        self.fps_label.text = f"FPS: {self._fps_counter / dt:.1f}"
        self.cps_label.text = f"Cycles/s: {self._cps_counter}"
        self._fps_counter = 0
        self._cps_counter = 0

    # ---- Drawing ----
    def on_draw(self):
        self.clear()
        self.image.blit(0, 0)
        self.fps_label.draw()
        self.cps_label.draw()
        self._fps_counter += 1

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.close()
        elif symbol == key.F1:
            toggle_verbose()
        elif symbol == key.F2:
            self.next_rom()
        elif symbol == key.F3:
            self.toggle_sound()
        elif symbol == key.F4:
            self.set_lock_60hz(not self.lock_60hz)
        elif symbol in keymap:
            self.held[keymap[symbol]] = True
            self.tapped[keymap[symbol]] = True

    def on_key_release(self, symbol, modifiers):
        if symbol in keymap:
            self.held[keymap[symbol]] = False

    def on_close(self):
        self.tone.delete()
        super().on_close()


def run(args):
    Chip8Window(
        args.roms,
        scale=args.scale,
        cpu_hz=args.cpu_hz,
        sound=not args.mute,
        strict=args.strict,
        legacy_shift=args.legacy_shift,
    )
    pyglet.app.run()
