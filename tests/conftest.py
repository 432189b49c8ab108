from pathlib import Path
import pytest
from PIL import Image
from asciiramp import utils


@pytest.fixture
def make_image(tmp_path):
    """Save a solid (or per-column) RGBA image and return its path."""
    def _make(name='source.png', size=(2, 2), color=(255, 255, 255, 255), columns=None):
        img = Image.new('RGBA', size, color)
        if columns is not None:
            pixels = img.load()
            for x, column_color in enumerate(columns):
                for y in range(size[1]):
                    pixels[x, y] = column_color
        path = tmp_path / name
        img.save(path)
        return path
    return _make


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    """Replace the ffmpeg subprocess with a fake. Extraction writes ``frames`` small PNGs, encoding writes an empty
    file. Set ``extract_code`` / ``encode_code`` to make either step fail."""
    class FakeFFmpeg:
        frames = 3
        extract_code = 0
        encode_code = 0
        calls = []

        def __call__(self, executable, *args, get_stderr=False):
            self.calls.append((executable, *args))
            out = Path(args[-1])
            if '-framerate' in args:
                if self.encode_code:
                    return self.encode_code, 'Unknown encoder \'libx264\''
                out.write_bytes(b'')
                return 0, ''
            if self.extract_code:
                return self.extract_code, 'Invalid data found when processing input'
            for k in range(1, self.frames + 1):
                shade = (40 * k) % 256
                Image.new('RGB', (16, 9), (shade, shade, shade)).save(out.parent / f'frame_{k:03d}.png')
            return 0, ''

    fake = FakeFFmpeg()
    fake.calls = []
    monkeypatch.setattr(utils, 'run', fake)
    return fake
