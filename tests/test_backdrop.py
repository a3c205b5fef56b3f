import numpy as np
import pytest
from PIL import Image

import backdrop
from backdrop import Backdrop, InvalidDimensions
from backdrop.__main__ import main
from backdrop.raster_ops import open_image, save_image, detect_edges

from conftest import make_ring


def test_from_array_removes_background(ring_image):
    progress = []
    result = Backdrop.from_array(ring_image, threshold=10).remove_background(progress_callback=progress.append)
    assert result is ring_image
    assert (result[2:8, 2:8, 3] == 0).all()
    assert (result[0, :, 3] == 255).all()
    assert progress[-1] == 100


def test_from_flat_buffer():
    buffer = bytearray(make_ring(10).tobytes())
    bd = Backdrop.from_array(buffer, width=10, height=10, threshold=10)
    bd.remove_background()
    a = np.frombuffer(buffer, dtype=np.uint8).reshape(10, 10, 4)[..., 3]
    assert (a[2:8, 2:8] == 0).all()


def test_from_array_checks_dimensions():
    with pytest.raises(InvalidDimensions):
        Backdrop.from_array(bytearray(12), width=2, height=2)
    with pytest.raises(InvalidDimensions):
        Backdrop.from_array(np.zeros((4, 4, 3), dtype=np.uint8))


def test_configure_is_chainable(ring_image):
    bd = Backdrop.from_array(ring_image).configure(threshold=10, strip_height=4, timeout=30)
    assert bd.config.get_threshold() == 10
    assert bd.config.get_strip_height() == 4
    assert bd.config.get_timeout() == 30


def test_uniform_image_is_left_opaque(white_image):
    result = Backdrop.from_array(white_image, threshold=10).remove_background()
    assert (result[..., 3] == 255).all()


def test_edge_mask(ring_image):
    bd = Backdrop.from_array(ring_image, threshold=10)
    assert np.array_equal(bd.edge_mask(chunk_size=4), detect_edges(ring_image, 10))


def test_file_round_trip(tmp_path, ring_image):
    source = str(tmp_path / 'ring.png')
    save_image(ring_image, source)

    bd = Backdrop.from_file(source).configure(threshold=10)
    bd.remove_background()
    written = bd.save(str(tmp_path / 'out' / 'ring_nobg.png'))

    result = open_image(written)
    assert result.shape == (10, 10, 4)
    assert (result[2:8, 2:8, 3] == 0).all()
    assert (result[0, :, 3] == 255).all()


def test_save_requires_a_path(ring_image):
    with pytest.raises(ValueError):
        Backdrop.from_array(ring_image).save()


def test_open_image_converts_to_rgba(tmp_path):
    path = str(tmp_path / 'rgb.png')
    Image.new('RGB', (6, 4), (250, 250, 250)).save(path)
    pixels = open_image(path)
    assert pixels.shape == (4, 6, 4)
    assert (pixels[..., 3] == 255).all()


def test_cli_process(tmp_path, ring_image):
    source = str(tmp_path / 'ring.png')
    target = str(tmp_path / 'ring_out.png')
    save_image(ring_image, source)

    main(['process', source, '-o', target, '--threshold', '10', '--strip-height', '5', '--quiet'])

    with Image.open(target) as img:
        assert img.mode == 'RGBA'
        result = np.array(img)
    assert (result[2:4, 2:8, 3] == 0).all()


def test_cli_process_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(['process', str(tmp_path / 'missing.png'), '--quiet'])
    assert exc.value.code == 1
    assert 'Processing failed' in capsys.readouterr().out


def test_cli_edges(tmp_path, ring_image):
    source = str(tmp_path / 'ring.png')
    target = str(tmp_path / 'edges.png')
    save_image(ring_image, source)

    main(['edges', source, target, '--threshold', '10', '--chunk-size', '4'])

    with Image.open(target) as img:
        mask = np.array(img) > 0
    assert np.array_equal(mask, detect_edges(ring_image, 10))


def test_cli_version(capsys):
    main(['version'])
    assert backdrop.__version__ in capsys.readouterr().out


def test_cli_config_templates(capsys):
    main(['config', 'templates'])
    assert 'config.yaml' in capsys.readouterr().out


def test_cli_demo(tmp_path):
    target = str(tmp_path / 'demo.png')
    main(['demo', '--output', target])
    result = open_image(target)
    assert (result[..., 3] == 0).any()
    assert (result[120, 160, 3] == 255)


def test_pipeline_process_file(tmp_path, ring_image):
    from backdrop.processing import ProcessingPipeline

    source = str(tmp_path / 'ring.png')
    save_image(ring_image, source)

    bd = Backdrop.from_config().configure(threshold=10)
    pipeline = ProcessingPipeline(bd.config)
    written = pipeline.process_file(source, str(tmp_path / 'ring_out.png'))

    result = open_image(written)
    assert (result[2:8, 2:8, 3] == 0).all()
    assert (result[1, 1:9, 3] == 255).all()
    assert pipeline.metrics.get_duration('background removal') is not None


def test_cli_process_without_timeout(tmp_path, ring_image):
    source = str(tmp_path / 'ring.png')
    target = str(tmp_path / 'ring_out.png')
    save_image(ring_image, source)

    main(['process', source, '-o', target, '--threshold', '10', '--timeout', '0', '--quiet'])

    result = open_image(target)
    assert (result[2:8, 2:8, 3] == 0).all()
