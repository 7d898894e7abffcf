"""
Command-line driver: image loading through Pillow and exit statuses.
"""

import sys

import numpy as np
import pytest
from PIL import Image

import piet_interpreter
from pietcore import Color

R = Color.RED
AT_ROW = [R] * 8 + [Color.DARK_RED, Color.DARK_BLUE, Color.MAGENTA, Color.LIGHT_BLUE]


def save_program(path, rows, codel_size=1):
    pixels = np.array([[c.rgb for c in row] for row in rows], dtype=np.uint8)
    if codel_size > 1:
        pixels = pixels.repeat(codel_size, axis=0).repeat(codel_size, axis=1)
    Image.fromarray(pixels).save(path)
    return str(path)


def run_main(monkeypatch, *argv):
    monkeypatch.setattr(sys, 'argv', ['piet_interpreter.py', *argv])
    return piet_interpreter.main()


def test_load_grid(tmp_path):
    path = save_program(tmp_path / 'at.png', [AT_ROW])
    grid = piet_interpreter.load_grid(path)
    assert (grid.width, grid.height) == (12, 1)
    assert grid.color_at((8, 0)) is Color.DARK_RED


def test_load_grid_with_codel_size(tmp_path):
    path = save_program(tmp_path / 'big.png', [AT_ROW], codel_size=3)
    grid = piet_interpreter.load_grid(path, codel_size=3)
    assert (grid.width, grid.height) == (12, 1)
    assert grid.color_at((11, 0)) is Color.LIGHT_BLUE


def test_codel_size_must_divide_image(tmp_path):
    path = save_program(tmp_path / 'at.png', [AT_ROW])
    with pytest.raises(ValueError):
        piet_interpreter.load_image(path, codel_size=5)


def test_terminating_program(tmp_path, monkeypatch, capsys):
    path = save_program(tmp_path / 'dot.png', [[R]])
    assert run_main(monkeypatch, path) == 0
    assert capsys.readouterr().out == '\n'


def test_step_limit(tmp_path, monkeypatch, capsys):
    path = save_program(tmp_path / 'at.png', [AT_ROW], codel_size=2)
    assert run_main(monkeypatch, '-c', '2', '-n', '4', '--stack', path) == 2
    captured = capsys.readouterr()
    assert captured.out == '@\n'
    assert 'Step limit' in captured.err


def test_runtime_error(tmp_path, monkeypatch, capsys):
    path = save_program(tmp_path / 'at.png', [AT_ROW])
    assert run_main(monkeypatch, path) == 1
    captured = capsys.readouterr()
    assert captured.out == '@\n'
    assert 'Runtime error' in captured.err


def test_unknown_color(tmp_path, monkeypatch, capsys):
    path = tmp_path / 'grey.png'
    Image.new('RGB', (2, 2), (128, 128, 128)).save(path)
    assert run_main(monkeypatch, str(path)) == 1
    assert 'Unrecognized color #808080' in capsys.readouterr().err


def test_missing_file(tmp_path, monkeypatch, capsys):
    assert run_main(monkeypatch, str(tmp_path / 'nope.png')) == 1
    assert 'not found' in capsys.readouterr().err


def test_input_file(tmp_path, monkeypatch, capsys):
    # RED -> LIGHT_BLUE reads a number, then it is written back out
    rows = [[R, Color.LIGHT_BLUE, Color.CYAN]]
    path = save_program(tmp_path / 'echo.png', rows)
    data = tmp_path / 'in.txt'
    data.write_text('12')
    status = run_main(monkeypatch, '--input-file', str(data), '-n', '2', path)
    captured = capsys.readouterr()
    assert status == 2
    assert captured.out == '12\n'


def test_negative_step_limit(tmp_path, monkeypatch, capsys):
    path = save_program(tmp_path / 'dot.png', [[R]])
    assert run_main(monkeypatch, '-n', '-1', path) == 1
    captured = capsys.readouterr()
    assert 'max steps' in captured.err
    assert 'Step limit' not in captured.err
