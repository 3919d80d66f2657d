from __future__ import annotations

import json

from PIL import Image

from qrstyle.cli import EXIT_ENCODING, EXIT_SURFACE, main


def test_generate_styled_code(zbar, tmp_path, capsys) -> None:
    out = tmp_path / "nested" / "qr.png"
    code = main([
        "generate", "https://example.com", "-o", str(out),
        "--size", "300", "--ecc", "H",
        "--module-shape", "dots", "--locator-shape", "circular", "--locator-center", "circular",
        "--verify",
    ])
    assert code == 0
    assert Image.open(out).size == (300, 300)
    assert "Generated:" in capsys.readouterr().out


def test_generate_with_logo(tmp_path) -> None:
    logo = tmp_path / "logo.png"
    Image.new("RGB", (32, 32), (0, 0, 200)).save(logo)
    out = tmp_path / "qr.png"
    code = main(["generate", "logo", "-o", str(out), "--ecc", "H", "--logo", str(logo), "--logo-ratio", "0.15"])
    assert code == 0
    img = Image.open(out).convert("RGB")
    assert img.getpixel((128, 128)) == (0, 0, 200)


def test_then_verify_round_trip(zbar, tmp_path) -> None:
    out = tmp_path / "qr.png"
    assert main(["generate", "round trip", "-o", str(out), "--module-shape", "rounded"]) == 0
    assert main(["verify", str(out), "--expected", "round trip"]) == 0
    assert main(["verify", str(out), "--expected", "something else"]) == 1


def test_encoding_failure_exit_code(tmp_path, capsys) -> None:
    code = main(["generate", "y" * 4000, "-o", str(tmp_path / "x.png"), "--ecc", "H"])
    assert code == EXIT_ENCODING
    assert "error:" in capsys.readouterr().err
    assert not (tmp_path / "x.png").exists()


def test_surface_failure_exit_code(tmp_path) -> None:
    code = main(["generate", "tiny", "-o", str(tmp_path / "x.png"), "--size", "10", "--module-shape", "dots"])
    assert code == EXIT_SURFACE


def test_bad_color_exit_code(tmp_path) -> None:
    assert main(["generate", "colors", "-o", str(tmp_path / "x.png"), "--fg", "nope"]) == 1


def test_barcode_command(tmp_path) -> None:
    out = tmp_path / "bar.png"
    assert main(["barcode", "ABC-123", "-o", str(out), "--no-text"]) == 0
    assert out.exists()


def test_json_log_file(tmp_path) -> None:
    log_file = tmp_path / "qrstyle.jsonl"
    main(["--log-file", str(log_file), "generate", "logged", "-o", str(tmp_path / "q.png")])
    events = [json.loads(line).get("event") for line in log_file.read_text().splitlines()]
    assert "cli.start" in events
    assert "qr.generated" in events


def test_no_command_prints_help(capsys) -> None:
    assert main([]) == 1
    assert "usage:" in capsys.readouterr().out


def test_verify_unreadable_image_exit_code(tmp_path, capsys) -> None:
    assert main(["verify", str(tmp_path / "missing.png")]) == 1
    not_an_image = tmp_path / "notes.png"
    not_an_image.write_text("plain text")
    assert main(["verify", str(not_an_image)]) == 1
    assert "cannot read image" in capsys.readouterr().err
