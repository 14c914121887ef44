import json
import os
import struct
import subprocess
import sys
from pathlib import Path

from click.testing import CliRunner

from pdimg_build.cli import main
from pdimg_verify.cli import main as verify_main

REPO = Path(__file__).resolve().parents[1]


def run(args, cwd):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO / "src"), env.get("PYTHONPATH")]))
    return subprocess.run([sys.executable, *args], cwd=cwd, check=False, capture_output=True, text=True, env=env)


def test_serial_number_only(tmp_path):
    out = tmp_path / "out.img"
    result = CliRunner().invoke(main, ["-sn", "ABC123", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "PASS" in result.output

    data = out.read_bytes()
    assert len(data) == 34
    assert data[8:12] == struct.pack("<I", 0xF001)
    assert data[12:16] == struct.pack("<I", 6)


def test_all_records(tmp_path):
    out = tmp_path / "out.img"
    result = CliRunner().invoke(
        main,
        [
            "-zb_mac", "00124b0001020304",
            "-bt_mac_no_check", "11:22:33:44:55:66",
            "-wifi_mac", "00:50:43:12:34:56",
            "-sn", "SN-0001",
            "-o", str(out),
        ],
    )
    assert result.exit_code == 0, result.output
    assert len(out.read_bytes()) == 8 + (8 + 7) + (8 + 17) + (8 + 17) + (8 + 16) + 12


def test_long_option_names(tmp_path):
    out = tmp_path / "out.img"
    result = CliRunner().invoke(
        main, ["--serial-number", "ABC123", "--wifi-mac-no-check", "aa:bb:cc:dd:ee:ff", "--output", str(out)]
    )
    assert result.exit_code == 0, result.output


def test_vendor_prefix_enforced(tmp_path):
    out = tmp_path / "out.img"
    result = CliRunner().invoke(main, ["-wifi_mac", "01:50:43:12:34:56", "-o", str(out)])
    assert result.exit_code == 1
    assert "FATAL" in result.output
    assert "01:50:43:12:34:56" in result.output
    assert not out.exists()


def test_no_check_accepts_other_vendor(tmp_path):
    out = tmp_path / "out.img"
    result = CliRunner().invoke(main, ["-bt_mac_no_check", "01:50:43:12:34:56", "-o", str(out)])
    assert result.exit_code == 0, result.output


def test_checked_and_unchecked_together(tmp_path):
    out = tmp_path / "out.img"
    result = CliRunner().invoke(
        main,
        ["-wifi_mac", "00:50:43:12:34:56", "-wifi_mac_no_check", "00:50:43:12:34:57", "-o", str(out)],
    )
    assert result.exit_code == 2


def test_output_required():
    result = CliRunner().invoke(main, ["-sn", "ABC123"])
    assert result.exit_code == 2


def test_unopenable_output(tmp_path):
    out = tmp_path / "no-such-dir" / "out.img"
    result = CliRunner().invoke(main, ["-sn", "ABC123", "-o", str(out)])
    assert result.exit_code == 1
    assert "Could not open output file" in result.output


def test_help_and_version():
    runner = CliRunner()
    result = runner.invoke(main, ["-help"])
    assert result.exit_code == 0
    assert "-wifi_mac_no_check" in result.output
    assert "-test_checksum" in result.output
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.3.0" in result.output


def test_negative_test_checksum_fails_verification(tmp_path):
    good = tmp_path / "good.img"
    bad = tmp_path / "bad.img"
    runner = CliRunner()
    assert runner.invoke(main, ["-sn", "ABC123", "-o", str(good)]).exit_code == 0
    assert runner.invoke(main, ["-sn", "ABC123", "-test_checksum", "-5", "-o", str(bad)]).exit_code == 0

    g, b = good.read_bytes(), bad.read_bytes()
    assert g[:-4] == b[:-4]
    assert struct.unpack("<I", b[-4:])[0] == (struct.unpack("<I", g[-4:])[0] - 5) % 2**32

    result = runner.invoke(verify_main, ["image", str(good)])
    assert result.exit_code == 0
    assert json.loads(result.output)["status"] == "PASS"

    result = runner.invoke(verify_main, ["image", str(bad)])
    assert result.exit_code == 1
    assert json.loads(result.output)["errors"][0]["code"] == "E_CHECKSUM_MISMATCH"


def test_build_corrupt_verify_end_to_end(tmp_path):
    out = tmp_path / "pd.img"

    r = run(["-m", "pdimg_build.cli", "-sn", "ABC123", "-wifi_mac", "00:50:43:12:34:56", "-o", str(out)], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout

    r = run(["-m", "pdimg_verify.cli", "image", str(out)], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout
    assert json.loads(r.stdout)["status"] == "PASS"

    r = run(["scripts/corrupt_one_byte.py", str(out)], cwd=REPO)
    assert r.returncode == 0, r.stderr + r.stdout

    r = run(["-m", "pdimg_verify.cli", "image", str(out)], cwd=REPO)
    assert r.returncode != 0
    assert json.loads(r.stdout)["errors"][0]["code"] == "E_CHECKSUM_MISMATCH"


def test_verify_non_utf8_serial_number(tmp_path):
    out = tmp_path / "pd.img"
    runner = CliRunner()
    # surrogateescape form of the raw byte 0xff, as a non-UTF-8 argv would arrive
    assert runner.invoke(main, ["-sn", "SN\udcff", "-o", str(out)]).exit_code == 0
    assert out.read_bytes()[16:19] == b"SN\xff"

    result = runner.invoke(verify_main, ["image", str(out)])
    assert result.exit_code == 0, result.output
    doc = json.loads(result.output)
    assert doc["status"] == "PASS"
    assert doc["records"][0]["value"] == "SN\\xff"
