import shutil

from ttlatency.cli import main


def test_cli_writes_text_report(sample_xml, tmp_path, capsys):
    src = tmp_path / "example.xml"
    shutil.copy(sample_xml, src)

    assert main([str(src), "--stdout"]) == 0
    out_file = tmp_path / "example_latency.txt"
    assert out_file.exists()
    out = capsys.readouterr().out
    assert "Maximum latency for F1:0 is 3" in out
    assert out == out_file.read_text()


def test_cli_xml_output_path(sample_xml, tmp_path):
    out_file = tmp_path / "custom.xml"
    assert main([str(sample_xml), "--format", "xml", "-o", str(out_file),
                 "--workers", "2"]) == 0
    assert out_file.read_text().startswith("<?xml")


def test_cli_relative_misses(sample_xml, tmp_path):
    out_file = tmp_path / "r.txt"
    assert main([str(sample_xml), "-o", str(out_file),
                 "--miss-reference", "relative",
                 "--completion", "at-least"]) == 0
    assert "F2:0 is 6 => DEADLINE MISS" in out_file.read_text()


def test_cli_trace(sample_xml, tmp_path, capsys):
    assert main([str(sample_xml), "-o", str(tmp_path / "r.txt"),
                 "--trace"]) == 0
    assert "Schedule columns:" in capsys.readouterr().out


def test_cli_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "missing.xml")]) == 2
    assert "File not found" in capsys.readouterr().err


def test_cli_invalid_flow(tmp_path, capsys):
    path = tmp_path / "bad.xml"
    path.write_text("""<workload>
  <flow name="F" period="4" tx-attempts="1,1"><path node="A"/><path node="B"/></flow>
</workload>""")
    assert main([str(path)]) == 2
    assert "attempt counts" in capsys.readouterr().err
    assert not (tmp_path / "bad_latency.txt").exists()


def test_cli_bad_workers(sample_xml, capsys):
    assert main([str(sample_xml), "--workers", "0"]) == 2
    assert "max_workers" in capsys.readouterr().err
