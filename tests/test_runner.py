"""Tests for streaming VCF classification."""

import gzip

import pytest

from pathogenicity_pipeline.processing import RecordFailure, Stage, classify_line, process_vcf
from pathogenicity_pipeline.vcf.models import MalformedRecordError

from conftest import HEADER, vcf_line, write_vcf

PATHOGENIC_PREDICTIONS = "SIFT_PRED=D;POLYPHEN2_HDIV_PRED=D;LRT_PRED=D;MUTATIONTASTER_PRED=D;GERP_RS=2.1"


def read_lines(path):
    opener = gzip.open if path.suffix == ".gz" else open
    with opener(path, "rt") as f:
        return f.read().splitlines()


def data_lines(path):
    return [line for line in read_lines(path) if not line.startswith("#")]


def test_full_run_appends_prediction_and_final_fields(tmp_path, config):
    input_path = write_vcf(tmp_path / "in.vcf", [PATHOGENIC_PREDICTIONS])
    output_path = tmp_path / "out.vcf"

    summary = process_vcf(input_path, output_path, config)

    assert summary.ok
    assert summary.records_read == 1
    assert summary.records_written == 1

    [line] = data_lines(output_path)
    info = line.split("\t")[7]
    assert info.startswith(PATHOGENIC_PREDICTIONS + ";GERP_PRED=C;NUM_PATH_PREDS=5;TOTAL_NUM_PREDS=5;FINAL_PRED=Pathogenic;")
    assert "FINAL_PATHOGENICITY=Pathogenic" in info
    assert "FINAL_PATHOGENICITY_SOURCE=dbNSFP" in info
    assert "FINAL_PATHOGENICITY_REASON=5/5%20pathogenic" in info

    [row] = summary.verdicts
    assert row.branch == "dbnsfp"
    assert row.num_path_preds == 5
    assert row.total_num_preds == 5


def test_header_declarations_before_column_line(tmp_path, config):
    input_path = write_vcf(tmp_path / "in.vcf", ["."])
    output_path = tmp_path / "out.vcf"

    process_vcf(input_path, output_path, config)

    header = [line for line in read_lines(output_path) if line.startswith("#")]
    assert header[:2] == HEADER[:2]
    assert header[-1] == HEADER[-1]
    declared = [line.split(",")[0] for line in header[2:-1]]
    assert "##INFO=<ID=FINAL_PATHOGENICITY" in declared
    assert "##INFO=<ID=NUM_PATH_PREDS" in declared
    assert "##INFO=<ID=GERP_PRED" in declared
    assert len(declared) == len(set(declared))


def test_existing_declarations_not_repeated(tmp_path, config):
    existing = '##INFO=<ID=FINAL_PRED,Number=1,Type=String,Description="Earlier run">'
    header = HEADER[:2] + [existing] + HEADER[2:]
    input_path = write_vcf(tmp_path / "in.vcf", ["."], header=header)

    process_vcf(input_path, tmp_path / "out.vcf", config)

    lines = read_lines(tmp_path / "out.vcf")
    assert [line for line in lines if "ID=FINAL_PRED," in line] == [existing]


def test_predict_stage_only(tmp_path, config):
    input_path = write_vcf(tmp_path / "in.vcf", [PATHOGENIC_PREDICTIONS])
    output_path = tmp_path / "out.vcf"

    summary = process_vcf(input_path, output_path, config, stages=(Stage.PREDICT,))

    assert summary.verdicts == []
    assert "FINAL_PATHOGENICITY" not in read_lines(output_path)[-1]
    assert not any("ID=FINAL_PATHOGENICITY," in line for line in read_lines(output_path))


def test_finalize_reads_previous_predictions(tmp_path, config):
    input_path = write_vcf(tmp_path / "in.vcf", [PATHOGENIC_PREDICTIONS])
    predicted = tmp_path / "predicted.vcf"
    finalized = tmp_path / "final.vcf"

    process_vcf(input_path, predicted, config, stages=(Stage.PREDICT,))
    process_vcf(predicted, finalized, config, stages=(Stage.FINALIZE,))

    separate = data_lines(finalized)

    process_vcf(input_path, tmp_path / "single.vcf", config)
    assert separate == data_lines(tmp_path / "single.vcf")


def test_malformed_rows_reported_and_skipped(tmp_path, config):
    input_path = tmp_path / "in.vcf"
    input_path.write_text("\n".join(HEADER + [
        vcf_line("AF=0.1", pos=1),
        "1\t2\t.\tA",
        vcf_line("DP=3", pos=3),
        vcf_line("FINAL_PATHOGENICITY=Benign", pos=4),
        vcf_line("VARIANTTYPE=DM", pos=5),
    ]) + "\n")
    output_path = tmp_path / "out.vcf"

    summary = process_vcf(input_path, output_path, config)

    assert not summary.ok
    assert summary.records_read == 5
    assert summary.records_written == 3
    assert [f.line_number for f in summary.failures] == [5, 7]
    assert [line.split("\t")[1] for line in data_lines(output_path)] == ["1", "3", "5"]


def test_undecodable_row_reported_and_skipped(tmp_path, config):
    input_path = tmp_path / "in.vcf"
    rows = [
        vcf_line("DP=1", pos=1).encode(),
        vcf_line("DP=", pos=2).encode() + b"\xff\xfe",
        vcf_line("DP=3", pos=3).encode(),
    ]
    input_path.write_bytes(b"\n".join([line.encode() for line in HEADER] + rows) + b"\n")
    output_path = tmp_path / "out.vcf"

    summary = process_vcf(input_path, output_path, config)

    assert summary.records_read == 3
    assert summary.records_written == 2
    [failure] = summary.failures
    assert failure.line_number == 5
    assert "UTF-8" in failure.message
    assert [line.split("\t")[1] for line in data_lines(output_path)] == ["1", "3"]


def test_non_ascii_pos_reported_and_skipped(tmp_path, config):
    input_path = tmp_path / "in.vcf"
    input_path.write_text("\n".join(HEADER + [
        vcf_line("DP=1", pos=1),
        "1\t²\t.\tA\tG\t50\tPASS\tDP=2",
        vcf_line("DP=3", pos=3),
    ]) + "\n", encoding="utf-8")

    summary = process_vcf(input_path, tmp_path / "out.vcf", config)

    assert summary.records_written == 2
    assert [f.line_number for f in summary.failures] == [5]


def test_blank_lines_ignored(tmp_path, config):
    input_path = tmp_path / "in.vcf"
    input_path.write_text("\n".join(HEADER + [vcf_line("DP=1"), "", vcf_line("DP=2", pos=2)]) + "\n\n")

    summary = process_vcf(input_path, tmp_path / "out.vcf", config)

    assert summary.records_read == 2
    assert summary.ok


def test_missing_header_raises(tmp_path, config):
    input_path = tmp_path / "in.vcf"
    input_path.write_text(vcf_line("DP=1") + "\n")

    with pytest.raises(MalformedRecordError):
        process_vcf(input_path, tmp_path / "out.vcf", config)


def test_gzip_round_trip(tmp_path, config):
    input_path = tmp_path / "in.vcf.gz"
    with gzip.open(input_path, "wt") as f:
        f.write("\n".join(HEADER + [vcf_line("POP1_AF=0.01")]) + "\n")
    output_path = tmp_path / "out.vcf.gz"

    summary = process_vcf(input_path, output_path, config)

    assert summary.ok
    [line] = data_lines(output_path)
    assert "FINAL_PATHOGENICITY_SOURCE=MAF" in line
    assert "FINAL_PATHOGENICITY_REASON=MAF_gte_0.005" in line


def test_process_pool_preserves_input_order(tmp_path, config, monkeypatch):
    monkeypatch.setattr("pathogenicity_pipeline.processing.runner.BATCH_SIZE_PER_WORKER", 3)
    infos = []
    for i in range(25):
        if i % 3 == 0:
            infos.append(f"AF=0.{i + 10}")
        elif i % 3 == 1:
            infos.append(PATHOGENIC_PREDICTIONS)
        else:
            infos.append(f"DP={i}")
    infos[7] = "BROKEN=1;=2"
    input_path = write_vcf(tmp_path / "in.vcf", infos)

    parallel = process_vcf(input_path, tmp_path / "parallel.vcf", config, workers=2)
    serial = process_vcf(input_path, tmp_path / "serial.vcf", config, workers=1)

    assert data_lines(tmp_path / "parallel.vcf") == data_lines(tmp_path / "serial.vcf")
    assert [v.pos for v in parallel.verdicts] == [v.pos for v in serial.verdicts]
    assert [f.line_number for f in parallel.failures] == [f.line_number for f in serial.failures]
    assert len(parallel.failures) == 1


def test_classify_line_returns_failure():
    result = classify_line((42, "1\tx\t.\tA\tG\t.\t.\tA=1"), config=None, stages=())

    assert isinstance(result, RecordFailure)
    assert result.line_number == 42
    assert "POS" in result.message
