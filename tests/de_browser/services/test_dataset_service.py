import base64
from pathlib import Path

import pytest

from de_browser.config.model import DatasetConfig
from de_browser.core.dataset import Dataset, DatasetResource
from de_browser.core.exceptions import DatasetLoadError
from de_browser.services.dataset_service import (
    DatasetManager,
    read_table,
    resolve_dataset_path,
    resource_from_upload,
    separator_for,
)

TSV = "feature\tsymbol\tbaseMean\tlog2FoldChange\tpadj\nf1\tTP53\t10\t1.5\t0.01\nf2\tMYC\t20\t-2\tNA\n"
CSV = "feature,logFC,logCPM,PValue,FDR\ng1,1.0,3.0,0.001,0.01\n"


def _data_url(text: str, mime: str = "text/plain") -> str:
    return f"data:{mime};base64," + base64.b64encode(text.encode("utf-8")).decode("ascii")


def _cfg(raw: dict, index: int = 0) -> DatasetConfig:
    return DatasetConfig.from_raw(raw, source_path=Path("cfg.json"), index=index)


@pytest.mark.parametrize(
    "filename, sep",
    [("x.csv", ","), ("x.CSV", ","), ("x.tsv", "\t"), ("x.txt", "\t"), ("results", "\t")],
)
def test_separator_for(filename, sep):
    assert separator_for(filename) == sep


def test_read_table_tsv(tmp_path):
    path = tmp_path / "de.tsv"
    path.write_text(TSV)

    rows = read_table(path, path.name)

    assert [r["feature"] for r in rows] == ["f1", "f2"]
    assert rows[0]["baseMean"] == "10"
    # cells are kept as written; the normaliser parses numbers
    assert rows[1]["padj"] == "NA"


def test_read_table_csv_feeds_alias_normalisation(tmp_path):
    path = tmp_path / "edger.csv"
    path.write_text(CSV)

    rows = read_table(path, path.name)
    record = Dataset.from_resource(DatasetResource(name="edger", rows=rows))[0]

    assert rows[0]["logCPM"] == "3.0"
    assert (record.feature, record.base_mean, record.log2_fold_change) == ("g1", 3.0, 1.0)
    assert (record.pvalue, record.padj) == (0.001, 0.01)


def test_read_table_keeps_ids_symbols_and_extras_as_written(tmp_path):
    path = tmp_path / "entrez.tsv"
    path.write_text(
        "feature\tsymbol\tbaseMean\tnote\n"
        "7157\tNA\t5\t00123\n"
        "\tTP53\t5\t\n"
    )

    records = Dataset.from_resource(DatasetResource(name="entrez", rows=read_table(path, path.name)))

    first, second = records[0], records[1]
    assert (first.feature, first.symbol, first.symbols) == ("7157", "NA", ("NA",))
    assert first.extra == {"note": "00123"}
    assert first.base_mean == 5.0
    # empty cells are empty text, not NaN
    assert (second.feature, second.symbol) == ("", "TP53")
    assert second.extra == {"note": ""}


def test_read_table_json_records(tmp_path):
    path = tmp_path / "de.json"
    path.write_text(
        '[{"feature": "f1", "symbol": "TP53", "baseMean": 10, "log2FoldChange": -1.5, "padj": 0.01},'
        ' {"feature": "f2", "symbol": "MYC", "baseMean": 20, "log2FoldChange": 2, "padj": null}]'
    )

    rows = read_table(path, path.name)
    records = Dataset.from_resource(DatasetResource(name="json", rows=rows))

    assert [r.symbol for r in records] == ["TP53", "MYC"]
    assert records[0].log2_fold_change == -1.5
    assert records[1].padj != records[1].padj


def test_resource_from_json_upload():
    payload = '[{"feature": "f1", "symbol": "EGFR", "baseMean": 3, "log2FoldChange": 1}]'

    resource = resource_from_upload(_data_url(payload, mime="application/json"), "dropped.json")

    assert [r["symbol"] for r in resource.rows] == ["EGFR"]


def test_read_table_invalid_json_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(DatasetLoadError):
        read_table(path, path.name)


def test_read_table_missing_file_raises(tmp_path):
    with pytest.raises(DatasetLoadError):
        read_table(tmp_path / "missing.tsv", "missing.tsv")


def test_resource_from_upload_reads_tab_separated_text():
    resource = resource_from_upload(_data_url(TSV), "dropped.txt")

    assert resource.name == "dropped.txt"
    assert resource.default_symbols == ""
    assert [r["symbol"] for r in resource.rows] == ["TP53", "MYC"]


@pytest.mark.parametrize("contents", ["no-comma-here", "data:text/plain;base64,@@@"])
def test_resource_from_upload_rejects_bad_payload(contents):
    with pytest.raises(DatasetLoadError):
        resource_from_upload(contents, "bad.txt")


def test_resource_from_upload_rejects_non_utf8():
    payload = base64.b64encode(b"\xff\xfe\x00bad").decode("ascii")
    with pytest.raises(DatasetLoadError):
        resource_from_upload(f"data:text/plain;base64,{payload}", "bad.txt")


def test_resolve_dataset_path_prefers_env_root(tmp_path, monkeypatch):
    env_root = tmp_path / "env"
    monkeypatch.setenv("DE_BROWSER_DATA_ROOT", str(env_root))

    path = resolve_dataset_path(_cfg({"file": "de.tsv"}), data_root=tmp_path / "cfg")

    assert path == env_root / "de.tsv"


def test_resolve_dataset_path_drops_redundant_data_prefix(tmp_path, monkeypatch):
    monkeypatch.delenv("DE_BROWSER_DATA_ROOT", raising=False)
    (tmp_path / "de.tsv").write_text(TSV)

    path = resolve_dataset_path(_cfg({"file": "data/de.tsv"}), data_root=tmp_path)

    assert path == tmp_path / "de.tsv"


def test_resolve_dataset_path_keeps_absolute(tmp_path):
    absolute = tmp_path / "de.tsv"
    assert resolve_dataset_path(_cfg({"file": str(absolute)}), data_root=Path("/elsewhere")) == absolute


def test_dataset_manager_loads_lazily_and_caches(tmp_path, monkeypatch):
    monkeypatch.delenv("DE_BROWSER_DATA_ROOT", raising=False)
    (tmp_path / "de.tsv").write_text(TSV)
    manager = DatasetManager(
        {"DE": _cfg({"name": "DE", "file": "de.tsv", "gene": "TP53"})},
        data_root=tmp_path,
    )

    assert list(manager) == ["DE"]
    assert len(manager) == 1

    resource = manager["DE"]

    assert manager["DE"] is resource
    assert resource.default_symbols == "TP53"
    assert len(Dataset.from_resource(resource)) == 2


def test_dataset_manager_unknown_and_missing(tmp_path, monkeypatch):
    monkeypatch.delenv("DE_BROWSER_DATA_ROOT", raising=False)
    manager = DatasetManager({"Gone": _cfg({"name": "Gone", "file": "gone.tsv"})}, data_root=tmp_path)

    with pytest.raises(KeyError):
        manager["Nope"]
    with pytest.raises(DatasetLoadError):
        manager["Gone"]
