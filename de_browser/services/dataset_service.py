from __future__ import annotations

import base64
import binascii
import io
import logging
import os
from pathlib import Path
from typing import IO, Any, Dict, Iterator, List, Mapping, Optional, Union

import pandas as pd

from de_browser.config.model import DatasetConfig
from de_browser.core.dataset import DatasetResource
from de_browser.core.exceptions import DatasetLoadError

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 200_000_000

# Plain text exports from DESeq2/edgeR are tab separated.
_SEPARATORS = {
    ".csv": ",",
    ".tsv": "\t",
    ".tab": "\t",
    ".txt": "\t",
}


def separator_for(filename: str) -> str:
    return _SEPARATORS.get(Path(filename).suffix.lower(), "\t")


def read_table(source: Union[str, Path, IO[str]], filename: str) -> List[Dict[str, Any]]:
    """
    Read a DE results table into raw row dicts.

    Delimited text is read cell-for-cell as strings ("NA", "00123" and
    integer ids stay as written); the normaliser parses numeric fields.
    `.json` sources hold an array of row objects and keep their JSON types.

    :param source: path or open text buffer
    :param filename: used only to pick the format
    """
    try:
        if Path(filename).suffix.lower() == ".json":
            df = pd.read_json(source, orient="records", dtype=False, convert_dates=False)
        else:
            df = pd.read_csv(
                source,
                sep=separator_for(filename),
                dtype=str,
                keep_default_na=False,
            )
    except (OSError, ValueError) as e:
        raise DatasetLoadError(f"Could not read table '{filename}': {e}") from e
    return df.to_dict(orient="records")


def resolve_dataset_path(cfg: DatasetConfig, data_root: Optional[Path] = None) -> Path:
    """
    Relative paths resolve against DE_BROWSER_DATA_ROOT, then the
    configured data_root, then the working directory.
    """
    path = cfg.path
    if path.is_absolute():
        return path

    env_root = os.environ.get("DE_BROWSER_DATA_ROOT")
    root = Path(env_root) if env_root else data_root
    if root is None:
        return path

    resolved = root / path
    # Fallback for a redundant 'data/' prefix
    if not resolved.is_file() and path.parts and path.parts[0] == "data":
        alt = root / Path(*path.parts[1:])
        if alt.is_file():
            resolved = alt
    return resolved


def load_resource(cfg: DatasetConfig, data_root: Optional[Path] = None) -> DatasetResource:
    path = resolve_dataset_path(cfg, data_root)
    if not path.is_file():
        raise DatasetLoadError(f"Table for dataset '{cfg.name}' not found at {path}.")

    logger.info("Reading dataset table", extra={"dataset": cfg.name, "path": str(path)})
    rows = read_table(path, path.name)
    return DatasetResource(name=cfg.name, rows=rows, default_symbols=cfg.gene)


def resource_from_upload(contents: str, filename: Optional[str]) -> DatasetResource:
    """
    Build a resource from a dropped file as delivered by dcc.Upload
    ("data:<mime>;base64,<payload>"). Dropped files start with no
    highlighted genes.
    """
    filename = filename or "file"
    try:
        _, encoded = contents.split(",", 1)
        decoded = base64.b64decode(encoded, validate=True)
    except (ValueError, binascii.Error) as e:
        raise DatasetLoadError(f"Could not decode upload '{filename}'") from e

    if len(decoded) > MAX_UPLOAD_BYTES:
        raise DatasetLoadError(f"Upload '{filename}' is larger than {MAX_UPLOAD_BYTES} bytes")

    try:
        text = decoded.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DatasetLoadError(f"Upload '{filename}' is not UTF-8 text") from e

    rows = read_table(io.StringIO(text), filename)
    return DatasetResource(name=filename, rows=rows, default_symbols="")


class DatasetManager(Mapping[str, DatasetResource]):
    """
    Dict-like access to configured datasets by name. Tables are read
    lazily on first access and kept as raw rows; every load still
    normalises them into a fresh Dataset.
    """

    def __init__(self, cfg_by_name: Dict[str, DatasetConfig], data_root: Optional[Path] = None):
        self._cfg_by_name = cfg_by_name
        self._data_root = data_root
        self._loaded: Dict[str, DatasetResource] = {}

    def __getitem__(self, name: str) -> DatasetResource:
        if name in self._loaded:
            return self._loaded[name]

        cfg = self._cfg_by_name.get(name)
        if cfg is None:
            raise KeyError(f"Unknown dataset '{name}'")

        try:
            resource = load_resource(cfg, self._data_root)
        except DatasetLoadError as e:
            logger.error(
                "Dataset could not be read",
                extra={"dataset": cfg.name, "error": str(e)},
            )
            raise

        self._loaded[name] = resource
        return resource

    def __iter__(self) -> Iterator[str]:
        return iter(self._cfg_by_name)

    def __len__(self) -> int:
        return len(self._cfg_by_name)
