"""Data manager for loading the case table and the derived views.

This module resolves where the daily case-count table lives, reads and
validates it, and keeps the parsed table in memory so repeated calls
from the dashboard do not re-read the file.  Nothing is written back to
disk.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Optional, Union
from functools import lru_cache

import pandas as pd

from . import pipeline
from .config import BUNDLED_DATASET, DATA_SOURCE_ENV
from .schema import apply_aliases, validate_cases

logger = logging.getLogger(__name__)


def resolve_source(source: Optional[Union[str, Path]] = None) -> Path:
    """Select the CSV file holding the case table.

    The lookup order is:

    1. The ``source`` argument, if given.
    2. The ``COVID_DATA_SOURCE`` environment variable, if set.
    3. The sample table bundled with the package.

    Raises ``FileNotFoundError`` when the selected file does not exist.
    """
    if source is not None:
        path = Path(source)
    else:
        env = os.getenv(DATA_SOURCE_ENV)
        path = Path(env) if env else BUNDLED_DATASET
    # Expand relative or user paths to absolute
    path = path.expanduser().resolve()

    if not path.exists():
        raise FileNotFoundError(f"Case table not found at {path}")
    return path


@lru_cache(maxsize=4)
def _read_cases(path: Path) -> pd.DataFrame:
    """Read and validate the CSV at ``path``."""
    logger.info("Reading case table from %s", path)
    raw = pd.read_csv(path, dtype={"province": str, "country": str})
    cases = validate_cases(apply_aliases(raw))
    logger.info(
        "Loaded %d rows for %d countries", len(cases), cases["country"].nunique()
    )
    return cases


def load_cases(
    source: Optional[Union[str, Path]] = None, *, force_reload: bool = False
) -> pd.DataFrame:
    """
    Load the validated case table.

    Parameters
    ----------
    source : str or Path, optional
        CSV file to read.  See :func:`resolve_source` for the default.
    force_reload : bool, optional
        If ``True``, drop the in-memory cache and read the file again.

    Returns
    -------
    pd.DataFrame
        A copy of the table with canonical columns; callers may modify it
        freely.
    """
    path = resolve_source(source)
    if force_reload:
        # Clear the LRU cache before re-reading
        _read_cases.cache_clear()
    return _read_cases(path).copy()


def load_payload(
    source: Optional[Union[str, Path]] = None, **options: object
) -> Dict[str, object]:
    """Load the case table and compute every derived view.

    Keyword options are passed to :func:`pipeline.run_pipeline`
    (``top_n``, ``min_confirmed``, ``province_country``).
    """
    cases = load_cases(source)
    return pipeline.run_pipeline(cases, **options)
