"""
jinjalens.config - Analysis Settings
====================================

Tunable thresholds and switches for the analysis passes, modelled with
Pydantic so values read from ``pyproject.toml`` are validated with clear
error messages.

Configuration File
------------------
Settings live in the ``[tool.jinjalens]`` table::

    [tool.jinjalens]
    closing_lookahead = 80
    dedupe_mixed_delimiters = true

Every core entry point takes an optional ``config`` argument and falls back
to ``LensConfig()`` when it is omitted.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)

MAX_CANDIDATES = 20


class LensConfig(BaseModel):
    """
    Settings shared by linting, completion and hover.

    Attributes
    ----------
    closing_lookahead : int
        Characters after the cursor searched for the block closer when
        deciding ``has_closing``. A heuristic: a block body longer than the
        window is reported as unclosed.

    dot_lookback : int
        Characters before the cursor searched for an open ``{{`` when a dot
        was typed outside a recognised property access.

    hover_window : int
        Characters on each side of the cursor searched for a hover token.

    max_candidates : int
        Completion list limit, capped at 20.

    check_undefined_variables : bool
        Report expression roots missing from the variable tree.

    dedupe_mixed_delimiters : bool
        Drop block-parse diagnostics that overlap a mixed-delimiter
        diagnostic.

    inline_set_closes : bool
        Treat ``{% set x = y %}`` as self-contained; only the block form
        ``{% set x %}`` needs ``endset``.

    Examples
    --------
    >>> LensConfig().closing_lookahead
    50
    >>> LensConfig(max_candidates=50).max_candidates
    20
    """

    closing_lookahead: int = Field(
        default=50,
        ge=0,
        description="Lookahead window for detecting a block closer",
    )
    dot_lookback: int = Field(
        default=50,
        ge=1,
        description="Lookback window for dot-triggered property completion",
    )
    hover_window: int = Field(
        default=20,
        ge=1,
        description="Half-width of the hover token window",
    )
    max_candidates: int = Field(
        default=MAX_CANDIDATES,
        ge=1,
        description="Maximum number of completion candidates",
    )
    check_undefined_variables: bool = Field(
        default=True,
        description="Report undefined root variables in expressions",
    )
    dedupe_mixed_delimiters: bool = Field(
        default=False,
        description="Suppress block diagnostics overlapping mixed delimiters",
    )
    inline_set_closes: bool = Field(
        default=True,
        description="Do not require endset after an inline assignment",
    )

    @field_validator("max_candidates")
    @classmethod
    def cap_candidates(cls, v: int) -> int:
        """Never hand more than 20 candidates to the host."""
        return min(v, MAX_CANDIDATES)


def load_config(path: Path) -> LensConfig:
    """
    Load settings from a ``pyproject.toml``.

    Parameters
    ----------
    path : Path
        The TOML file itself or the directory containing ``pyproject.toml``.

    Returns
    -------
    LensConfig
        Parsed settings, or defaults when the file or table is missing.

    Raises
    ------
    ValueError
        If the file is not valid TOML.
    pydantic.ValidationError
        If a setting has an invalid value.
    """
    if path.is_dir():
        path = path / "pyproject.toml"
    if not path.is_file():
        logger.debug("No config file at %s, using defaults", path)
        return LensConfig()

    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e

    table = data.get("tool", {}).get("jinjalens", {})
    logger.debug("Loaded %d setting(s) from %s", len(table), path)
    return LensConfig(**table)
