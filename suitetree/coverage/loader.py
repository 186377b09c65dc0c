"""Coverage report loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from suitetree.models.coverage import CoverageReport

logger = logging.getLogger(__name__)


def load_coverage_report(path: Path) -> Optional[CoverageReport]:
    """Load a coverage summary file, or ``None`` when there is no usable report.

    A missing or unreadable report is not an error: nodes simply keep the
    coverage they already have.
    """
    if not path.exists():
        logger.info("No coverage report at %s", path)
        return None
    try:
        with open(path) as f:
            data = json.load(f)
        report = CoverageReport.from_summary_mapping(data)
    except (OSError, ValueError, TypeError, AttributeError, ValidationError) as e:
        logger.warning("Failed to load coverage report %s: %s", path, e)
        return None
    logger.debug("Loaded coverage for %d files from %s", len(report.files), path)
    return report
