"""Turn raw `adb install` output into an InstallOutcome.

The wrapped tool only speaks informal text, so classification is substring
based. The helpers below are the only places that know the text format.
"""

from __future__ import annotations

import re
from typing import Optional

from config.constants import ADBConstants, InstallAdviceConstants
from utils import adb_models, common

logger = common.get_logger('install_outcome')

_FAILURE_RE = re.compile(ADBConstants.INSTALL_FAILURE_PATTERN, re.IGNORECASE)
_LINE_SPLIT = re.compile(r'\r?\n')


def is_install_success(exit_code: int, output: str) -> bool:
    """Exit code 0 and "success" anywhere in the output, case-insensitive.

    An error text that merely mentions "success" is treated as success.
    """
    return exit_code == 0 and ADBConstants.INSTALL_SUCCESS_MARKER in output.lower()


def extract_failure_reason(output: str) -> str:
    """Return the bracketed failure token, else the first non-empty line."""
    if not output or not output.strip():
        return InstallAdviceConstants.NO_OUTPUT_REASON

    match = _FAILURE_RE.search(output)
    if match:
        return match.group('reason')

    for line in _LINE_SPLIT.split(output):
        if line.strip():
            return line.strip()
    return InstallAdviceConstants.NO_OUTPUT_REASON


def failure_advice(output: str) -> str:
    """Return remediation advice; the first marker in the fixed order wins."""
    upper = (output or '').upper()
    for markers, advice in InstallAdviceConstants.ORDERED_ADVICE:
        if any(marker in upper for marker in markers):
            return advice
    return InstallAdviceConstants.GENERIC


class InstallOutcomeClassifier:
    """Classify install results and keep the lifetime tallies."""

    def __init__(self, counters: Optional[adb_models.InstallCounters] = None) -> None:
        self.counters = counters if counters is not None else adb_models.InstallCounters()

    def classify(
        self,
        exit_code: int,
        stdout: str,
        stderr: str,
        elapsed: float,
        apk_name: str = '',
    ) -> adb_models.InstallOutcome:
        result = adb_models.CommandResult(exit_code, stdout or '', stderr or '')
        return self.classify_result(result, elapsed, apk_name)

    def classify_result(
        self,
        result: adb_models.CommandResult,
        elapsed: float,
        apk_name: str = '',
    ) -> adb_models.InstallOutcome:
        exit_code = result.exit_code
        output = result.combined_output

        if is_install_success(exit_code, output):
            self.counters.record(True)
            logger.info('Install succeeded for %s in %.1fs', apk_name or '<apk>', elapsed)
            return adb_models.InstallOutcome(
                success=True,
                reason_token=None,
                advice='',
                elapsed=elapsed,
                apk_name=apk_name,
            )

        self.counters.record(False)
        reason = extract_failure_reason(output)
        advice = failure_advice(output)
        logger.warning('Install failed for %s (exit=%s): %s', apk_name or '<apk>', exit_code, reason)
        return adb_models.InstallOutcome(
            success=False,
            reason_token=reason,
            advice=advice,
            elapsed=elapsed,
            apk_name=apk_name,
        )


__all__ = [
    'InstallOutcomeClassifier',
    'extract_failure_reason',
    'failure_advice',
    'is_install_success',
]
