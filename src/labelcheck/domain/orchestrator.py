"""Concurrent compliance run over all checkers plus cross-checker findings."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from labelcheck.domain.checkers import AllergenChecker, GRASChecker, NDIChecker
from labelcheck.domain.errors import CheckerFailure, ComplianceRunFailed
from labelcheck.domain.model import (
    AggregateComplianceResult,
    AllergenComplianceReport,
    CheckerName,
    CheckerOutcome,
    CheckerStatus,
    Escalation,
    EscalationKind,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from labelcheck.domain.checkers import ComplianceChecker
    from labelcheck.domain.matching import Matcher
    from labelcheck.domain.model import AllergenDetection
    from labelcheck.domain.reference_cache import ReferenceDataCache

log = logging.getLogger(__name__)

_PARENTHETICAL_RE = re.compile(r"\(([^)]*)\)")


@dataclass(slots=True)
class ComplianceOrchestrator:
    """Run every checker concurrently and aggregate what they produce.

    Checker failures are captured per checker and never cancel the others. The aggregate is
    degraded when at least one checker failed; only a run where every checker failed raises
    ``ComplianceRunFailed``.
    """

    checkers: Sequence[ComplianceChecker]
    accept_parenthetical_declarations: bool = False
    timer: Callable[[], float] = field(default=time.perf_counter)

    @classmethod
    def from_cache(
        cls,
        cache: ReferenceDataCache,
        *,
        matcher: Matcher | None = None,
        accept_parenthetical_declarations: bool = False,
    ) -> ComplianceOrchestrator:
        return cls(
            checkers=(
                GRASChecker(cache, matcher=matcher),
                NDIChecker(cache, matcher=matcher),
                AllergenChecker(cache, matcher=matcher),
            ),
            accept_parenthetical_declarations=accept_parenthetical_declarations,
        )

    async def run(
        self,
        ingredients: Iterable[str],
        declared_allergen_statement: str | None = None,
    ) -> AggregateComplianceResult:
        items = tuple(ingredients)
        log.info("Starting compliance run: ingredients=%s", len(items))

        outcomes = await asyncio.gather(
            *(self._run_checker(checker, items) for checker in self.checkers)
        )
        by_name = {outcome.checker: outcome for outcome in outcomes}

        failures = {
            name: outcome.error or "unknown error"
            for name, outcome in by_name.items()
            if not outcome.ok
        }
        if failures and len(failures) == len(by_name):
            raise ComplianceRunFailed(failures)

        escalations: tuple[Escalation, ...] = ()
        allergen_outcome = by_name.get(CheckerName.ALLERGENS)
        if allergen_outcome is not None and isinstance(
            allergen_outcome.report, AllergenComplianceReport
        ):
            escalations = undeclared_allergen_escalations(
                allergen_outcome.report,
                declared_allergen_statement,
                accept_parenthetical=self.accept_parenthetical_declarations,
            )

        result = AggregateComplianceResult(
            ingredients=items,
            declared_allergen_statement=declared_allergen_statement,
            outcomes=by_name,
            escalations=escalations,
        )
        log.info(
            "Finished compliance run: statuses=%s degraded=%s escalations=%s",
            {str(name): str(status) for name, status in result.statuses.items()},
            result.degraded,
            len(escalations),
        )
        return result

    async def _run_checker(
        self, checker: ComplianceChecker, ingredients: tuple[str, ...]
    ) -> CheckerOutcome:
        started = self.timer()
        try:
            report = await checker.check(ingredients)
        except CheckerFailure as exc:
            elapsed = self.timer() - started
            log.warning("%s checker failed after %.3fs: %s", checker.name, elapsed, exc)
            return CheckerOutcome(
                checker=checker.name,
                status=CheckerStatus.FAILED,
                elapsed_seconds=elapsed,
                error=str(exc),
            )
        return CheckerOutcome(
            checker=checker.name,
            status=CheckerStatus.OK,
            elapsed_seconds=self.timer() - started,
            report=report,
        )


def undeclared_allergen_escalations(
    report: AllergenComplianceReport,
    declared_statement: str | None,
    *,
    accept_parenthetical: bool = False,
) -> tuple[Escalation, ...]:
    """Escalate every detected allergen category the label does not declare.

    A category counts as declared when its name occurs (case-insensitively) in the declared
    allergen statement. With ``accept_parenthetical`` a parenthetical naming the category next
    to a contributing ingredient (``"Whey (Milk)"``) also counts.
    """

    statement = (declared_statement or "").casefold()
    escalations: list[Escalation] = []
    for detection in report.detections:
        if detection.category.casefold() in statement:
            continue
        if accept_parenthetical and _declared_parenthetically(detection):
            continue
        log.warning(
            "Undeclared allergen %s from ingredients %s",
            detection.category,
            list(detection.ingredients),
        )
        escalations.append(
            Escalation(
                kind=EscalationKind.UNDECLARED_ALLERGEN,
                category=detection.category,
                ingredients=detection.ingredients,
                message=_undeclared_message(detection),
            )
        )
    return tuple(escalations)


def _declared_parenthetically(detection: AllergenDetection) -> bool:
    category = detection.category.casefold()
    return any(
        category in content.casefold()
        for ingredient in detection.ingredients
        for content in _PARENTHETICAL_RE.findall(ingredient)
    )


def _undeclared_message(detection: AllergenDetection) -> str:
    sources = ", ".join(f'"{ingredient}"' for ingredient in detection.ingredients)
    return (
        f"CRITICAL ALLERGEN VIOLATION: {detection.category} detected in {sources} but not "
        "declared. FALCPA Section 403(w) and the FASTER Act require major allergens to be "
        'declared in a "Contains" statement or parenthetically after the ingredient.'
    )
