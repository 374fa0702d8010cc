"""Compliance run options."""

from __future__ import annotations

from dataclasses import dataclass

from .env import bool_env


@dataclass(frozen=True, slots=True)
class ComplianceConfig:
    accept_parenthetical_declarations: bool = False


def get_compliance_config() -> ComplianceConfig:
    return ComplianceConfig(
        accept_parenthetical_declarations=bool_env("LABELCHECK_PARENTHETICAL_DECLARATIONS"),
    )
