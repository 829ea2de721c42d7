"""
Default distribution settings from the environment.

Variables (all optional, loaded from .env when present):
    DISPATCH_PRIORITIZE_EFFICIENCY   true/false
    DISPATCH_BALANCE_WORKLOAD        true/false
    DISPATCH_CONSIDER_LOCATION       true/false
    DISPATCH_SKILL_MATCHING          strict | flexible | adaptive
    DISPATCH_AUTO_ASSIGN_THRESHOLD   integer 0-100
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from dotenv import load_dotenv
from dispatch.policy.models import DistributionSettings
from dispatch.policy.rules import parse_settings

project_root = Path(__file__).parent.parent.parent
load_dotenv(project_root / ".env")

_ENV_FIELDS = {
    "prioritize_efficiency": "DISPATCH_PRIORITIZE_EFFICIENCY",
    "balance_workload": "DISPATCH_BALANCE_WORKLOAD",
    "consider_location": "DISPATCH_CONSIDER_LOCATION",
    "skill_matching": "DISPATCH_SKILL_MATCHING",
    "auto_assign_threshold": "DISPATCH_AUTO_ASSIGN_THRESHOLD",
}


def load_settings_from_env(environ: Optional[Mapping[str, str]] = None) -> DistributionSettings:
    """
    Read default settings from environment variables.

    Unset variables keep the model defaults. Raises ConfigurationError
    for unusable values, so a bad deployment fails at startup.
    """
    environ = os.environ if environ is None else environ
    raw: Dict[str, Any] = {}

    for field, var in _ENV_FIELDS.items():
        value = environ.get(var)
        if value is not None and value.strip() != "":
            raw[field] = value.strip().lower() if field == "skill_matching" else value.strip()

    return parse_settings(raw)
