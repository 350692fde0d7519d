"""
Finding Normalizer - Selects the engine-specific normalizer.
"""
from typing import Any, Dict, List, Optional, Type

from wcag_auditor.schemas.finding import Engine, Finding
from wcag_auditor.services.normalizers.axe_normalizer import AxeNormalizer
from wcag_auditor.services.normalizers.base import FindingNormalizer, NormalizeOptions
from wcag_auditor.services.normalizers.pa11y_normalizer import Pa11yNormalizer

NORMALIZERS: Dict[Engine, Type[FindingNormalizer]] = {
    Engine.AXE: AxeNormalizer,
    Engine.PA11Y: Pa11yNormalizer,
}


def get_normalizer(engine: Engine, options: Optional[NormalizeOptions] = None) -> FindingNormalizer:
    return NORMALIZERS[Engine(engine)](options)


def normalize(raw: Any, engine: Engine, options: Optional[NormalizeOptions] = None) -> List[Finding]:
    """Convert a raw engine result into canonical Findings.

    Args:
        raw: Result structure as returned by the engine's check runner
        engine: Which engine produced ``raw``
        options: Record filters and compliance-tag prefixes

    Returns:
        Findings in the engine's original order

    Raises:
        MalformedEngineResult: if the top-level findings collection is missing
    """
    return get_normalizer(engine, options).normalize(raw)
