"""Render module for plan output display."""

from render.renderers import (
    BaseRenderer,
    TaxRenderer,
    TrajectoryRenderer,
    LeapStackRenderer,
    RoutingRenderer,
    RentRenderer,
    NetWorthImpactRenderer,
    RENDERER_REGISTRY,
)
from render.pdf_renderer import PlanPdfRenderer

__all__ = [
    'BaseRenderer',
    'TaxRenderer',
    'TrajectoryRenderer',
    'LeapStackRenderer',
    'RoutingRenderer',
    'RentRenderer',
    'NetWorthImpactRenderer',
    'PlanPdfRenderer',
    'RENDERER_REGISTRY',
]
