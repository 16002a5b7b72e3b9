"""landdesk Domain Inventory -- projects and plots."""

from landdesk.domain.inventory.models import Plot, PlotStatus, Project

__all__ = ["Plot", "PlotStatus", "Project"]
