"""JSON output formatter for diffview."""

import json

from diffview import __version__
from diffview.core.types import DiffView
from diffview.output.base import Formatter


class JSONFormatter(Formatter):
    """JSON formatter for machine-readable output."""

    @property
    def name(self) -> str:
        return "json"

    def format(self, view: DiffView, color: bool = True) -> str:
        """Format a diff view as JSON. Color is ignored."""
        output = {"version": __version__}
        output.update(view.to_dict())
        return json.dumps(output, indent=2)
