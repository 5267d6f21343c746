"""
Static species and plot reference lists.

Species codes starting with 'A' are forest trees, codes starting with 'B'
are fruit trees. The built-in lists can be replaced by a JSON file of the form
``{"species": [{"code", "name", "group"}], "plots": [{"code", "name", "short"}]}``.
"""
import json
import logging
from pathlib import Path
from typing import Optional

from treelog.config import settings
from treelog.domain.models import PlotInfo, SpeciesInfo

logger = logging.getLogger(__name__)


DEFAULT_SPECIES: list[SpeciesInfo] = [
    SpeciesInfo(code="A01", name="Teak", group="A"),
    SpeciesInfo(code="A02", name="Burmese Padauk", group="A"),
    SpeciesInfo(code="A03", name="Siamese Rosewood", group="A"),
    SpeciesInfo(code="A04", name="Ironwood", group="A"),
    SpeciesInfo(code="A05", name="Yang Na", group="A"),
    SpeciesInfo(code="A06", name="Golden Shower", group="A"),
    SpeciesInfo(code="A07", name="Burma Ebony", group="A"),
    SpeciesInfo(code="A08", name="Monkey Pod", group="A"),
    SpeciesInfo(code="B01", name="Mango", group="B"),
    SpeciesInfo(code="B02", name="Longan", group="B"),
    SpeciesInfo(code="B03", name="Lychee", group="B"),
    SpeciesInfo(code="B04", name="Avocado", group="B"),
    SpeciesInfo(code="B05", name="Arabica Coffee", group="B"),
    SpeciesInfo(code="B06", name="Macadamia", group="B"),
    SpeciesInfo(code="B07", name="Jackfruit", group="B"),
]

DEFAULT_PLOTS: list[PlotInfo] = [
    PlotInfo(code="P1", name="Huai Mae Sap upper slope", short="HMS1"),
    PlotInfo(code="P2", name="Huai Mae Sap lower slope", short="HMS2"),
    PlotInfo(code="P3", name="Ban Kong Kan ridge", short="BKK"),
    PlotInfo(code="P4", name="Ban Mae Ning valley", short="BMN"),
]


class Catalog:
    """Read-only lookup over the species and plot lists."""

    def __init__(
        self,
        species: Optional[list[SpeciesInfo]] = None,
        plots: Optional[list[PlotInfo]] = None,
    ):
        self.species = list(species if species is not None else DEFAULT_SPECIES)
        self.plots = list(plots if plots is not None else DEFAULT_PLOTS)
        self._species_by_code = {s.code: s for s in self.species}
        self._plots_by_code = {p.code: p for p in self.plots}

    def find_species(self, code: Optional[str]) -> Optional[SpeciesInfo]:
        return self._species_by_code.get(code) if code else None

    def find_plot(self, code: Optional[str]) -> Optional[PlotInfo]:
        return self._plots_by_code.get(code) if code else None

    def species_name(self, code: str) -> str:
        """Display name for a species code, or the code itself if unknown."""
        species = self.find_species(code)
        return species.name if species else code

    def plot_short(self, code: str) -> str:
        """Short plot name for a plot code, or the code itself if unknown."""
        plot = self.find_plot(code)
        return plot.short if plot else code

    @classmethod
    def from_file(cls, path: str) -> "Catalog":
        """
        Load a catalog from a JSON file.

        Args:
            path: Path to the JSON catalog file

        Returns:
            Catalog instance

        Raises:
            ValueError: If the file does not contain valid catalog entries
        """
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        try:
            species = [SpeciesInfo(**entry) for entry in raw.get("species", [])]
            plots = [PlotInfo(**entry) for entry in raw.get("plots", [])]
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid catalog file {path}: {e}") from e

        logger.info(f"Loaded catalog from {path}: {len(species)} species, {len(plots)} plots")
        return cls(species=species or None, plots=plots or None)


# Singleton instance
_catalog: Optional[Catalog] = None


def get_catalog() -> Catalog:
    """
    Get or create the singleton catalog instance.

    Returns:
        Catalog instance
    """
    global _catalog
    if _catalog is None:
        if settings.catalog_path:
            _catalog = Catalog.from_file(settings.catalog_path)
        else:
            _catalog = Catalog()
    return _catalog
