"""
Domain service: tree identity derivation and submission validation.

A tree code is the plot code, the species code and the tree number padded
to three digits. Incomplete input yields a placeholder that is only meant
for live previews; build_growth_record is the only path to a persistable
record and rejects incomplete input before anything is derived.
"""
from datetime import date
from typing import Any, Optional, Union
import logging
from pydantic import BaseModel, field_validator

from treelog.domain.catalogs import Catalog, get_catalog
from treelog.domain.models import GrowthRecord, SpeciesGroup, TreeStatus

logger = logging.getLogger(__name__)

INCOMPLETE = "—"

REQUIRED_FIELDS = ("plot_code", "species_code", "tree_number", "row_main", "row_sub", "recorder")


class SubmissionValidationError(ValueError):
    """Raised when a growth submission is missing required fields."""

    def __init__(self, message: str, missing_fields: Optional[list[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class GrowthForm(BaseModel):
    """Raw growth observation input, as typed into the field form."""
    plot_code: Optional[str] = None
    species_code: Optional[str] = None
    tree_number: Optional[Union[int, str]] = None
    row_main: Optional[Union[int, str]] = None
    row_sub: Optional[Union[int, str]] = None
    dbh_cm: Optional[Union[float, str]] = None
    height_m: Optional[Union[float, str]] = None
    status: Optional[TreeStatus] = None
    note: str = ""
    recorder: Optional[str] = None
    survey_date: Optional[date] = None

    @field_validator("status", "survey_date", mode="before")
    @classmethod
    def _unset_blank(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class IdentityPreview(BaseModel):
    """Derived identity shown while the form is being filled in."""
    tree_code: str
    tag_label: str
    species_group: Optional[SpeciesGroup] = None
    species_name: Optional[str] = None


def _is_missing(value: Any) -> bool:
    return value is None or not str(value).strip()


def derive_tree_code(plot_code, species_code, tree_number) -> str:
    """
    Build the canonical tree code.

    Args:
        plot_code: Plot code, e.g. "P1"
        species_code: Species code, e.g. "A02"
        tree_number: Tree number within the plot, e.g. 14

    Returns:
        Tree code such as "P1A02014", or the placeholder if any input is missing
    """
    if any(_is_missing(v) for v in (plot_code, species_code, tree_number)):
        return INCOMPLETE
    number = str(tree_number).strip().rjust(3, "0")
    return f"{str(plot_code).strip()}{str(species_code).strip()}{number}"


def derive_tag_label(
    plot_code,
    species_code,
    tree_number,
    row_main,
    row_sub,
    catalog: Optional[Catalog] = None,
) -> str:
    """
    Build the human-readable tag label used on site.

    Format: "{tree_number} {plot_short} {row_main:02} ({row_sub}) {species_name}".
    Unknown plot or species codes are shown as-is.

    Returns:
        Tag label, or the placeholder if any input is missing
    """
    if any(_is_missing(v) for v in (plot_code, species_code, tree_number, row_main, row_sub)):
        return INCOMPLETE

    catalog = catalog or get_catalog()
    plot_short = catalog.plot_short(str(plot_code).strip())
    species_name = catalog.species_name(str(species_code).strip())
    main_padded = str(row_main).strip().rjust(2, "0")
    return f"{str(tree_number).strip()} {plot_short} {main_padded} ({str(row_sub).strip()}) {species_name}"


def derive_species_group(species_code: str) -> SpeciesGroup:
    """Forest species codes start with 'A'; everything else is group 'B'."""
    return "A" if species_code.startswith("A") else "B"


def preview_identity(form: GrowthForm, catalog: Optional[Catalog] = None) -> IdentityPreview:
    """Derive the identity fields for a partially filled form."""
    catalog = catalog or get_catalog()
    species_code = (form.species_code or "").strip()

    return IdentityPreview(
        tree_code=derive_tree_code(form.plot_code, form.species_code, form.tree_number),
        tag_label=derive_tag_label(
            form.plot_code, form.species_code, form.tree_number,
            form.row_main, form.row_sub, catalog,
        ),
        species_group=derive_species_group(species_code) if species_code else None,
        species_name=catalog.species_name(species_code) if species_code else None,
    )


def _parse_tree_number(value) -> int:
    try:
        number = int(str(value).strip())
    except ValueError:
        number = 0
    if number < 1:
        raise SubmissionValidationError(
            f"tree_number must be a positive integer, got {value!r}",
            missing_fields=["tree_number"],
        )
    return number


def _parse_metric(value) -> Optional[float]:
    if _is_missing(value):
        return None
    return float(value)


def build_growth_record(form: GrowthForm, catalog: Optional[Catalog] = None) -> GrowthRecord:
    """
    Validate a submitted form and derive a complete growth record.

    Species group and name are always derived from the species code.

    Args:
        form: Submitted form values
        catalog: Species/plot catalog (defaults to the process catalog)

    Returns:
        GrowthRecord ready to be written to the store

    Raises:
        SubmissionValidationError: If a required field is missing or invalid
    """
    catalog = catalog or get_catalog()

    missing = [name for name in REQUIRED_FIELDS if _is_missing(getattr(form, name))]
    if missing:
        raise SubmissionValidationError(
            f"Missing required fields: {', '.join(missing)}",
            missing_fields=missing,
        )

    tree_number = _parse_tree_number(form.tree_number)
    plot_code = form.plot_code.strip()
    species_code = form.species_code.strip()

    try:
        dbh_cm = _parse_metric(form.dbh_cm)
        height_m = _parse_metric(form.height_m)
    except ValueError as e:
        raise SubmissionValidationError(f"Growth metrics must be numeric: {e}") from e

    record = GrowthRecord(
        tree_code=derive_tree_code(plot_code, species_code, tree_number),
        tag_label=derive_tag_label(
            plot_code, species_code, tree_number, form.row_main, form.row_sub, catalog
        ),
        plot_code=plot_code,
        species_code=species_code,
        species_group=derive_species_group(species_code),
        species_name=catalog.species_name(species_code),
        tree_number=tree_number,
        row_main=str(form.row_main).strip(),
        row_sub=str(form.row_sub).strip(),
        dbh_cm=dbh_cm,
        height_m=height_m,
        status=form.status,
        note=form.note,
        recorder=form.recorder.strip(),
        survey_date=form.survey_date or date.today(),
    )

    logger.debug(f"Built growth record {record.tree_code} ({record.tag_label})")
    return record
