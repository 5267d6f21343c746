"""
Record store request constants.

The store is a spreadsheet web app: reads select a sheet with a query
parameter, writes post a JSON payload naming an action.
"""


class SheetStoreActions:
    """Write actions understood by the store."""

    ADD_GROWTH_LOG = "addGrowthLog"

    @classmethod
    def payload(cls, action: str, fields: dict) -> dict:
        """
        Build a write payload.

        Args:
            action: Store action name
            fields: Record fields in wire format

        Returns:
            Payload with the action merged into the fields
        """
        return {"action": action, **fields}


class StoreConstants:
    """General store configuration constants."""

    # Query parameter selecting the sheet on reads
    SHEET_PARAM = "sheet"

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"

    # Fields sent with a new growth log; log_id and timestamp are server-assigned
    GROWTH_LOG_FIELDS = (
        "tree_code",
        "tag_label",
        "plot_code",
        "species_code",
        "species_group",
        "species_name",
        "tree_number",
        "row_main",
        "row_sub",
        "dbh_cm",
        "height_m",
        "status",
        "note",
        "recorder",
        "survey_date",
    )
