"""Application constants."""

USER_AGENT = "ruian-addresses/0.3 (+bulk address import)"
LEGACY_ENCODING = "cp1250"
DECODE_POLICIES = ("strict", "replace")
CSV_DELIMITER = ";"
EXECUTOR_KINDS = ("process", "thread")
ARCHIVE_URL_TEMPLATE = "https://vdp.cuzk.cz/vymenny_format/csv/{archive_date}_OB_ADR_csv.zip"
STAGES = (
    "fetch",
    "parse",
    "lookup",
)
EXIT_SUCCESS = 0
EXIT_NOT_FOUND = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "entry",
    "event",
    "status",
    "attempt",
    "duration_ms",
    "bytes",
    "rows_out",
    "error_code",
    "message",
)
