"""Fixed-width formatting policy for forum-markup descriptions.

All column widths used by the description tables live here so that the
alignment of the title row and data rows can be checked in one place.
"""

SNAPSHOT_DATE_FORMAT = "%Y-%m-%d"

RANK_WIDTH = 5
AVERAGE_WIDTH = 5
NEW_AVERAGE_WIDTH = 6
BAYES_AVERAGE_WIDTH = 6
USERS_RATED_WIDTH = 6
CHANGE_WIDTH = 8
# Length of "[COLOR=#xxxxxx][/COLOR]", which pads every change cell
COLOR_TAG_WIDTH = 23
TITLE_WIDTH = len("YYYY-MM-DD")
COLUMN_GAP = "  "

EMPTY_STR = "N/A"
NO_NEW_AVERAGE = "-"

COLOR_UP = "009900"
COLOR_DOWN = "990000"
COLOR_NEUTRAL = "555555"
NEUTRAL_MARK = "-"
# Kept on score-less rows so the change column stays aligned
BLANK_CHANGE = "[COLOR=#000000][/COLOR]"

HEADER_BACKGROUND = "000000"
HEADER_FOREGROUND = "FFFFFF"
CURRENT_ROW_BACKGROUND = "FFFF80"
STRIPE_BACKGROUND = "D8D8D8"


def str_or_na(value: str) -> str:
    """Replace empty strings with the missing-value token."""
    if value == "":
        return EMPTY_STR
    return value


def pad(value: str, width: int) -> str:
    """Right-align a value within a column."""
    return f"{value:>{width}}"


def table_title() -> str:
    """Title row of a description table."""
    cells = [
        pad("", TITLE_WIDTH),
        pad("Rank", RANK_WIDTH),
        pad("Avg", AVERAGE_WIDTH),
        pad("New", NEW_AVERAGE_WIDTH),
        pad("Bay", BAYES_AVERAGE_WIDTH),
        pad("#Rtg", USERS_RATED_WIDTH),
        pad("Chng", CHANGE_WIDTH),
    ]
    return (
        f"[BGCOLOR=#{HEADER_BACKGROUND}][COLOR=#{HEADER_FOREGROUND}][b]"
        f"{COLUMN_GAP.join(cells)}"
        f"[/b][/COLOR][/BGCOLOR]"
    )


def table_row(
    label: str,
    rank: str,
    average: str,
    new_average: str,
    bayes_average: float,
    users_rated: str,
    change: str,
) -> str:
    """One data row of a description table; missing strings render as N/A."""
    cells = [
        label,
        pad(str_or_na(rank), RANK_WIDTH),
        pad(str_or_na(average), AVERAGE_WIDTH),
        pad(new_average, NEW_AVERAGE_WIDTH),
        f"{bayes_average:{BAYES_AVERAGE_WIDTH}.3f}",
        pad(str_or_na(users_rated), USERS_RATED_WIDTH),
        pad(change, CHANGE_WIDTH + COLOR_TAG_WIDTH),
    ]
    return COLUMN_GAP.join(cells)


def highlight_current(row: str) -> str:
    return f"[b][BGCOLOR=#{CURRENT_ROW_BACKGROUND}]{row}[/BGCOLOR][/b]"


def stripe(row: str) -> str:
    return f"[BGCOLOR=#{STRIPE_BACKGROUND}]{row}[/BGCOLOR]"
