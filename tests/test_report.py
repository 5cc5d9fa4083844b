"""Tests for CSV report rendering."""

import csv
import io
from datetime import date

import pytest

from bgg_climb.models import ClimbConfig, GameRecord, HistoricalGame, Mode, PairedGame
from bgg_climb.services.displacement import DisplacementDetector
from bgg_climb.services.errors import EncodingError
from bgg_climb.services.formatting import COLOR_TAG_WIDTH, table_row, table_title
from bgg_climb.services.parser import parse_record
from bgg_climb.services.report import (
    COMPARISON_HEADER,
    DIFF_HEADER,
    HISTORY_HEADER,
    ReportRenderer,
)


def row(game_id: str, rank: int, average: str, users: str, bayes: str = "6.500") -> list[str]:
    return [game_id, f"Game {game_id}", "2019", str(rank), average, bayes, users, f"/bg/{game_id}", f"{game_id}.jpg"]


def climber_history() -> HistoricalGame:
    return HistoricalGame(records=[
        GameRecord(record=parse_record(row("X", 2, "8.0", "150")), date=date(2024, 3, 15)),
        GameRecord(record=parse_record(row("X", 5, "7.5", "100")), date=date(2024, 3, 8)),
        GameRecord(record=parse_record(row("X", 10, "7.5", "98")), date=date(2024, 3, 1)),
    ])


def read_csv(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


class BrokenStream(io.StringIO):
    def write(self, s: str) -> int:
        raise OSError("stream closed")


class TestTableFormatting:
    """Tests for the fixed-width table cells."""

    def test_title_row(self) -> None:
        assert table_title() == (
            "[BGCOLOR=#000000][COLOR=#FFFFFF][b]"
            "             Rank    Avg     New     Bay    #Rtg      Chng"
            "[/b][/COLOR][/BGCOLOR]"
        )

    def test_data_row_aligns_with_title(self) -> None:
        title = table_title().removeprefix("[BGCOLOR=#000000][COLOR=#FFFFFF][b]").removesuffix("[/b][/COLOR][/BGCOLOR]")
        data = table_row("2024-03-15", "2", "8.0", "~9.00", 6.5, "150", "[COLOR=#009900]↑ 60.00%[/COLOR]")

        assert len(data) == len(title) + COLOR_TAG_WIDTH

    def test_missing_values_render_placeholder(self) -> None:
        data = table_row("2024-03-15", "", "", "-", 0.0, "", "[COLOR=#000000][/COLOR]")

        assert data.startswith("2024-03-15    N/A    N/A       -   0.000     N/A")


class TestHistoryReport:
    """Tests for the multi-snapshot report."""

    def test_row_layout(self) -> None:
        renderer = ReportRenderer(Mode.RANK, stream=io.StringIO())

        newest = renderer.history_row(climber_history(), 0)

        assert newest == (
            "[b][BGCOLOR=#FFFF80]"
            "2024-03-15      2    8.0   ~9.00   6.500     150  [COLOR=#009900]↑ 60.00%[/COLOR]"
            "[/BGCOLOR][/b]"
        )

    def test_oldest_row_has_blank_change_and_stripe(self) -> None:
        renderer = ReportRenderer(Mode.RANK, stream=io.StringIO())

        oldest = renderer.history_row(climber_history(), 2)

        assert oldest.startswith("[BGCOLOR=#D8D8D8]2024-03-01")
        assert oldest.endswith("        [COLOR=#000000][/COLOR][/BGCOLOR]")
        assert "      -" in oldest

    def test_suppressed_new_average(self) -> None:
        renderer = ReportRenderer(Mode.RANK, stream=io.StringIO())

        # 100 vs 98 ratings is only 2% new
        middle = renderer.history_row(climber_history(), 1)

        assert not middle.startswith("[")
        assert "  2024-03-08" not in middle
        assert "    5    7.5       -" in middle

    def test_description(self) -> None:
        renderer = ReportRenderer(Mode.RANK, stream=io.StringIO())

        description = renderer.history_description(climber_history())
        lines = description.split("\n")

        assert lines[0] == "[size=18][b][COLOR=#009900]↗ 60.00%[/COLOR][/b][/size]"
        assert lines[1] == ""
        assert lines[2] == "[size=10][COLOR=#009900]↗ 80.00%[/COLOR] since 2024-03-01[/size]"
        assert lines[3] == "[c]"
        assert lines[4] == table_title()
        assert "2024-03-01" in lines[5]
        assert "2024-03-08" in lines[6]
        assert "2024-03-15" in lines[7]
        assert lines[8] == "[/c]"

    def test_write_history(self) -> None:
        stream = io.StringIO()
        renderer = ReportRenderer(Mode.RANK, stream=stream)

        renderer.write_history([climber_history()])
        rows = read_csv(stream.getvalue())

        assert rows[0] == HISTORY_HEADER
        assert rows[1][:2] == ["X", "Game X"]
        assert rows[1][2].startswith("[size=18]")
        assert rows[1][3] == "2.500000"
        assert rows[1][4:] == row("X", 2, "8.0", "150")[2:]
        assert len(rows[1]) == len(HISTORY_HEADER)
        for period in ("2024-03-01", "2024-03-08"):
            assert period in rows[1][2]
        assert renderer.rows_written == 2

    def test_bayes_mode_description(self) -> None:
        game = HistoricalGame(records=[
            GameRecord(record=parse_record(row("X", 2, "8.0", "150", bayes="6.750")), date=date(2024, 3, 15)),
            GameRecord(record=parse_record(row("X", 5, "7.5", "100", bayes="6.500")), date=date(2024, 3, 8)),
        ])
        renderer = ReportRenderer(Mode.BAYES, stream=io.StringIO())

        description = renderer.history_description(game)

        assert description.startswith("[size=18][b][COLOR=#009900]↗ 0.250[/COLOR][/b][/size]")

    def test_custom_rating_scale_is_used(self) -> None:
        game = HistoricalGame(records=[
            GameRecord(record=parse_record(row("X", 2, "9.5", "100")), date=date(2024, 3, 15)),
            GameRecord(record=parse_record(row("X", 5, "9", "90")), date=date(2024, 3, 8)),
        ])
        renderer = ReportRenderer(Mode.RANK, ClimbConfig(rating_scale_max=20.0), stream=io.StringIO())

        assert "~14.00" in renderer.history_row(game, 0)


class TestComparisonReport:
    """Tests for the two-snapshot report."""

    def build(self) -> tuple[list[PairedGame], DisplacementDetector]:
        def paired(game_id: str, old: int, new: int, users: str, score: float) -> PairedGame:
            return PairedGame(
                id=game_id,
                old=parse_record(row(game_id, old, "7.5", "100")),
                new=parse_record(row(game_id, new, "8.0", users)),
                climb_score=score,
            )

        games = [
            paired("X", 5, 2, "150", 2.5),
            paired("Y", 2, 3, "120", 2 / 3),
            paired("Z", 3, 4, "500", 0.75),
            paired("W", 4, 5, "80", 0.8),
        ]
        return games, DisplacementDetector(games, fallback=6)

    def test_description_mentions_displaced_game(self) -> None:
        games, detector = self.build()
        renderer = ReportRenderer(Mode.RANK, stream=io.StringIO())

        description = renderer.comparison_description(games[0], detector.displaced_by(games[0]))

        assert description.startswith("[size=18][b][COLOR=#009900]↗ 60.00%[/COLOR][/b][/size]\n[c]\n")
        assert "~9.00" in description
        assert description.endswith("[size=10]Pushed down [b]Game Z[/b] and 1 other game[/size]")

    def test_description_requires_both_sides(self) -> None:
        renderer = ReportRenderer(Mode.RANK, stream=io.StringIO())

        with pytest.raises(ValueError):
            renderer.comparison_description(PairedGame(id="1"), [])

    def test_write_comparison(self) -> None:
        games, detector = self.build()
        stream = io.StringIO()
        renderer = ReportRenderer(Mode.RANK, stream=stream)

        renderer.write_comparison(games, detector)
        rows = read_csv(stream.getvalue())

        assert rows[0] == COMPARISON_HEADER
        assert len(rows) == 5
        assert all(len(r) == len(COMPARISON_HEADER) for r in rows)
        assert rows[1][3] == "2.500000"
        assert rows[1][4:12] == row("X", 5, "7.5", "100")[1:]
        assert rows[1][12:] == row("X", 2, "8.0", "150")[1:]
        assert "Pushed down" not in rows[2][2]

    def test_diff(self) -> None:
        stream = io.StringIO()
        renderer = ReportRenderer(stream=stream)
        gone = PairedGame(id="G", old=parse_record(row("G", 7, "7", "10")), climb_score=-0.5)

        renderer.write_diff([gone])
        rows = read_csv(stream.getvalue())

        assert rows == [DIFF_HEADER, ["G", "Game G", "7", "", "-0.500000"]]

    def test_write_failure_raises_encoding_error(self) -> None:
        renderer = ReportRenderer(stream=BrokenStream())

        with pytest.raises(EncodingError) as exc_info:
            renderer.write_diff([])

        assert isinstance(exc_info.value.original_error, OSError)
