from models.diff import Chunk, ChunkKind
from services.change_stats import compute_stats, count_lines
from services.diff_generator import compare_text


def test_empty_chunk_list_has_zero_percent():
    stats = compute_stats([])

    assert stats.total_lines == 0
    assert stats.changed_percent == 0


def test_count_lines_ignores_blank_segments():
    assert count_lines("a\nb\n") == 2
    assert count_lines("single") == 1
    assert count_lines("\n\n") == 0
    assert count_lines("") == 0


def test_line_counts_differ_from_chunk_counts():
    result = compare_text("keep\n", "keep\nb\nc\nd\n")

    stats = compute_stats(result.chunks)

    assert result.additions == 1
    assert stats.added_lines == 3
    assert stats.removed_lines == 0
    assert stats.unchanged_lines == 1
    assert stats.total_lines == 4
    assert stats.changed_percent == 75


def test_percent_is_rounded():
    chunks = [
        Chunk(text="a\nb\n", kind=ChunkKind.UNCHANGED),
        Chunk(text="c\n", kind=ChunkKind.REMOVED),
    ]

    assert compute_stats(chunks).changed_percent == 33


def test_percent_stays_within_bounds():
    for original, modified in [("", "x\n"), ("x\n", "x\n"), ("a\nb\n", "c\n"), ("\n", "\n\n")]:
        stats = compute_stats(compare_text(original, modified).chunks)
        assert 0 <= stats.changed_percent <= 100
