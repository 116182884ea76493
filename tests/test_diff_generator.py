import random

import pytest

from models.diff import Chunk, ChunkKind
from services.diff_generator import (
    DiffGenerator,
    compare_text,
    diff_lines,
    format_change_description,
    tokenize,
)

U, A, R = ChunkKind.UNCHANGED, ChunkKind.ADDED, ChunkKind.REMOVED

PAIRS = [
    ("", ""),
    ("", "hello\n"),
    ("hello\n", ""),
    ("line1\nline2\nline3\n", "line1\nchanged\nline3\n"),
    ("foo\nbar\n", "bar\nfoo\n"),
    ("a\nb", "a\nb\n"),
    ("x\nx\nx\n", "x\ny\nx\n"),
    ("p\nq\nr\n", "q\nr\ns\n"),
    ("one\r\ntwo\r\n", "one\r\nthree\r\ntwo\r\n"),
    ("\n\n\n", "\n"),
    ("a\nb\nc\nd\ne\n", "e\nd\nc\nb\na\n"),
    ("same\n" * 5 + "tail", "head\n" + "same\n" * 3),
]


def _pairs(chunks):
    return [(c.kind, c.text) for c in chunks]


def test_tokenize_keeps_terminators():
    assert tokenize("a\nb\n") == ["a\n", "b\n"]
    assert tokenize("a\nb") == ["a\n", "b"]
    assert tokenize("\n\n") == ["\n", "\n"]
    assert tokenize("") == []


def test_tokenize_does_not_normalize_whitespace():
    assert tokenize("  a \r\n\tb") == ["  a \r\n", "\tb"]


@pytest.mark.parametrize("original, modified", PAIRS)
def test_chunks_reconstruct_both_documents(original, modified):
    result = compare_text(original, modified)

    assert result.original_text() == original
    assert result.modified_text() == modified


@pytest.mark.parametrize("text", ["a\n", "a\nb\nc\n", "no newline", "x\n\nx\n"])
def test_identical_documents_yield_single_unchanged_chunk(text):
    result = compare_text(text, text)

    assert _pairs(result.chunks) == [(U, text)]
    assert result.additions == 0
    assert result.deletions == 0


def test_empty_documents_yield_no_chunks():
    assert compare_text("", "").chunks == []


def test_single_line_replacement():
    result = compare_text("line1\nline2\nline3\n", "line1\nchanged\nline3\n")

    assert _pairs(result.chunks) == [
        (U, "line1\n"),
        (R, "line2\n"),
        (A, "changed\n"),
        (U, "line3\n"),
    ]
    assert result.additions == 1
    assert result.deletions == 1


def test_empty_original_is_one_added_chunk():
    result = compare_text("", "hello\n")

    assert _pairs(result.chunks) == [(A, "hello\n")]
    assert result.additions == 1
    assert result.deletions == 0


def test_empty_modified_is_one_removed_chunk():
    result = compare_text("hello\nworld\n", "")

    assert _pairs(result.chunks) == [(R, "hello\nworld\n")]
    assert result.additions == 0
    assert result.deletions == 1


def test_reordered_lines_keep_a_common_line():
    result = compare_text("foo\nbar\n", "bar\nfoo\n")

    assert _pairs(result.chunks) == [(R, "foo\n"), (U, "bar\n"), (A, "foo\n")]


def test_disjoint_documents_remove_all_then_add_all():
    result = compare_text("a\nb\nc\n", "x\ny\n")

    assert _pairs(result.chunks) == [(R, "a\nb\nc\n"), (A, "x\ny\n")]
    assert result.additions == 1
    assert result.deletions == 1


def test_unchanged_run_between_edits():
    result = compare_text("p\nq\nr\n", "q\nr\ns\n")

    assert _pairs(result.chunks) == [(R, "p\n"), (U, "q\nr\n"), (A, "s\n")]


def test_trailing_newline_difference_does_not_invent_empty_line():
    result = compare_text("a\nb", "a\nb\n")

    assert _pairs(result.chunks) == [(U, "a\n"), (R, "b"), (A, "b\n")]
    assert all(chunk.text for chunk in result.chunks)


def test_removed_chunk_precedes_added_chunk_in_each_gap():
    chunks = diff_lines(tokenize("keep\nold1\nold2\nkeep2\n"), tokenize("keep\nnew\nkeep2\n"))

    kinds = [c.kind for c in chunks]
    assert kinds == [U, R, A, U]


def test_multi_line_chunks_count_once():
    result = compare_text("a\n", "a\nb\nc\nd\n")

    assert _pairs(result.chunks) == [(U, "a\n"), (A, "b\nc\nd\n")]
    assert result.additions == 1


def _random_document(rng: random.Random) -> str:
    lines = [rng.choice("abc") + "\n" for _ in range(rng.randint(0, 7))]
    if lines and rng.random() < 0.2:
        lines[-1] = lines[-1].rstrip("\n")
    return "".join(lines)


def _lcs_length(a, b) -> int:
    table = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]
    for i in range(len(a) - 1, -1, -1):
        for j in range(len(b) - 1, -1, -1):
            if a[i] == b[j]:
                table[i][j] = table[i + 1][j + 1] + 1
            else:
                table[i][j] = max(table[i + 1][j], table[i][j + 1])
    return table[0][0]


def test_swapping_inputs_swaps_counts_when_alignment_is_ambiguous():
    forward = compare_text("c\nb\nc\na\n", "c\na\nc\n")
    backward = compare_text("c\na\nc\n", "c\nb\nc\na\n")

    assert forward.additions == backward.deletions
    assert forward.deletions == backward.additions


@pytest.mark.parametrize("seed", range(20))
def test_random_documents_reconstruct_minimally_and_symmetrically(seed):
    rng = random.Random(seed)
    for _ in range(100):
        original, modified = _random_document(rng), _random_document(rng)

        forward = compare_text(original, modified)
        backward = compare_text(modified, original)

        assert forward.original_text() == original
        assert forward.modified_text() == modified
        assert forward.additions == backward.deletions
        assert forward.deletions == backward.additions

        kept = sum(len(tokenize(c.text)) for c in forward.chunks if c.kind == U)
        assert kept == _lcs_length(tokenize(original), tokenize(modified))


def test_format_change_description_prefixes_every_line():
    chunks = [
        Chunk(text="same\n", kind=U),
        Chunk(text="old\nolder\n", kind=R),
        Chunk(text="new\n", kind=A),
    ]

    assert format_change_description(chunks) == "  same\n- old\n- older\n+ new"


def test_diff_generator_service_wraps_functions():
    generator = DiffGenerator()

    result = generator.compare("a\n", "b\n")

    assert generator.format_change_description(result) == "- a\n+ b"
