import asyncio

from readflow.reading import TokenStream, split_words, tokenize

SAMPLE = "  The quick\tbrown fox\n\njumps over   the lazy dog.\r\nAnd then   it rests.  "


def run_tokenize(text, **kwargs):
    return asyncio.run(tokenize(text, **kwargs))


def test_joined_tokens_equal_collapsed_text():
    tokens = run_tokenize(SAMPLE)
    assert " ".join(tokens) == "The quick brown fox jumps over the lazy dog. And then it rests."
    assert list(tokens) == split_words(SAMPLE)


def test_tokenize_is_idempotent():
    once = run_tokenize(SAMPLE)
    twice = run_tokenize(once.text())
    assert once == twice


def test_result_does_not_depend_on_chunk_size():
    text = " ".join(f"word{i}\n" if i % 7 == 0 else f"w{i}" for i in range(2000))
    expected = split_words(text)
    assert list(run_tokenize(text, chunk_size=5)) == expected
    assert list(run_tokenize(text, chunk_size=64)) == expected
    assert list(run_tokenize(text, large_threshold=10, filter_chunk_size=3)) == expected


def test_progress_is_monotonic_and_ends_at_100():
    text = " ".join(["alpha"] * 500)
    reports = []
    run_tokenize(text, on_progress=reports.append, chunk_size=100)
    assert len(reports) > 2
    assert reports == sorted(reports)
    assert reports[-1] == 100
    assert all(0 <= value <= 100 for value in reports)


def test_large_path_reports_progress():
    text = " ".join(["beta"] * 300)
    reports = []
    run_tokenize(text, on_progress=reports.append, large_threshold=100, filter_chunk_size=50)
    assert reports == sorted(reports)
    assert reports[-1] == 100
    assert len(reports) > 2


def test_yields_between_chunks():
    yields = []

    async def count_yield():
        yields.append(1)
        await asyncio.sleep(0)

    text = " ".join(["gamma"] * 100)
    run_tokenize(text, chunk_size=60, yield_control=count_yield)
    assert len(yields) >= 5


def test_empty_and_blank_text():
    reports = []
    assert len(run_tokenize("", on_progress=reports.append)) == 0
    assert reports == [100]
    assert run_tokenize(" \n\t ") == TokenStream(())


def test_token_stream_helpers():
    stream = TokenStream.from_words(["one", "", "two", "three"])
    assert len(stream) == 3
    assert stream.word_at(1) == "two"
    assert stream.word_at(10) == ""
    assert stream.word_at(-1) == ""
    assert stream.words_in_range(1, 5) == ["two", "three"]
    assert stream.words_in_range(-3, 1) == ["one"]
