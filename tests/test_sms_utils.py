import pytest

from smsverify.utils.code_utils import codes_match, generate_confirmation_code
from smsverify.utils.sms_utils import chunk_message, default_confirmation_message, fits_single_message, is_blank


def test_generated_code_is_6_digits():
    code = generate_confirmation_code()
    assert len(code) == 6
    assert code.isdigit()


def test_generated_code_custom_length_and_alphabet():
    code = generate_confirmation_code(8, alphabet="ABC")
    assert len(code) == 8
    assert set(code) <= set("ABC")


def test_generated_code_rejects_non_positive_length():
    with pytest.raises(ValueError):
        generate_confirmation_code(0)


def test_codes_match_is_case_insensitive():
    assert codes_match("abc123", "ABC123")
    assert not codes_match("abc123", "abc124")


def test_codes_match_does_not_trim_whitespace():
    assert not codes_match("123456", " 123456 ")
    assert not codes_match("123456", "123456\n")


def test_blank_codes_never_match():
    assert not codes_match(None, "")
    assert not codes_match("", "")
    assert not codes_match("abc123", None)
    assert not codes_match("   ", "   ")


def test_confirmation_message_includes_code():
    message = default_confirmation_message("ABC123")
    assert "ABC123" in message
    assert fits_single_message(message)


def test_chunk_400_characters():
    text = "x" * 400
    chunks = chunk_message(text)
    assert [len(chunk) for chunk in chunks] == [160, 160, 80]
    assert "".join(chunks) == text


def test_chunk_keeps_newlines_and_order():
    text = ("line one\n" * 30) + "end"
    chunks = chunk_message(text, 50)
    assert "".join(chunks) == text
    assert all(len(chunk) <= 50 for chunk in chunks[:-1])
    assert all(len(chunk) == 50 for chunk in chunks[:-1])


def test_chunk_exact_limit_is_one_segment():
    assert chunk_message("y" * 160) == ["y" * 160]


def test_chunk_empty_text():
    assert chunk_message("") == []


def test_chunk_rejects_bad_limit():
    with pytest.raises(ValueError):
        chunk_message("abc", 0)


def test_is_blank():
    assert is_blank(None)
    assert is_blank("   \n")
    assert not is_blank(" hi ")
