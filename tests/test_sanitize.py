from upilink.services.sanitize import sanitize_note, sanitize_text


def test_strips_diacritics_and_truncates():
    assert sanitize_text("Café Déjà-vu!!", 8) == "Cafe Dej"


def test_output_is_printable_ascii():
    result = sanitize_text("Ramesh ₹ Kirana 🛒 Störe")
    assert result == "Ramesh Kirana Store"
    assert all(" " <= char <= "~" for char in result)


def test_whitespace_is_collapsed_and_trimmed():
    assert sanitize_text("  Tea\tand\n\nsnacks  ") == "Tea and snacks"


def test_default_limit_is_forty():
    assert len(sanitize_text("x" * 100)) == 40


def test_truncation_does_not_leave_trailing_space():
    assert sanitize_text("abcd efgh", 5) == "abcd"


def test_empty_and_non_latin_inputs():
    assert sanitize_text("") == ""
    assert sanitize_text("राम") == ""


def test_note_drops_payout_unsafe_punctuation():
    assert sanitize_note("Rent (May)! #42 @home") == "Rent May 42 home"


def test_note_respects_limit():
    assert sanitize_note("Dinner, drinks & dessert", 10) == "Dinner, dr"
