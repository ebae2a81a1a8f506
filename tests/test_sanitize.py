from services.sanitize import sanitize_text


def test_html_is_escaped():
    assert sanitize_text('<img src="x" onerror=alert(1)>') == "&lt;img src=&quot;x&quot; onerror=alert(1)&gt;"


def test_control_characters_are_dropped_and_text_trimmed():
    assert sanitize_text("  ola\x00 mundo\x07\n") == "ola mundo"


def test_line_breaks_inside_text_are_kept():
    assert sanitize_text("linha 1\nlinha 2") == "linha 1\nlinha 2"
