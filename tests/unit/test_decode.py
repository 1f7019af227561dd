import pytest

from ruian_addresses.common.errors import ConfigError
from ruian_addresses.pipeline.decode import open_text


def test_open_text_decodes_czech_diacritics():
    raw = "Golčův Jeníkov;Nám. T. G. Masaryka".encode("cp1250")
    assert open_text(raw).read() == "Golčův Jeníkov;Nám. T. G. Masaryka"


def test_open_text_accepts_binary_stream():
    import io

    stream = io.BytesIO("Žďár nad Sázavou".encode("cp1250"))
    assert open_text(stream).read() == "Žďár nad Sázavou"


def test_strict_policy_raises_on_unmapped_byte():
    with pytest.raises(UnicodeDecodeError):
        open_text(b"abc\x81def").read()


def test_replace_policy_substitutes_replacement_character():
    assert open_text(b"abc\x81def", errors="replace").read() == "abc�def"


def test_unknown_policy_is_rejected():
    with pytest.raises(ConfigError):
        open_text(b"abc", errors="ignore")


def test_open_text_decodes_multibyte_text_across_read_calls():
    stream = open_text("Říčany;Ústí\r\n".encode("cp1250"))
    assert stream.read(3) == "Říč"
    assert stream.read() == "any;Ústí\r\n"
