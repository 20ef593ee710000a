import unicodedata

from hypothesis import given, settings
from hypothesis import strategies as st

from src.utils.text_cleaner import (
    clean_html,
    extract_first_image,
    fold_accents,
    normalize_key,
    normalize_search_text,
    normalize_text,
)


def test_clean_html_removes_boilerplate_and_scripts():
    html = """
    <div><style>.x{}</style><script>alert(1)</script>
      <p>Festival de Mariachi &amp; Folklor en el parque</p>
      <p>Leer más</p>
      <p>The post Festival appeared first on San José Spotlight.</p>
    </div>
    """
    cleaned = clean_html(html)
    assert "alert(1)" not in cleaned
    assert "Leer más" not in cleaned
    assert "appeared first" not in cleaned
    assert cleaned == "Festival de Mariachi & Folklor en el parque"


def test_clean_html_empty_input():
    assert clean_html("") == ""
    assert clean_html(None) == ""


def test_extract_first_image():
    html = '<p>Hola</p><img alt="x"><img src=" https://cdn.example.com/a.jpg "><img src="b.jpg">'
    assert extract_first_image(html) == "https://cdn.example.com/a.jpg"
    assert extract_first_image("<p>sin imagen</p>") is None
    assert extract_first_image("") is None


def test_search_text_folds_accents_and_symbols():
    assert normalize_search_text("  Café  Niño-Pro! ") == "cafe nino-pro"
    assert fold_accents("San José") == "San Jose"


def test_normalize_key_drops_dashes():
    assert normalize_key("Sofá - Cama  Nueva") == normalize_key("sofa cama nueva")


@given(text=st.text().filter(lambda s: "&" not in unicodedata.normalize("NFKC", s)))
@settings(max_examples=75)
def test_normalize_text_idempotent_property(text: str) -> None:
    once = normalize_text(text)
    assert normalize_text(once) == once
    for forbidden in ("\n", "\r", "\x00"):
        assert forbidden not in once


@given(text=st.text())
@settings(max_examples=75)
def test_search_text_is_ascii_and_idempotent(text: str) -> None:
    once = normalize_search_text(text)
    assert normalize_search_text(once) == once
    assert all(ch.isascii() for ch in once)
