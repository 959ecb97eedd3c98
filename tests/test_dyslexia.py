import pytest

from accessibility import AppSettings, accessibility_styles, chunk_content, dyslexia_styles


def test_defaults_produce_no_dyslexia_styles():
    styles = dyslexia_styles(AppSettings())
    assert styles.css_variables == {}
    assert styles.root_classes == []


def test_dyslexia_mode_variables_and_classes():
    settings = AppSettings(
        dyslexia_mode=True,
        dyslexia_font=True,
        dyslexia_line_spacing=1.75,
        dyslexia_color_overlay="cream",
    )
    styles = dyslexia_styles(settings)

    assert styles.css_variables == {
        "--font-family-base": "OpenDyslexic, sans-serif",
        "--line-height-base": "1.75",
        "--background-overlay": "oklch(0.96 0.01 85)",
    }
    assert styles.root_classes == ["dyslexia-mode", "dyslexia-overlay"]


def test_line_height_uses_compact_format():
    styles = dyslexia_styles(AppSettings(dyslexia_mode=True, dyslexia_line_spacing=2.0))
    assert styles.css_variables["--line-height-base"] == "2"


def test_accessibility_styles_add_sizes_and_flags():
    settings = AppSettings(font_size="large", math_font_size="small", reduced_motion=True, high_contrast=True)
    settings.adhd.minimize_distractions = True

    styles = accessibility_styles(settings)

    assert styles.css_variables["--base-font-size"] == "18px"
    assert styles.css_variables["--math-font-size"] == "0.9em"
    assert styles.root_classes == ["reduce-motion", "high-contrast", "minimize-distractions"]
    assert "cssVariables" in styles.model_dump(by_alias=True)


def test_chunk_content_groups_sentences():
    assert chunk_content("One. Two! Three? Four.", chunk_size=2) == ["One. Two!", "Three? Four."]
    assert chunk_content("No punctuation here") == ["No punctuation here"]


def test_chunk_content_rejects_bad_size():
    with pytest.raises(ValueError):
        chunk_content("One.", chunk_size=0)
