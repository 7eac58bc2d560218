import pytest
from src.vm_translator.diagnostics import error, TranslationError, DuplicateLabelError

def test_error_str():
    d = error("etiqueta redefinida", line=12, file="Main", source="label LOOP", hint="use otro nombre")
    s = str(d)
    assert s.startswith("Main:12: ")
    assert "ERROR: etiqueta redefinida" in s
    assert "en 'label LOOP'" in s
    assert "(pista: use otro nombre)" in s

def test_error_without_location():
    assert str(error("falló")) == "ERROR: falló"

def test_translation_error_carries_diagnostic():
    d = error("duplicada", line=3, file="Sys")
    with pytest.raises(TranslationError) as info:
        raise DuplicateLabelError(d)
    assert info.value.diagnostic is d
    assert str(info.value) == "Sys:3: ERROR: duplicada"
