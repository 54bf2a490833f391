import logging

import pytest

from services.energy import FormulaError, compile_formula, compute_energy, validate_formula


def test_default_formula():
    assert compute_energy(2000, 1.5) == pytest.approx(3.0)


@pytest.mark.parametrize('formula', [None, '', '   '])
def test_blank_formula_uses_default(formula):
    assert compute_energy(2000, 1.5, formula) == pytest.approx(3.0)


def test_custom_formula():
    assert compute_energy(2000, 1.5, '(power/1000) * time * 0.5') == pytest.approx(1.5)
    assert compute_energy(1000, 2, '-(-power) / 1000 + time - 2') == pytest.approx(1.0)


def test_legacy_variable_names():
    assert compute_energy(2000, 1.5, '(potenciaWatts / 1000) * tiempoHoras') == pytest.approx(3.0)


@pytest.mark.parametrize('formula', [
    '(power/1000 *',
    'power ** 2',
    'power // 2',
    'power if time else 0',
    'True * power',
    "'1' * 3",
    '[power]',
    'watts * time',
    "__import__('os').system('echo hi')",
    'power.__class__',
    'abs(power)',
    'power / 0',
    '1e308 * 1e308 * power',
    'p' * 300,
])
def test_bad_formula_falls_back_to_default(formula):
    assert compute_energy(2000, 1.5, formula) == pytest.approx(3.0)


def test_fallback_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger='services.energy'):
        compute_energy(1000, 1, 'bad(')
    assert 'bad(' in caplog.text


def test_inputs_are_normalized():
    assert compute_energy('abc', 2) == 0.0
    assert compute_energy('1000', '2') == pytest.approx(2.0)
    assert compute_energy(1000, None, 'power * 3') == pytest.approx(3000.0)


def test_compile_formula_rejects_code():
    with pytest.raises(FormulaError):
        compile_formula("__import__('os')")
    with pytest.raises(FormulaError):
        compile_formula('power +')


def test_compiled_formula_is_plain_function():
    formula = compile_formula('power * time / 1000')
    assert formula(500, 4) == pytest.approx(2.0)
    assert formula(0, 4) == 0.0


def test_validate_formula():
    assert validate_formula('time * 2') is None
    assert validate_formula('open("x")') is not None
    assert validate_formula(42) == 'Formula must be text'
