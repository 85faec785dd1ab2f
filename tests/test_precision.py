import math

from precision import ANSWER_TOLERANCE, clean_number_str, is_close, round_sig


def test_round_sig_removes_float_noise():
    assert round_sig(0.1 + 0.2) == 0.3
    assert round_sig(0.15 * 100) == 15
    assert round_sig(1234.5678, 4) == 1235.0
    assert round_sig(0.000123456, 2) == 0.00012


def test_round_sig_passthrough():
    assert round_sig(7) == 7 and isinstance(round_sig(7), int)
    assert round_sig(0.0) == 0.0
    assert math.isinf(round_sig(math.inf))


def test_is_close():
    assert is_close(0.25, 0.25)
    assert is_close(0.3, 0.1 + 0.2)
    assert not is_close(0.25, 0.25 + 10 * ANSWER_TOLERANCE)
    assert not is_close(None, 1)
    assert not is_close(math.nan, math.nan)


def test_clean_number_str():
    assert clean_number_str(5) == "5"
    assert clean_number_str(2.0) == "2"
    assert clean_number_str(0.5) == "0.5"
    assert clean_number_str(100.0) == "100"
    assert clean_number_str(1e-06) == "0.000001"
    assert clean_number_str(-3) == "-3"
    assert clean_number_str(-0.0) == "0"


def test_clean_number_str_reparses_exactly():
    for x in [0.1, 0.0123, 1234.5, 0.000999, 99999.99, 1 / 8]:
        assert float(clean_number_str(x)) == x
