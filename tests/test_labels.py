import pytest

from core.labels import CLASSES, NUM_CLASSES, get_classes, index_for_label, is_label, label_for_index


def test_label_table():
    assert NUM_CLASSES == 36
    assert len(set(CLASSES)) == 36
    assert CLASSES[:10] == [str(d) for d in range(10)]
    assert CLASSES[10] == "a" and CLASSES[-1] == "z"


def test_get_classes_returns_copy():
    classes = get_classes()
    classes.append("!")
    assert len(CLASSES) == 36


def test_lookup_both_ways():
    assert label_for_index(0) == "0"
    assert label_for_index(35) == "z"
    assert index_for_label("A") == 10
    assert index_for_label(" 9 ") == 9
    assert is_label("Q") and not is_label("?")


@pytest.mark.parametrize("index", [-1, 36, 100])
def test_index_out_of_range(index):
    with pytest.raises(IndexError):
        label_for_index(index)


def test_unknown_label():
    with pytest.raises(KeyError):
        index_for_label("space")
