from dndbot.plot import summary, to_frame
from dndbot.roll_parser import analyze


def test_to_frame():
    data = to_frame(analyze("d4"))
    assert list(data.columns) == ["value", "probability"]
    assert list(data["value"]) == [1, 2, 3, 4]
    assert list(data["probability"]) == [0.25] * 4


def test_summary():
    text = summary("2d6", analyze("2d6"))
    assert "**Input:** 2d6" in text
    assert "**Range:** 2 to 12" in text
    assert "**Most likely:** 7 (16.67%)" in text
    assert "**Mean:** 7.00" in text
    assert "**Total weight:** 36" in text
