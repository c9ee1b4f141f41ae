from textatlas.text import detect_script, get_script, split_by_script
from textatlas.utils.enums import Script


def test_get_script():
    assert get_script(ord("a")) == Script.latin
    assert get_script(ord("Z")) == Script.latin
    assert get_script(ord("é")) == Script.latin
    assert get_script(0x05D0) == Script.hebrew
    assert get_script(0x0627) == Script.arabic
    assert get_script(0x4E00) == Script.han
    assert get_script(0x3042) == Script.hiragana
    assert get_script(0x30AB) == Script.katakana
    assert get_script(0xAC00) == Script.hangul
    assert get_script(0x0995) == Script.bengali
    assert get_script(0x0E01) == Script.thai
    assert get_script(0x0915) == Script.devanagari

    # Common characters
    for c in " 1.,!?-\n،ـ।ー":
        assert get_script(ord(c)) is None, repr(c)
    assert get_script(0x1F600) is None


def test_detect_script():
    assert detect_script("") == Script.common
    assert detect_script("123 !?") == Script.common
    assert detect_script("hello") == Script.latin
    assert detect_script("שלום") == Script.hebrew
    assert detect_script("مرحبا") == Script.arabic
    assert detect_script("日本語") == Script.han
    assert detect_script("ひらがな") == Script.hiragana

    # Mixed: the most frequent script wins
    assert detect_script("ab שלום") == Script.hebrew
    assert detect_script("abcd שלום") == Script.latin  # tie goes to first


def test_split_by_script():
    text = "abcकि def"
    pieces = list(split_by_script(text))
    assert pieces == [
        (0, 3, Script.latin),
        (3, 6, Script.devanagari),
        (6, 9, Script.latin),
    ]

    # Leading common chars join the first script
    assert list(split_by_script("12 abc")) == [(0, 6, Script.latin)]

    # Only common chars
    assert list(split_by_script("12 !")) == [(0, 4, Script.common)]

    # Empty
    assert list(split_by_script("")) == []


def test_split_by_script_sub_range():
    text = "abcשלוםdef"
    assert list(split_by_script(text, 3, 7)) == [(3, 7, Script.hebrew)]
    assert list(split_by_script(text, 2, 8)) == [
        (2, 3, Script.latin),
        (3, 7, Script.hebrew),
        (7, 8, Script.latin),
    ]


def test_split_covers_text():
    text = "Hello, 世界! こんにちは 123 안녕"
    pieces = list(split_by_script(text))
    assert pieces[0][0] == 0
    assert pieces[-1][1] == len(text)
    for (_, stop1, script1), (start2, _, script2) in zip(pieces, pieces[1:]):
        assert stop1 == start2
        assert script1 != script2


if __name__ == "__main__":
    for ob in list(globals().values()):
        if callable(ob) and ob.__name__.startswith("test_"):
            print(f"{ob.__name__} ...")
            ob()
    print("done")
