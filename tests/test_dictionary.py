"""
词典加载与前缀查询测试
"""

import pytest

from cantoinput.engine import Dictionary, load_dictionary, lookup_prefix


class TestLoadDictionary:
    """词典加载"""

    def test_key_and_value(self):
        """键为首个词元，值为剩余部分（去除首尾空白）"""
        d = load_dictionary(["nei   你 妳 尼  "])
        assert d.get("nei") == "你 妳 尼"

    def test_tab_separated(self):
        d = load_dictionary(["hou\t好\t號"])
        assert d.get("hou") == "好\t號"
        assert lookup_prefix(d, "hou") == [("hou", "好\t號")]

    def test_line_without_value_skipped(self):
        """无值行跳过，不影响后续行"""
        d = load_dictionary(["nei", "", "   ", "hou 好"])
        assert "nei" not in d
        assert d.get("hou") == "好"
        assert len(d) == 1

    def test_bad_lines_do_not_abort(self):
        d = load_dictionary(["nei 你", None, b"bytes", "hou 好"])
        assert d.keys == ("hou", "nei")

    def test_repeated_keys_merged_in_file_order(self):
        d = load_dictionary(["gam 咁 今", "hou 好", "gam 錦"])
        assert d.get("gam") == "咁 今 錦"

    def test_keys_sorted(self):
        d = load_dictionary(["zung 中", "a 亞", "nei 你", "hou 好"])
        assert list(d.keys) == sorted(d.keys)

    def test_missing_file_yields_empty(self, tmp_path):
        """文件缺失返回空词典，不抛异常"""
        d = load_dictionary(tmp_path / "missing.txt")
        assert len(d) == 0
        assert lookup_prefix(d, "nei") == []

    def test_load_from_path(self, tmp_path):
        path = tmp_path / "input-test.txt"
        path.write_text("\ufeffnei 你\nneihou 你好\n", encoding="utf-8")
        d = load_dictionary(path)
        assert d.name == "input-test.txt"
        assert d.get("nei") == "你"

    def test_only_newlines_split_lines(self, tmp_path):
        """U+2028、\\x0c 等分隔符不断行，\\r\\n 照常断行"""
        path = tmp_path / "seps.txt"
        path.write_bytes("nei 你\u2028妳\r\nhou 好\x0c號\nhai 係\n".encode("utf-8"))
        d = load_dictionary(path)
        assert d.get("nei") == "你\u2028妳"
        assert d.get("hou") == "好\x0c號"
        assert d.get("hai") == "係"
        assert len(d) == 3

    def test_invalid_utf8_replaced(self, tmp_path):
        path = tmp_path / "broken.txt"
        path.write_bytes("nei 你\n".encode("utf-8") + b"bad \xff\xfe\n" + "hou 好\n".encode("utf-8"))
        d = load_dictionary(path)
        assert d.get("nei") == "你"
        assert d.get("hou") == "好"
        assert "bad" in d


class TestLookupPrefix:
    """前缀范围查询"""

    def test_returns_all_prefixed_in_order(self, dictionary):
        result = lookup_prefix(dictionary, "gw")
        assert [k for k, _ in result] == ["gwok", "gwongdung", "gwongdungwaa"]

    def test_exact_match_first(self, dictionary):
        result = lookup_prefix(dictionary, "nei")
        assert result == [("nei", "你 妳 尼"), ("neihou", "你好")]

    def test_no_match(self, dictionary):
        assert lookup_prefix(dictionary, "xyz") == []

    def test_prefix_longer_than_keys(self, dictionary):
        assert lookup_prefix(dictionary, "neihoumaa") == []

    def test_matches_brute_force(self, dictionary):
        """与逐键比较结果一致：无遗漏、无多余"""
        for prefix in ["n", "ne", "h", "g", "gwong", "z", "zung", "a", "zz"]:
            expected = sorted((k, dictionary.get(k)) for k in dictionary.keys if k.startswith(prefix))
            assert lookup_prefix(dictionary, prefix) == expected

    def test_empty_prefix_rejected(self, dictionary):
        with pytest.raises(ValueError):
            lookup_prefix(dictionary, "")

    def test_digit_keys(self):
        d = load_dictionary(["nei5 你", "nei5hou2 你好", "nei6 膩"])
        assert [k for k, _ in lookup_prefix(d, "nei5")] == ["nei5", "nei5hou2"]

    def test_empty_dictionary(self):
        assert Dictionary().lookup_prefix("a") == []
