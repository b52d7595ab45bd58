"""
测试公共夹具
"""

import pytest

from cantoinput.engine import (Charset, EngineConfig, SessionContext, load_conversion_table,
                               load_dictionary, load_punctuation_map)


DICT_LINES = [
    "nei 你 妳 尼",
    "neihou 你好",
    "hou 好 號 毫",
    "hai 係 喺 系",
    "gwok 國",
    "gwongdung 廣東",
    "gwongdungwaa 廣東話",
    "zung 中 種",
    "zunggwok 中國",
]

TRAD_SIMP_LINES = [
    "號 号",
    "係 系",
    "國 国",
    "廣 广",
    "東 东",
    "話 话",
    "種 种",
]

PUNCT_LINES = [
    ", ，",
    ". 。",
    "! ！",
    "? ？",
    "< 《",
    "> 》",
]


@pytest.fixture
def dictionary():
    return load_dictionary(DICT_LINES)


@pytest.fixture
def trad_simp():
    return load_conversion_table(TRAD_SIMP_LINES)


@pytest.fixture
def punctuation():
    return load_punctuation_map(PUNCT_LINES)


@pytest.fixture
def context(dictionary, punctuation):
    return SessionContext(dictionary=dictionary, punctuation=punctuation)


@pytest.fixture
def simplified_context(dictionary, trad_simp, punctuation):
    return SessionContext(
        dictionary=dictionary,
        charset=Charset.SIMPLIFIED,
        conversion_table=trad_simp,
        punctuation=punctuation,
    )


@pytest.fixture
def twenty_context(punctuation):
    """20 个候选：a → 甲00 ... 甲19"""
    words = " ".join(f"甲{i:02d}" for i in range(20))
    return SessionContext(dictionary=load_dictionary([f"a {words}"]), punctuation=punctuation)


@pytest.fixture
def data_dir(tmp_path):
    """最小数据目录"""
    (tmp_path / "input-yale.txt").write_text("\n".join(DICT_LINES) + "\n", encoding="utf-8")
    (tmp_path / "input-jyutping.txt").write_text("nei 你\nngo 我\n", encoding="utf-8")
    (tmp_path / "input-pinyin.txt").write_text("ni 你 妳\nnihao 你好\nguo 國 過\n", encoding="utf-8")
    (tmp_path / "trad-simp.txt").write_text("\n".join(TRAD_SIMP_LINES) + "\n", encoding="utf-8")
    (tmp_path / "punct.txt").write_text("\n".join(PUNCT_LINES) + "\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def config(data_dir):
    return EngineConfig(data_dir=str(data_dir))
